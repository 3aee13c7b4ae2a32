"""Protocol definitions for dependency injection and interface contracts."""

from datetime import datetime
from typing import Protocol

from .models import Session


class TokenProvider(Protocol):
    """Protocol for authentication token providers."""

    async def token(self, timeout: float | None = None) -> str:
        """Get the current authentication token.

        Returns:
            Valid bearer token string.

        Raises:
            ClosedError: If the provider has been shut down.
            TimeoutError: If no token arrived within timeout seconds.
        """
        ...

    @property
    def user_id(self) -> str:
        """ID of the logged in user."""
        ...

    async def close(self) -> None:
        """Stop handing out tokens."""
        ...


class LoginTransport(Protocol):
    """Protocol for performing a single login call."""

    async def login(self, username: str, password: str) -> Session:
        """Log in once.

        Returns:
            Session whose expiry lies in the future.

        Raises:
            LoginError: If the attempt failed for any reason.
        """
        ...


class Clock(Protocol):
    """Protocol for reading the time and sleeping until a point in time."""

    def now(self) -> datetime:
        """Current time, timezone-aware."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend for the given number of seconds."""
        ...

    async def sleep_until(self, when: datetime) -> None:
        """Suspend until when; return at once if it has passed."""
        ...

"""Login and register calls against the Wekan server."""

import logging

import httpx
from pydantic import ValidationError

from .config import Config
from .consts import MIME_JSON
from .exceptions import LoginError
from .models import BadRequestResponse, LoginResponse, Session

logger = logging.getLogger("wekan-client.login")


class WekanLogin:
    """HTTP implementation of the LoginTransport protocol.

    Each call performs exactly one request and raises LoginError for
    anything but a well-formed 200 response. Retrying is left to the caller.
    """

    def __init__(self, config: Config, http_client: httpx.AsyncClient):
        """Initialize WekanLogin.

        Args:
            config: Config instance providing the server address.
            http_client: HTTP client, shared with the API request plumbing.
        """
        self.config = config
        self.http_client = http_client

    async def login(self, username: str, password: str) -> Session:
        """Log in with username and password.

        Clients log in on their own; calling this is only needed to check
        credentials without creating a client.

        Raises:
            LoginError: If the server rejected the login or could not be reached.
        """
        return await self._login_or_register(
            self.config.login_url, {"username": username, "password": password}
        )

    async def register(self, username: str, password: str, email: str) -> Session:
        """Register a new user and return its first session.

        Raises:
            LoginError: If the server rejected the registration or could not
                be reached.
        """
        return await self._login_or_register(
            self.config.register_url,
            {"username": username, "password": password, "email": email},
        )

    async def _login_or_register(self, url: str, params: dict[str, str]) -> Session:
        """POST form-encoded params and decode the session from the reply.

        Login and register share request and response formats.
        """
        logger.debug(f"POST {url} for {params['username']!r}")
        try:
            response = await self.http_client.post(
                url, data=params, headers={"Accept": MIME_JSON}
            )
        except httpx.HTTPError as e:
            raise LoginError(
                f"Failed to send login request: {e}",
                suggestions=["Check the server address and your network connection"],
                context={"url": url},
            ) from e

        if response.status_code == httpx.codes.BAD_REQUEST:
            try:
                bad_request = BadRequestResponse.model_validate_json(response.content)
            except ValidationError as e:
                raise LoginError(
                    "Failed to parse response of bad request",
                    errors=[err["msg"] for err in e.errors()],
                    context={"url": url, "status_code": response.status_code},
                ) from e
            raise LoginError(
                f"Bad request: {bad_request.reason} ({bad_request.error})",
                errors=[bad_request.reason],
                suggestions=["Verify username and password"],
                context={"url": url, "status_code": response.status_code},
            )

        if response.status_code != httpx.codes.OK:
            raise LoginError(
                f"Unexpected status code {response.status_code} received",
                context={"url": url, "status_code": response.status_code},
            )

        try:
            login_response = LoginResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise LoginError(
                "Failed to parse login response",
                errors=[err["msg"] for err in e.errors()],
                suggestions=["This may indicate an incompatible Wekan version"],
                context={"url": url},
            ) from e

        return login_response.to_session()

"""Wekan client — handles low-level API calls."""

import logging
from typing import Any

import httpx

from .config import Config, get_config
from .consts import API_URL_PATH, MIME_JSON, USER_AGENT
from .exceptions import ConfigError, NotFoundError
from .login import WekanLogin
from .models import Session
from .protocols import Clock, TokenProvider
from .session import SessionManager

logger = logging.getLogger("wekan-client.client")


class WekanClient:
    """Wekan API client with authentication.

    Responsibilities:
    - Provide authenticated JSON request methods for the REST API
    - Handle HTTP errors and empty responses

    Tokens come from a TokenProvider, normally a SessionManager that logs in
    and renews in the background. Use WekanClient.create() to build one.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        config: Config | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize WekanClient.

        Args:
            token_provider: Source of bearer tokens.
            config: Config instance. If None, uses get_config().
            http_client: HTTP client. If None, creates a new one which is
                closed together with the client.
        """
        self.config = config or get_config()
        self.token_provider = token_provider

        self._owns_http_client = http_client is None
        self.http_client = http_client or _new_http_client(self.config)
        self.login_transport = WekanLogin(self.config, self.http_client)

        logger.info(f"Wekan client created for {self.config.remote_addr}")

    @classmethod
    async def create(
        cls,
        config: Config | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: Clock | None = None,
        timeout: float | None = None,
    ) -> "WekanClient":
        """Log in and return a client whose token renews itself.

        Waits until the first login succeeds; failed attempts are retried at
        config.login_retry_seconds.

        Raises:
            ConfigError: If no username is configured.
            TimeoutError: If timeout elapsed before a login succeeded.
            asyncio.CancelledError: If the awaiting task was cancelled.
        """
        config = config or get_config()
        if not config.username:
            raise ConfigError(
                "No username configured",
                suggestions=["Set WEKAN_USERNAME and WEKAN_PASSWORD"],
                context={"remote_addr": config.remote_addr},
            )

        own_http_client = http_client is None
        http_client = http_client or _new_http_client(config)
        try:
            session_manager = await SessionManager.create(
                WekanLogin(config, http_client), config, clock=clock, timeout=timeout
            )
        except BaseException:
            if own_http_client:
                await http_client.aclose()
            raise

        client = cls(session_manager, config, http_client)
        client._owns_http_client = own_http_client
        return client

    @property
    def user_id(self) -> str:
        """ID of the user the client is logged in as."""
        return self.token_provider.user_id

    @staticmethod
    def endpoint(*segments: str) -> str:
        """Build an API path from segments, e.g. endpoint("boards", board_id)."""
        path = "/".join(segment.strip("/") for segment in segments if segment)
        return f"{API_URL_PATH}/{path}"

    async def login(self, username: str, password: str) -> Session:
        """Log in once with other credentials; see WekanLogin.login."""
        return await self.login_transport.login(username, password)

    async def register(self, username: str, password: str, email: str) -> Session:
        """Register a new user; see WekanLogin.register."""
        return await self.login_transport.register(username, password, email)

    async def get_json(self, endpoint: str, **kwargs) -> Any:
        """Get JSON from an API endpoint with authentication.

        Args:
            endpoint: Path below the server address, see endpoint().
            **kwargs: Additional arguments for httpx.request.

        Returns:
            Parsed JSON data.

        Raises:
            ClosedError: If the client has been closed.
            NotFoundError: If the server answered with an empty body.
            httpx.HTTPStatusError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        response = await self._send("GET", endpoint, **kwargs)
        return self._parse_json(response, endpoint)

    async def post_json(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        """Post a JSON body to an API endpoint with authentication.

        Raises:
            Same as get_json().
        """
        response = await self._send("POST", endpoint, json=body, **kwargs)
        return self._parse_json(response, endpoint)

    async def put_json(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        """Put a JSON body to an API endpoint with authentication.

        Raises:
            Same as get_json().
        """
        response = await self._send("PUT", endpoint, json=body, **kwargs)
        return self._parse_json(response, endpoint)

    async def delete(self, endpoint: str, **kwargs) -> None:
        """Delete the resource at an API endpoint; the response body is ignored."""
        await self._send("DELETE", endpoint, **kwargs)

    async def close(self) -> None:
        """Stop token renewal and release the HTTP client if we created it."""
        await self.token_provider.close()
        if self._owns_http_client:
            await self.http_client.aclose()
        logger.info(f"Wekan client for {self.config.remote_addr} closed")

    async def __aenter__(self) -> "WekanClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        headers["Accept"] = MIME_JSON

        token = await self.token_provider.token()
        headers["Authorization"] = f"Bearer {token}"

        url = f"{self.config.remote_addr}{endpoint}"
        logger.debug(f"{method} {url}")
        response = await self.http_client.request(method, url, headers=headers, **kwargs)
        response.raise_for_status()
        logger.debug(f"{method} {url} successful")
        return response

    @staticmethod
    def _parse_json(response: httpx.Response, endpoint: str) -> Any:
        # Wekan replies 200 with no content for missing resources.
        if not response.content.strip():
            raise NotFoundError(
                f"Nothing found at {endpoint}", context={"endpoint": endpoint}
            )
        data = response.json()
        if data is None:
            raise NotFoundError(
                f"Nothing found at {endpoint}", context={"endpoint": endpoint}
            )
        return data


def _new_http_client(config: Config) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=config.timeout_seconds,
        follow_redirects=True,
    )

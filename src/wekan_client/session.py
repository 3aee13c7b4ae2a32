"""Authenticated session with background token renewal."""

import asyncio
import contextlib
import logging
import math
import threading
from datetime import timedelta

from .broker import TokenBroker
from .clock import SystemClock
from .config import Config
from .consts import MIN_LOGIN_RETRY_SECONDS, TOKEN_RENEWAL_MARGIN_SECONDS
from .exceptions import ClosedError, WekanError
from .models import Session
from .protocols import Clock, LoginTransport

logger = logging.getLogger("wekan-client.session")

RENEWAL_MARGIN = timedelta(seconds=TOKEN_RENEWAL_MARGIN_SECONDS)


class SessionManager:
    """Keeps a valid bearer token available for the lifetime of a client.

    Responsibilities:
    - Log in before the manager is handed out, retrying until it works
    - Renew the token shortly before it expires
    - Answer token requests through a TokenBroker

    A single background task owns the current Session. It is the only code
    that replaces it; everyone else receives copies of the token through the
    broker. Use SessionManager.create() to obtain a running manager.
    """

    def __init__(
        self,
        transport: LoginTransport,
        config: Config,
        *,
        clock: Clock | None = None,
        retry_interval: float | None = None,
    ):
        """Initialize SessionManager without logging in.

        Args:
            transport: Performs single login attempts.
            config: Credentials to log in with.
            clock: Time source for retries and renewal. Defaults to SystemClock.
            retry_interval: Seconds between failed login attempts. Defaults to
                config.login_retry_seconds. Values below one second and
                non-finite values mean one second.
        """
        self.transport = transport
        self.config = config
        self.clock = clock or SystemClock()
        if retry_interval is None:
            retry_interval = config.login_retry_seconds
        if (
            not math.isfinite(retry_interval)
            or retry_interval < MIN_LOGIN_RETRY_SECONDS
        ):
            retry_interval = MIN_LOGIN_RETRY_SECONDS
        self.retry_interval = retry_interval

        self._broker = TokenBroker()
        self._task: asyncio.Task | None = None
        self._closed = False

        self._user_id_lock = threading.Lock()
        self._user_id = ""

    @classmethod
    async def create(
        cls,
        transport: LoginTransport,
        config: Config,
        *,
        clock: Clock | None = None,
        retry_interval: float | None = None,
        timeout: float | None = None,
    ) -> "SessionManager":
        """Log in and start the renewal task.

        Blocks until the first login succeeds. Failed attempts are retried
        forever at a fixed interval, so give a timeout or cancel the awaiting
        task to bound the wait.

        Raises:
            TimeoutError: If timeout elapsed before a login succeeded.
            asyncio.CancelledError: If the awaiting task was cancelled.
        """
        manager = cls(transport, config, clock=clock, retry_interval=retry_interval)
        async with asyncio.timeout(timeout):
            session = await manager._login_until_success()
        manager._start(session)
        return manager

    @property
    def user_id(self) -> str:
        """ID of the user from the most recent successful login."""
        with self._user_id_lock:
            return self._user_id

    @property
    def closed(self) -> bool:
        return self._closed

    async def token(self, timeout: float | None = None) -> str:
        """Get the current token.

        Never triggers a login; while a renewal is in progress the request
        waits for it to finish.

        Raises:
            ClosedError: If the manager is or becomes closed.
            TimeoutError: If timeout elapsed first.
        """
        if self._closed:
            raise ClosedError()
        if self._task is None:
            raise WekanError(
                "Session manager has not been started",
                suggestions=["Obtain managers from SessionManager.create()"],
            )
        return await self._broker.request(timeout)

    async def close(self) -> None:
        """Stop the renewal task and fail all token requests with ClosedError."""
        if self._closed:
            return
        self._closed = True
        self._broker.close()

        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        logger.debug("Session manager closed")

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _start(self, session: Session) -> None:
        self._task = asyncio.create_task(self._run(session), name="wekan-session")
        self._task.add_done_callback(self._on_run_done)

    async def _run(self, session: Session) -> None:
        accept = asyncio.create_task(self._broker.accept())
        renewal = self._schedule_renewal(session)
        try:
            while True:
                done, _ = await asyncio.wait(
                    {accept, renewal}, return_when=asyncio.FIRST_COMPLETED
                )

                if renewal in done:
                    renewal.result()
                    logger.info("Token about to expire, renewing")
                    session = await self._login_until_success()
                    renewal = self._schedule_renewal(session)

                if accept in done:
                    self._broker.reply(accept.result(), session.token)
                    accept = asyncio.create_task(self._broker.accept())
        finally:
            accept.cancel()
            renewal.cancel()

    def _schedule_renewal(self, session: Session) -> asyncio.Task:
        return asyncio.create_task(
            self.clock.sleep_until(session.expires_at - RENEWAL_MARGIN)
        )

    def _on_run_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Session task stopped unexpectedly", exc_info=task.exception())
        # Nobody is left to answer requests.
        self._closed = True
        self._broker.close()

    async def _login_until_success(self) -> Session:
        """Attempt to log in over and over again until successful."""
        password = self.config.password.get_secret_value()
        attempt = 0
        while True:
            attempt += 1
            try:
                session = await self.transport.login(self.config.username, password)
            except Exception as e:
                logger.error(
                    f"Login attempt {attempt} for {self.config.username!r} failed: {e}"
                )
                await self.clock.sleep(self.retry_interval)
                continue

            with self._user_id_lock:
                self._user_id = session.user_id
            logger.info(
                f"Logged in as {self.config.username!r}, token expires "
                f"{session.expires_at.isoformat()}"
            )
            return session

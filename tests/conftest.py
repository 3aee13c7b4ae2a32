"""Pytest configuration and shared fixtures"""

import asyncio
import os
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from wekan_client.config import Config
from wekan_client.models import Session

START = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when a test calls advance()."""

    def __init__(self, start: datetime = START):
        self._now = start
        self._sleepers: list[tuple[datetime, asyncio.Future]] = []
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self._now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await self.sleep_until(self._now + timedelta(seconds=seconds))

    async def sleep_until(self, when: datetime) -> None:
        if when <= self._now:
            await asyncio.sleep(0)
            return
        entry = (when, asyncio.get_running_loop().create_future())
        self._sleepers.append(entry)
        try:
            await entry[1]
        finally:
            if entry in self._sleepers:
                self._sleepers.remove(entry)

    def advance(self, seconds: float) -> None:
        """Move time forward and wake everyone whose deadline has passed."""
        self._now += timedelta(seconds=seconds)
        for when, future in list(self._sleepers):
            if when <= self._now and not future.done():
                future.set_result(None)


async def _settle(rounds: int = 20) -> None:
    """Let background tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_session(clock: FakeClock, token: str, user_id: str = "u1", ttl: float = 10):
    """Session issued now, expiring ttl seconds from now."""
    return Session(
        token=token, user_id=user_id, expires_at=clock.now() + timedelta(seconds=ttl)
    )


@pytest.fixture
def clock():
    """Fake clock starting at a fixed instant"""
    return FakeClock()


@pytest.fixture
def settle():
    """Coroutine function that lets background tasks run until they block"""
    return _settle


@pytest.fixture
def config():
    """Config with test credentials"""
    return Config(
        remote_addr="https://wekan.test",
        username="alice",
        password="secret",
        log_level="DEBUG",
    )


@pytest.fixture
def transport_factory(clock):
    """Build a mock login transport from a list of outcomes.

    Each entry is either a token string (login succeeds, 10s lifetime) or an
    exception instance (login fails). The last entry repeats forever.
    """

    def factory(*outcomes, user_id="u1"):
        calls = {"count": 0}

        def login(username, password):
            outcome = outcomes[min(calls["count"], len(outcomes) - 1)]
            calls["count"] += 1
            if isinstance(outcome, Exception):
                raise outcome
            return make_session(clock, outcome, user_id=user_id)

        transport = Mock()
        transport.login = AsyncMock(side_effect=login)
        return transport

    return factory


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears WEKAN_* environment variables.

    This ensures Config tests see the true defaults without interference
    from environment variables that might be set in the user's shell.
    """
    wekan_vars = {
        key: value for key, value in os.environ.items() if key.startswith("WEKAN_")
    }

    for key in wekan_vars:
        os.environ.pop(key, None)

    try:
        yield
    finally:
        for key, value in wekan_vars.items():
            os.environ[key] = value


@pytest.fixture
def clean_config(clean_env):
    """Fixture that provides a Config instance with clean environment."""
    return Config()

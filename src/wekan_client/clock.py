"""Wall-clock implementation of the Clock protocol."""

import asyncio
from datetime import UTC, datetime


class SystemClock:
    """Clock backed by the system time and the running event loop."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def sleep_until(self, when: datetime) -> None:
        await asyncio.sleep(max((when - self.now()).total_seconds(), 0))

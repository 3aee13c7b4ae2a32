"""Rendezvous between token consumers and the session task."""

import asyncio
from collections import deque

from .exceptions import ClosedError


class TokenBroker:
    """Hands the current token to any number of concurrent callers.

    A caller creates a single-use reply slot (a future) and queues it; the
    session task accepts slots one at a time and writes the token into them.
    Writing into a slot never blocks, so a slow or abandoned caller cannot
    stall the session task. Callers in turn race the reply against their own
    cancellation and against shutdown.

    Only the session task calls accept() and reply(); everything else goes
    through request().
    """

    def __init__(self) -> None:
        # Slots waiting to be accepted; a slot leaves as soon as its caller gives up.
        self._slots: deque[asyncio.Future[str]] = deque()
        self._slots_ready = asyncio.Event()
        # Slots handed out but not yet resolved, queued or already accepted.
        self._pending: set[asyncio.Future[str]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def request(self, timeout: float | None = None) -> str:
        """Wait for the session task to hand over the current token.

        Args:
            timeout: Seconds to wait at most. None waits until a token
                arrives or the broker closes.

        Returns:
            The token current at the moment the request was accepted.

        Raises:
            ClosedError: If the broker is or becomes closed.
            TimeoutError: If timeout elapsed first.
            asyncio.CancelledError: If the calling task was cancelled.
        """
        if self._closed:
            raise ClosedError()

        slot: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._pending.add(slot)
        slot.add_done_callback(self._forget)
        self._slots.append(slot)
        self._slots_ready.set()

        # Cancelling the caller cancels the slot too, so accept() skips it.
        async with asyncio.timeout(timeout):
            return await slot

    async def accept(self) -> asyncio.Future[str]:
        """Wait for the next slot whose caller is still waiting."""
        while True:
            while self._slots:
                slot = self._slots.popleft()
                if not slot.done():
                    return slot
            self._slots_ready.clear()
            await self._slots_ready.wait()

    def reply(self, slot: asyncio.Future[str], token: str) -> bool:
        """Write token into an accepted slot.

        Returns:
            False if the caller gave up in the meantime.
        """
        if slot.done():
            return False
        slot.set_result(token)
        return True

    def close(self) -> None:
        """Fail every outstanding and future request with ClosedError.

        Calling close() more than once is harmless.
        """
        if self._closed:
            return
        self._closed = True

        for slot in list(self._pending):
            if not slot.done():
                slot.set_exception(ClosedError())
        self._pending.clear()
        self._slots.clear()

    def _forget(self, slot: asyncio.Future[str]) -> None:
        self._pending.discard(slot)
        try:
            self._slots.remove(slot)
        except ValueError:
            # Already accepted.
            pass

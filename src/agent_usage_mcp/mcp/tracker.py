"""In-flight request accounting for the stdio server.

The server may exit only once stdin has closed and no dispatched request
is still running, so a slow tool call is never abandoned mid-response.
"""
from __future__ import annotations
import asyncio


class RequestTracker:
    """Counts in-flight requests and signals when it is safe to exit."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.input_closed = False
        self._idle = asyncio.Event()

    @property
    def should_exit(self) -> bool:
        return self.input_closed and self.in_flight == 0

    def enter(self) -> None:
        self.in_flight += 1

    def leave(self) -> None:
        if self.in_flight == 0:
            raise RuntimeError("leave() called with no request in flight")
        self.in_flight -= 1
        self._check_exit()

    def close_input(self) -> None:
        self.input_closed = True
        self._check_exit()

    def _check_exit(self) -> None:
        if self.should_exit:
            self._idle.set()

    async def wait_until_idle(self) -> None:
        """Block until input has closed and every request has finished."""
        await self._idle.wait()

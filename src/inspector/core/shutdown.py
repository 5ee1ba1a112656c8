"""In-flight request tracking for graceful shutdown."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.inspector.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    """Counts in-flight requests so shutdown can wait for them to drain."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    def _signal_if_drained(self) -> None:
        if self._shutting_down and self._in_flight == 0:
            self._drained.set()

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            self._signal_if_drained()

    async def start_shutdown(self) -> None:
        """Enter shutdown mode; /health starts reporting draining."""
        self._shutting_down = True
        logger.info("Shutdown started", in_flight=self._in_flight)
        self._signal_if_drained()

    async def wait_for_drain(self, timeout: float) -> bool:
        """Wait until no requests are in flight. Returns False on timeout."""
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning("Shutdown drain timed out", timeout=timeout, in_flight=self._in_flight)
            return False
        return True


request_tracker = RequestTracker()

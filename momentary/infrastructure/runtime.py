"""Runtime Adapters — asyncio-backed clock and gc-backed reclamation hint.

Invariants:
    - AsyncioClock schedules on the running loop; it never starts a loop itself
    - now() is timezone-aware UTC
    - GcReclamationHint never blocks its caller when a loop is running

Design Decisions:
    - loop.call_later returns asyncio.TimerHandle, which already satisfies TimerHandle
    - Young-generation collection only: a hint, not a full sweep
"""

import asyncio
import gc
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from momentary.core.runtime_protocols import TimerHandle

logger = logging.getLogger(__name__)


class AsyncioClock:
    """Clock backed by the running asyncio event loop."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(
        self, delay_seconds: float, callback: Callable[[], None],
    ) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay_seconds, callback)


class GcReclamationHint:
    """Ask the garbage collector for a young-generation pass."""

    def __init__(self, generation: int = 0):
        self._generation = generation

    def __call__(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            gc.collect(self._generation)
            return
        loop.call_soon(gc.collect, self._generation)


class NoopReclamationHint:
    """Used when reclamation hints are disabled in settings."""

    def __call__(self) -> None:
        logger.debug("Reclamation hint disabled")

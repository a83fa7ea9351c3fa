"""Runtime Protocols — injectable clock, timer and memory-reclamation contracts.

Invariants:
    - Tasks never reach for ambient timers or the garbage collector directly
    - A TimerHandle fires at most once; cancel() after firing is a no-op
    - ReclamationHint is best-effort: callers never depend on its effect

Design Decisions:
    - Protocols so tests substitute a manual clock and skip real wall-clock waits
"""

from collections.abc import Callable
from datetime import datetime
from typing import Protocol


class TimerHandle(Protocol):
    """A scheduled, fire-once callback."""
    def cancel(self) -> None: ...
    def cancelled(self) -> bool: ...


class Clock(Protocol):
    """Time source and one-shot scheduler."""
    def now(self) -> datetime: ...
    def call_later(
        self, delay_seconds: float, callback: Callable[[], None],
    ) -> TimerHandle: ...


class ReclamationHint(Protocol):
    """Non-blocking nudge to the runtime's memory reclaimer."""
    def __call__(self) -> None: ...

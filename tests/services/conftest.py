"""Service test fixtures — manual clock, recording hint and controllable brokers.

Invariants:
    - No fixture waits on wall-clock time: ManualClock.advance() fires timers synchronously
    - Every broker fixture satisfies the StateAccessBroker protocol
    - RecordingBroker records paths only, never values

Design Decisions:
    - Fakes defined here (not in a helpers module): fixtures are the only import path
    - GatedBroker parks read() on an asyncio.Event so tests can interleave dissolve()
"""

from datetime import datetime, timedelta, timezone

import asyncio
import pytest

from momentary.config import Settings
from momentary.core.errors import BrokerError
from momentary.infrastructure.state_broker import InMemoryStateBroker


class ManualTimer:
    def __init__(self, due: datetime, callback):
        self.due = due
        self.callback = callback
        self.fired = False
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualClock:
    """Clock whose time only moves when the test says so."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self._now = start
        self.timers: list[ManualTimer] = []

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay_seconds: float, callback) -> ManualTimer:
        timer = ManualTimer(self._now + timedelta(seconds=delay_seconds), callback)
        self.timers.append(timer)
        return timer

    def advance(self, ms: int) -> None:
        self._now += timedelta(milliseconds=ms)
        for timer in list(self.timers):
            if not timer.fired and not timer.cancelled() and timer.due <= self._now:
                timer.fired = True
                timer.callback()


class RecordingHint:
    def __init__(self):
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


class RecordingBroker(InMemoryStateBroker):
    """In-memory broker that logs which operations touched which path."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.log: list[tuple[str, str]] = []

    async def read(self, path):
        self.log.append(("read", path))
        return await super().read(path)

    async def write(self, path, value):
        self.log.append(("write", path))
        await super().write(path, value)

    async def delete(self, path):
        self.log.append(("delete", path))
        await super().delete(path)


class FailingBroker:
    """Broker whose read always raises the same error instance."""

    def __init__(self):
        self.error = BrokerError("store offline", "read", "/preferences/calculator")

    async def read(self, path):
        raise self.error

    async def write(self, path, value):
        raise self.error

    async def delete(self, path):
        raise self.error

    def active_handles(self) -> int:
        return 0


class GatedBroker(InMemoryStateBroker):
    """Broker whose read() blocks until `release` is set."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.release = asyncio.Event()

    async def read(self, path):
        await self.release.wait()
        return await super().read(path)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def hint():
    return RecordingHint()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def broker():
    return InMemoryStateBroker()


@pytest.fixture
def recording_broker():
    return RecordingBroker()


@pytest.fixture
def failing_broker():
    return FailingBroker()


@pytest.fixture
def gated_broker():
    return GatedBroker()

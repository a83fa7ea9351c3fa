"""Runtime Adapters — tests for the asyncio clock and gc reclamation hint.

Tests cover:
    - AsyncioClock returns aware UTC times and fire-once handles
    - GcReclamationHint defers collection on a running loop, runs inline otherwise
"""

import asyncio
from datetime import timezone

import pytest

from momentary.infrastructure.runtime import AsyncioClock, GcReclamationHint, NoopReclamationHint


@pytest.mark.asyncio
async def test_clock_now_is_utc():
    assert AsyncioClock().now().tzinfo is timezone.utc


@pytest.mark.asyncio
async def test_clock_call_later_fires_once():
    fired = []
    handle = AsyncioClock().call_later(0.01, lambda: fired.append(1))
    await asyncio.sleep(0.05)
    assert fired == [1]
    assert not handle.cancelled()


@pytest.mark.asyncio
async def test_clock_handle_cancel():
    fired = []
    handle = AsyncioClock().call_later(0.01, lambda: fired.append(1))
    handle.cancel()
    await asyncio.sleep(0.03)
    assert fired == []
    assert handle.cancelled()


@pytest.mark.asyncio
async def test_gc_hint_deferred_on_running_loop(monkeypatch):
    calls = []
    monkeypatch.setattr("momentary.infrastructure.runtime.gc.collect", calls.append)
    GcReclamationHint()()
    assert calls == []
    await asyncio.sleep(0)
    assert calls == [0]


def test_gc_hint_inline_without_loop(monkeypatch):
    calls = []
    monkeypatch.setattr("momentary.infrastructure.runtime.gc.collect", calls.append)
    GcReclamationHint(generation=1)()
    assert calls == [1]


def test_noop_hint_does_nothing():
    assert NoopReclamationHint()() is None

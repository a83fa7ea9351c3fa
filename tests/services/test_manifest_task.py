"""Task Manifestation — tests for the manifest() factory and manifested() context.

Tests cover:
    - Defaults: 30s lifetime, ACTIVE, armed timer, unique ids
    - Lifetime taken from ManifestOptions, else from settings
    - Capability policy enforced before any timer is armed
    - The granted capabilities govern the task: no read grant, no broker read
    - manifested() dissolves on normal exit and on exceptions
"""

import uuid

import pytest

from momentary.core.compliance import TaskCapabilities
from momentary.core.errors import CapabilityViolationError
from momentary.schemas.task import ManifestOptions, TaskIntent
from momentary.services.manifest_task import manifest, manifested, resolve_max_lifetime_ms

INTENT = TaskIntent(operation_name="add", operands=(5, 3))


@pytest.mark.asyncio
async def test_manifest_defaults(clock, hint):
    task = await manifest(INTENT, clock=clock, reclamation_hint=hint)
    assert task.purpose == "add"
    assert task.max_lifetime_ms == 30_000
    assert task.manifested_at == clock.now()
    assert task.is_active()
    assert task.has_pending_timer()
    assert uuid.UUID(task.id).version == 4


@pytest.mark.asyncio
async def test_manifest_ids_are_unique(clock, hint):
    first = await manifest(INTENT, clock=clock, reclamation_hint=hint)
    second = await manifest(INTENT, clock=clock, reclamation_hint=hint)
    assert first.id != second.id
    assert len(clock.timers) == 2


@pytest.mark.asyncio
async def test_manifest_options_override_lifetime(clock, hint):
    task = await manifest(
        INTENT, ManifestOptions(max_lifetime_ms=100),
        clock=clock, reclamation_hint=hint,
    )
    assert task.max_lifetime_ms == 100


def test_lifetime_falls_back_to_settings(settings):
    custom = settings.model_copy(update={"default_max_lifetime_ms": 5_000})
    assert resolve_max_lifetime_ms(None, custom) == 5_000
    assert resolve_max_lifetime_ms(ManifestOptions(), custom) == 5_000
    assert resolve_max_lifetime_ms(ManifestOptions(max_lifetime_ms=7), custom) == 7


@pytest.mark.asyncio
async def test_manifest_rejects_extra_capabilities(clock, hint):
    with pytest.raises(CapabilityViolationError) as exc_info:
        await manifest(
            INTENT, clock=clock, reclamation_hint=hint,
            capabilities=TaskCapabilities(timers=1, state_reads=1, state_writes=1),
        )
    assert "state_writes" in exc_info.value.violations[0]
    assert clock.timers == []


@pytest.mark.asyncio
async def test_manifest_rejects_missing_timer(clock, hint):
    with pytest.raises(CapabilityViolationError) as exc_info:
        await manifest(
            INTENT, clock=clock, reclamation_hint=hint,
            capabilities=TaskCapabilities(timers=0, state_reads=0),
        )
    assert "dissolution requires exactly 1" in exc_info.value.violations[0]
    assert clock.timers == []


@pytest.mark.asyncio
async def test_grant_without_reads_refuses_execute(clock, hint, recording_broker):
    task = await manifest(
        INTENT, clock=clock, reclamation_hint=hint,
        capabilities=TaskCapabilities(timers=1),
    )
    with pytest.raises(CapabilityViolationError):
        await task.execute(recording_broker)
    assert recording_broker.log == []
    assert task.is_active()
    assert len(clock.timers) == 1


@pytest.mark.asyncio
async def test_manifested_dissolves_on_exit(clock, hint, broker):
    async with manifested(INTENT, clock=clock, reclamation_hint=hint) as task:
        result = await task.execute(broker)
        assert result.value == 8
    assert not task.is_active()
    assert not task.has_residual_data()


@pytest.mark.asyncio
async def test_manifested_dissolves_when_body_raises(clock, hint):
    with pytest.raises(RuntimeError):
        async with manifested(INTENT, clock=clock, reclamation_hint=hint) as task:
            raise RuntimeError("caller failure")
    assert not task.is_active()
    assert hint.calls == 1

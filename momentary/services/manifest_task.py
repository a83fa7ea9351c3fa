"""Task Manifestation — builds a LifecycleManager with its collaborators and arms its timer.

Invariants:
    - Capabilities are validated BEFORE construction: a non-compliant task never arms a timer
    - max_lifetime_ms comes from ManifestOptions when given, else from settings
    - Every task gets its own sweeper and timer — nothing shared between instances
    - manifested() always dissolves on exit, including when the body raises

Design Decisions:
    - async factory: the default clock schedules on the running loop
    - Collaborators injectable per call so tests run without wall-clock waits
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from momentary.config import Settings, get_settings
from momentary.core.compliance import EPHEMERAL_POLICY, TaskCapabilities, validate_capabilities
from momentary.core.domain_types import TaskId
from momentary.core.errors import CapabilityViolationError
from momentary.core.operations import DEFAULT_REGISTRY, OperationRegistry
from momentary.core.runtime_protocols import Clock, ReclamationHint
from momentary.infrastructure.runtime import AsyncioClock, GcReclamationHint, NoopReclamationHint
from momentary.schemas.task import ManifestOptions, TaskIntent
from momentary.services.cleanup_sweeper import CleanupSweeper
from momentary.services.lifecycle_manager import LifecycleManager

logger = logging.getLogger(__name__)


def resolve_max_lifetime_ms(options: ManifestOptions | None, settings: Settings) -> int:
    if options is not None and options.max_lifetime_ms is not None:
        return options.max_lifetime_ms
    return settings.default_max_lifetime_ms


def default_reclamation_hint(settings: Settings) -> ReclamationHint:
    if settings.reclamation_hint_enabled:
        return GcReclamationHint()
    return NoopReclamationHint()


async def manifest(
    intent: TaskIntent,
    options: ManifestOptions | None = None,
    *,
    clock: Clock | None = None,
    reclamation_hint: ReclamationHint | None = None,
    registry: OperationRegistry | None = None,
    capabilities: TaskCapabilities = EPHEMERAL_POLICY,
    settings: Settings | None = None,
) -> LifecycleManager:
    """Create an ACTIVE task whose dissolution timer is already armed."""
    settings = settings or get_settings()
    violations = validate_capabilities(capabilities)
    if violations:
        raise CapabilityViolationError(violations)

    max_lifetime_ms = resolve_max_lifetime_ms(options, settings)
    task = LifecycleManager(
        TaskId(str(uuid.uuid4())),
        intent,
        max_lifetime_ms,
        clock=clock or AsyncioClock(),
        sweeper=CleanupSweeper(reclamation_hint or default_reclamation_hint(settings)),
        registry=registry if registry is not None else DEFAULT_REGISTRY,
        preferences_path=settings.preferences_path,
        capabilities=capabilities,
    )
    logger.info(
        f"Task {task.id} manifested",
        extra={
            "task_id": task.id, "operation": task.purpose,
            "max_lifetime_ms": max_lifetime_ms,
        },
    )
    return task


@asynccontextmanager
async def manifested(
    intent: TaskIntent, options: ManifestOptions | None = None, **kwargs,
) -> AsyncGenerator[LifecycleManager, None]:
    """Manifest a task for the duration of an `async with` block."""
    task = await manifest(intent, options, **kwargs)
    try:
        yield task
    finally:
        task.dissolve()

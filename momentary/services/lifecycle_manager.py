"""Lifecycle Manager — one bounded-lifetime task: manifest, execute, dissolve.

Invariants:
    - Exactly one fire-once dissolution timer per instance, armed at construction
    - The sealed capability set governs behaviour: no timer without a timer grant,
      no broker read without a read grant (CapabilityViolationError)
    - execute() awaits at most one broker.read(), at the configured path, and nothing else
    - execute() re-checks the lifecycle after the read: a task dissolved meanwhile
      raises TaskDissolvedError and its result is discarded
    - Domain failures and unknown operations come back as CalculationResult.error
    - Broker exceptions propagate unmodified — no retry, no fallback
    - dissolve() is synchronous and idempotent; once DISSOLVED every sensitive
      slot is None, the timer is cancelled and the intent reference is dropped

Design Decisions:
    - One concrete class: no variant set is needed for the observed behaviour
    - State machine rules live in core/task_lifecycle.py; this shell owns the
      timer and the broker await (functional core, imperative shell)
    - Values are never logged: only ids, operation names and lifecycle states
"""

import logging
from datetime import datetime, timedelta

from pydantic import ValidationError

from momentary.core.broker_protocols import StateAccessBroker
from momentary.core.compliance import EPHEMERAL_POLICY, TaskCapabilities
from momentary.core.domain_types import DissolutionCause, TaskId, TaskState
from momentary.core.errors import (
    CapabilityViolationError, DomainError, InvalidPreferencesError,
    MomentaryError, UnknownOperationError,
)
from momentary.core.operations import OperationRegistry
from momentary.core.runtime_protocols import Clock, TimerHandle
from momentary.core.sensitive_registry import SensitiveRegistry
from momentary.core.task_lifecycle import TaskLifecycle
from momentary.schemas.task import CalculationResult, TaskIntent, coerce_preferences
from momentary.services.cleanup_sweeper import CleanupSweeper

logger = logging.getLogger(__name__)


class LifecycleManager:
    """A single ephemeral task bound to one TaskIntent."""

    def __init__(
        self,
        task_id: TaskId,
        intent: TaskIntent,
        max_lifetime_ms: int,
        *,
        clock: Clock,
        sweeper: CleanupSweeper,
        registry: OperationRegistry,
        preferences_path: str,
        capabilities: TaskCapabilities = EPHEMERAL_POLICY,
    ):
        self.id = task_id
        self.purpose = intent.operation_name
        self.max_lifetime_ms = max_lifetime_ms
        self.capabilities = capabilities
        self._intent: TaskIntent | None = intent
        self._clock = clock
        self._sweeper = sweeper
        self._registry = registry
        self._preferences_path = preferences_path
        self._lifecycle = TaskLifecycle(task_id)
        self._sensitive = SensitiveRegistry()
        self._reads_in_flight = 0
        self.manifested_at: datetime = clock.now()
        self._timer: TimerHandle | None = None
        if capabilities.timers >= 1:
            self._timer = clock.call_later(max_lifetime_ms / 1000, self._on_expiry)

    # --- Introspection --------------------------------------------------------

    @property
    def state(self) -> TaskState:
        return self._lifecycle.state

    @property
    def expires_at(self) -> datetime:
        return self.manifested_at + timedelta(milliseconds=self.max_lifetime_ms)

    def is_active(self) -> bool:
        return self._lifecycle.is_active

    def has_residual_data(self) -> bool:
        return self._sensitive.has_residual_data

    def get_sensitive_data(self) -> dict:
        """Current registry contents, for audit and tests. Never the intent."""
        return self._sensitive.snapshot()

    def is_accessing_user_state(self) -> bool:
        return self._reads_in_flight > 0

    def has_pending_timer(self) -> bool:
        return self._timer is not None and not self._timer.cancelled()

    # --- Execution ------------------------------------------------------------

    async def execute(self, broker: StateAccessBroker) -> CalculationResult:
        """Read preferences once, run the operation, remember what was touched."""
        self._lifecycle.ensure_active()
        if self.capabilities.state_reads < 1:
            raise CapabilityViolationError(
                ["state_reads: granted 0, execute() needs 1"],
            )
        raw_preferences = await self._read_preferences(broker)
        # dissolve() may have run while the read was suspended
        self._lifecycle.ensure_active()

        intent = self._intent
        try:
            preferences = coerce_preferences(raw_preferences)
        except ValidationError as e:
            return self._failure(InvalidPreferencesError(e.errors()[0]["msg"]))

        operation = self._registry.get(intent.operation_name)
        if operation is None:
            return self._failure(UnknownOperationError(intent.operation_name))

        try:
            value = operation(intent.operands, preferences)
        except DomainError as e:
            return self._failure(e)
        except (ArithmeticError, ValueError) as e:
            return self._failure(DomainError(str(e)))

        self._sensitive.store(list(intent.operands), value, preferences)
        logger.debug(
            f"Task {self.id} executed {self.purpose}",
            extra={"task_id": self.id, "operation": self.purpose},
        )
        return CalculationResult(
            value=value, operation=self.purpose, completed_at=self._clock.now(),
        )

    async def _read_preferences(self, broker: StateAccessBroker):
        self._reads_in_flight += 1
        try:
            return await broker.read(self._preferences_path)
        finally:
            self._reads_in_flight -= 1

    def _failure(self, error: MomentaryError) -> CalculationResult:
        error.context.task_id = self.id
        error.context.operation = self.purpose
        logger.info(
            f"Task {self.id} returned error result",
            extra={
                "task_id": self.id, "operation": self.purpose,
                "error_code": error.code,
            },
        )
        return CalculationResult(
            error=error.message, operation=self.purpose,
            completed_at=self._clock.now(),
        )

    # --- Dissolution ----------------------------------------------------------

    def dissolve(self) -> None:
        """Cancel the timer and sanitize every sensitive slot. Idempotent."""
        if not self._lifecycle.is_active:
            return
        self._dissolve(DissolutionCause.REQUESTED)

    def _on_expiry(self) -> None:
        if not self._lifecycle.is_active:
            return
        self._dissolve(DissolutionCause.EXPIRED)

    def _dissolve(self, cause: DissolutionCause) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._lifecycle.advance(TaskState.DISSOLVING)
        try:
            report = self._sweeper.sweep([self._sensitive, self._intent])
        finally:
            # terminal state is reached even if the sweep raised
            self._sensitive.clear()
            self._intent = None
            self._lifecycle.advance(TaskState.DISSOLVED)
        logger.info(
            f"Task {self.id} dissolved",
            extra={
                "task_id": self.id, "operation": self.purpose,
                "cause": cause.value, "state": self.state.value,
                "fields_nulled": report.fields_nulled,
            },
        )

    def __repr__(self) -> str:
        return (
            f"LifecycleManager(id={self.id!r}, purpose={self.purpose!r}, "
            f"state={self.state.value})"
        )

"""Error Hierarchy — typed, categorized exceptions for all Momentary failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are turned into CalculationResult.error by the lifecycle manager
    - Lifecycle errors are contract violations and always reach the caller
    - No operand, result or preference value is ever embedded in an error message

Design Decisions:
    - Single hierarchy with MomentaryError base: callers can catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    DOMAIN = "domain"
    LIFECYCLE = "lifecycle"
    EXTERNAL_STATE = "external_state"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task_id: str | None = None
    operation: str | None = None
    state: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class MomentaryError(Exception):
    """Base exception for all Momentary errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a JSON-safe error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "task_id": self.context.task_id,
                    "operation": self.context.operation,
                    "state": self.context.state,
                    "path": self.context.path,
                },
            }
        }


# ─── Domain Errors (reported as data) ───────────────────────────

class DomainError(MomentaryError):
    """Invalid mathematical input, e.g. division by zero."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DOMAIN_ERROR", ErrorCategory.DOMAIN,
            ErrorSeverity.WARNING, context,
        )


class UnknownOperationError(MomentaryError):
    """Operation name is not in the registry."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown operation: {operation}",
            "UNKNOWN_OPERATION", ErrorCategory.DOMAIN,
            ErrorSeverity.WARNING, context,
        )
        self.operation = operation


class InvalidPreferencesError(MomentaryError):
    """Stored preferences record has the wrong shape."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid preferences: {reason}",
            "INVALID_PREFERENCES", ErrorCategory.DOMAIN,
            ErrorSeverity.WARNING, context,
        )


# ─── Validation Errors (raised at construction) ─────────────────

class InvalidIntentError(MomentaryError):
    """Task intent failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INTENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class InvalidOptionsError(MomentaryError):
    """Manifest options failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_OPTIONS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


# ─── Lifecycle Errors (raised to the caller) ────────────────────

class LifecycleError(MomentaryError):
    """Programmer-contract violation against the task lifecycle."""
    def __init__(
        self, message: str, code: str = "LIFECYCLE_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.LIFECYCLE,
            ErrorSeverity.ERROR, context,
        )


class TaskDissolvedError(LifecycleError):
    """execute() called on a task that is no longer active."""
    def __init__(self, task_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.task_id = task_id
        super().__init__(
            f"Task {task_id} has been dissolved",
            "TASK_DISSOLVED", ctx,
        )
        self.task_id = task_id


class IllegalTransitionError(LifecycleError):
    """State machine edge that does not exist."""
    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Illegal lifecycle transition: {current} -> {target}",
            "ILLEGAL_TRANSITION", context,
        )
        self.current = current
        self.target = target


class CapabilityViolationError(LifecycleError):
    """Task capability set exceeds the ephemeral policy."""
    def __init__(self, violations: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Capability policy violated: {'; '.join(violations)}",
            "CAPABILITY_VIOLATION", context,
        )
        self.violations = violations


# ─── External State Errors (propagated unmodified) ──────────────

class BrokerError(MomentaryError):
    """State access broker operation failed."""
    def __init__(self, message: str, operation: str, path: str | None = None,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            f"State {operation} failed: {message}",
            "BROKER_ERROR", ErrorCategory.EXTERNAL_STATE,
            ErrorSeverity.CRITICAL, ctx,
        )
        self.operation = operation

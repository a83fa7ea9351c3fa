"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TaskId wraps an opaque UUID4 string — never compared structurally
    - All valid states encoded as Enums — no raw string matching
    - SENSITIVE_SLOTS is the single source of truth for registry slot names

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", str)
OperationName = NewType("OperationName", str)
StatePath = NewType("StatePath", str)


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_MAX_LIFETIME_MS: int = 30_000
PREFERENCES_PATH: StatePath = StatePath("/preferences/calculator")
SENSITIVE_SLOTS: tuple[str, ...] = ("operands", "result", "user_preferences")


# ─── Enums ───────────────────────────────────────────────────────

class TaskState(str, Enum):
    """Lifecycle states. DISSOLVED is terminal."""
    ACTIVE = "active"
    DISSOLVING = "dissolving"
    DISSOLVED = "dissolved"


class RoundingMode(str, Enum):
    """Rounding preference carried in the user's preferences record."""
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"


class DissolutionCause(str, Enum):
    """Why a task dissolved — surfaced in logs only."""
    REQUESTED = "requested"
    EXPIRED = "expired"

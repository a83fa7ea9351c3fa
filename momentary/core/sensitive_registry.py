"""Sensitive Registry — the three slots a task may hold live user data in.

Invariants:
    - Exactly three slots: operands, result, user_preferences
    - Each slot is live data or None; never deleted, only nulled
    - snapshot() returns a fresh dict — callers cannot write through it
    - store() replaces all three slots at once (last write wins)

Design Decisions:
    - Mutable dataclass (not frozen): the cleanup sweep nulls its fields in place
    - Slot names come from SENSITIVE_SLOTS in domain_types (single source of truth)
"""

from dataclasses import dataclass

from momentary.core.domain_types import SENSITIVE_SLOTS
from momentary.schemas.task import Preferences


@dataclass
class SensitiveRegistry:
    """Per-task holder for data touched during execute()."""

    operands: list[float] | None = None
    result: float | None = None
    user_preferences: Preferences | None = None

    @property
    def has_residual_data(self) -> bool:
        return any(getattr(self, slot) is not None for slot in SENSITIVE_SLOTS)

    def store(
        self, operands: list[float], result: float, user_preferences: Preferences,
    ) -> None:
        """Overwrite every slot with the latest successful execution."""
        self.operands = operands
        self.result = result
        self.user_preferences = user_preferences

    def clear(self) -> None:
        for slot in SENSITIVE_SLOTS:
            setattr(self, slot, None)

    def snapshot(self) -> dict:
        operands = self.operands
        return {
            "operands": list(operands) if operands is not None else None,
            "result": self.result,
            "user_preferences": self.user_preferences,
        }

"""Task Schemas — frozen pydantic models for intents, preferences, options and results.

Invariants:
    - TaskIntent.operands holds >= 1 number and is a tuple (immutable)
    - Preferences() is the empty record — absence of stored data never raises
    - CalculationResult carries value XOR error, never both, never neither
    - parse_* helpers translate pydantic ValidationError into MomentaryError types

Design Decisions:
    - frozen=True on every model: the engine must not cause changes to caller values
    - extra="ignore" on Preferences: stored records may carry keys for other consumers
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from momentary.core.domain_types import RoundingMode
from momentary.core.errors import InvalidIntentError, InvalidOptionsError


class TaskIntent(BaseModel):
    """What the caller wants computed. Supplied once, never mutated."""
    model_config = ConfigDict(frozen=True)

    operation_name: str
    operands: tuple[float, ...] = Field(min_length=1)


class Preferences(BaseModel):
    """User preferences read through the state broker."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    precision: int | None = Field(None, ge=0)
    rounding_mode: RoundingMode | None = None


class ManifestOptions(BaseModel):
    """Per-task manifestation options."""
    model_config = ConfigDict(frozen=True)

    max_lifetime_ms: int | None = Field(None, gt=0)


class CalculationResult(BaseModel):
    """Outcome of one execute() call — a value or an error message."""
    model_config = ConfigDict(frozen=True)

    value: float | None = None
    error: str | None = None
    operation: str
    completed_at: datetime

    @model_validator(mode="after")
    def validate_value_xor_error(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("result requires exactly one of value or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """JSON-safe envelope. Omits whichever of value/error is unset."""
        return self.model_dump(mode="json", exclude_none=True)


# --- Boundary parsing ---------------------------------------------------------

def parse_intent(operation_name: str, operands: Any) -> TaskIntent:
    """Build a TaskIntent, raising InvalidIntentError on bad input."""
    try:
        return TaskIntent(operation_name=operation_name, operands=operands)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or "intent"
        raise InvalidIntentError(f"Invalid task intent: {first['msg']}", field) from e


def parse_options(max_lifetime_ms: Any = None) -> ManifestOptions:
    """Build ManifestOptions, raising InvalidOptionsError on bad input."""
    try:
        return ManifestOptions(max_lifetime_ms=max_lifetime_ms)
    except ValidationError as e:
        first = e.errors()[0]
        raise InvalidOptionsError(
            f"Invalid manifest options: {first['msg']}", "max_lifetime_ms",
        ) from e


def coerce_preferences(raw: Any) -> Preferences:
    """Turn a raw broker read into Preferences.

    None resolves to the empty record. Raises pydantic ValidationError when a
    stored record has the wrong shape; the caller decides how to report it.
    """
    if raw is None:
        return Preferences()
    if isinstance(raw, Preferences):
        return raw
    return Preferences.model_validate(raw)

"""Operation Registry — immutable mapping from operation name to a pure function.

Invariants:
    - Every operation is PURE: (operands, preferences) -> float, no IO, no state
    - subtract/divide are left folds seeded by the first operand
    - divide raises DomainError("Division by zero") for any zero divisor
    - Only divide reads preferences (precision); everything else ignores them
    - The registry mapping is read-only; extension returns a new registry

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - Decimal rounding on the shortest repr: 2.675 rounds to 2.68, half away from zero
"""

from collections.abc import Callable, Iterator, Mapping, Sequence
from decimal import Context, Decimal, ROUND_HALF_UP
from functools import reduce
from types import MappingProxyType

from momentary.core.errors import DomainError
from momentary.schemas.task import Preferences

OperationFn = Callable[[Sequence[float], Preferences], float]


def add(operands: Sequence[float], preferences: Preferences) -> float:
    """Sum of all operands, seed 0."""
    return reduce(lambda total, value: total + value, operands, 0)


def subtract(operands: Sequence[float], preferences: Preferences) -> float:
    """First operand minus each following operand, in order."""
    return reduce(lambda diff, value: diff - value, operands[1:], operands[0])


def multiply(operands: Sequence[float], preferences: Preferences) -> float:
    """Product of all operands, seed 1."""
    return reduce(lambda product, value: product * value, operands, 1)


def divide(operands: Sequence[float], preferences: Preferences) -> float:
    """First operand divided by each following operand, in order.

    With preferences.precision set, the final quotient is rounded to that many
    decimal digits (half away from zero). Otherwise full float precision.
    """
    quotient = operands[0]
    for value in operands[1:]:
        if value == 0:
            raise DomainError("Division by zero")
        quotient = quotient / value
    if preferences.precision is None:
        return quotient
    return round_half_away_from_zero(quotient, preferences.precision)


def round_half_away_from_zero(value: float, digits: int) -> float:
    """Round to `digits` decimals, ties away from zero. Non-finite values pass through."""
    if value != value or value in (float("inf"), float("-inf")):
        return value
    exact = Decimal(repr(value))
    context = Context(prec=max(28, exact.adjusted() + digits + 2))
    quantum = Decimal(1).scaleb(-digits)
    return float(exact.quantize(quantum, rounding=ROUND_HALF_UP, context=context))


class OperationRegistry(Mapping[str, OperationFn]):
    """Read-only name -> operation mapping."""

    def __init__(self, operations: Mapping[str, OperationFn]):
        self._operations = MappingProxyType(dict(operations))

    def __getitem__(self, name: str) -> OperationFn:
        return self._operations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __repr__(self) -> str:
        return f"OperationRegistry({sorted(self._operations)})"

    def with_operation(self, name: str, fn: OperationFn) -> "OperationRegistry":
        """Return a new registry that also maps `name` to `fn`."""
        if not name:
            raise ValueError("operation name cannot be empty")
        return OperationRegistry({**self._operations, name: fn})


# Every mapping explicit: adding an operation means adding a line here or
# calling with_operation() on a copy.
DEFAULT_REGISTRY = OperationRegistry({
    "add": add,
    "subtract": subtract,
    "multiply": multiply,
    "divide": divide,
})

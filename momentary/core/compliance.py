"""Compliance Scanner — lexical anti-pattern scan plus a sealed capability check.

Invariants:
    - detect_anti_patterns is a HEURISTIC: it proves only that certain identifiers
      are absent from the source text, nothing about runtime behaviour
    - validate_capabilities is mechanical: a task's sealed capability set is
      compared field by field against the ephemeral policy
    - A grant without the dissolution timer is non-compliant: the task could never expire
    - Empty violation list == compliant

Design Decisions:
    - Both checks kept: the capability set is the real gate at manifestation,
      the lexical scan is an audit aid that survives refactors of the policy
    - Violations tagged with a ViolationKind so report flags never match on message text
"""

import dataclasses
import inspect
from dataclasses import dataclass, field
from enum import Enum


class ViolationKind(str, Enum):
    """Which ephemerality principle a finding breaks."""
    PERSISTENT_STORAGE = "persistent_storage"       # violates BYOS
    RECURRING_TIMER = "recurring_timer"             # violates temporary manifestation
    BACKGROUND_WORK = "background_work"             # violates contagion prevention
    USAGE_TRACKING = "usage_tracking"               # violates zero-attention architecture


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    detail: str

    def __str__(self) -> str:
        return f"{self.detail} (violates {_PRINCIPLES[self.kind]})"


_PRINCIPLES: dict[ViolationKind, str] = {
    ViolationKind.PERSISTENT_STORAGE: "BYOS",
    ViolationKind.RECURRING_TIMER: "temporary manifestation",
    ViolationKind.BACKGROUND_WORK: "contagion prevention",
    ViolationKind.USAGE_TRACKING: "zero-attention architecture",
}

# (substring, kind). Matched case-sensitively against inspect.getsource().
FORBIDDEN_PATTERNS: tuple[tuple[str, ViolationKind], ...] = (
    ("shelve", ViolationKind.PERSISTENT_STORAGE),
    ("sqlite3", ViolationKind.PERSISTENT_STORAGE),
    ("pickle", ViolationKind.PERSISTENT_STORAGE),
    ("dbm.", ViolationKind.PERSISTENT_STORAGE),
    ("write_text(", ViolationKind.PERSISTENT_STORAGE),
    ("set_interval", ViolationKind.RECURRING_TIMER),
    ("sched.scheduler", ViolationKind.RECURRING_TIMER),
    ("while True", ViolationKind.RECURRING_TIMER),
    ("create_task(", ViolationKind.BACKGROUND_WORK),
    ("ensure_future(", ViolationKind.BACKGROUND_WORK),
    ("threading.Thread", ViolationKind.BACKGROUND_WORK),
    ("analytics", ViolationKind.USAGE_TRACKING),
    ("tracking", ViolationKind.USAGE_TRACKING),
    ("telemetry", ViolationKind.USAGE_TRACKING),
)


def scan_source(source: str) -> list[Violation]:
    """Return one Violation per forbidden substring present in `source`."""
    return [
        Violation(kind, f'Source contains "{pattern}"')
        for pattern, kind in FORBIDDEN_PATTERNS
        if pattern in source
    ]


def detect_anti_patterns(target: object) -> list[str]:
    """Scan the source of a class, function or module for forbidden identifiers."""
    return [str(v) for v in scan_source(inspect.getsource(target))]


# --- Sealed capability set ----------------------------------------------------

@dataclass(frozen=True)
class TaskCapabilities:
    """What a task instance is granted for its whole lifetime."""
    timers: int = 0
    state_reads: int = 0
    state_writes: int = 0
    state_deletes: int = 0
    background_tasks: int = 0


EPHEMERAL_POLICY = TaskCapabilities(timers=1, state_reads=1)

_CAPABILITY_KINDS: dict[str, ViolationKind] = {
    "timers": ViolationKind.RECURRING_TIMER,
    "state_reads": ViolationKind.PERSISTENT_STORAGE,
    "state_writes": ViolationKind.PERSISTENT_STORAGE,
    "state_deletes": ViolationKind.PERSISTENT_STORAGE,
    "background_tasks": ViolationKind.BACKGROUND_WORK,
}


def check_capabilities(
    granted: TaskCapabilities, policy: TaskCapabilities = EPHEMERAL_POLICY,
) -> list[Violation]:
    violations = []
    for f in dataclasses.fields(TaskCapabilities):
        have = getattr(granted, f.name)
        allowed = getattr(policy, f.name)
        if have < 0:
            violations.append(Violation(
                _CAPABILITY_KINDS[f.name], f"{f.name}: negative grant {have}",
            ))
        elif have > allowed:
            violations.append(Violation(
                _CAPABILITY_KINDS[f.name],
                f"{f.name}: granted {have}, policy allows {allowed}",
            ))
    return violations


def check_dissolution_timer(granted: TaskCapabilities) -> list[Violation]:
    """A task must hold the one timer that dissolves it. Excess is check_capabilities' job."""
    if granted.timers >= 1:
        return []
    return [Violation(
        ViolationKind.RECURRING_TIMER,
        f"timers: granted {granted.timers}, dissolution requires exactly 1",
    )]


def validate_capabilities(
    granted: TaskCapabilities, policy: TaskCapabilities = EPHEMERAL_POLICY,
) -> list[str]:
    """Compare a sealed capability set with the policy. Empty list == compliant."""
    found = check_dissolution_timer(granted) + check_capabilities(granted, policy)
    return [str(v) for v in found]


# --- Aggregate report ---------------------------------------------------------

@dataclass(frozen=True)
class ComplianceReport:
    violations: list[str] = field(default_factory=list)
    kinds: frozenset[ViolationKind] = frozenset()

    @property
    def is_ephemeral(self) -> bool:
        return not self.violations

    @property
    def respects_user_data_ownership(self) -> bool:
        return ViolationKind.PERSISTENT_STORAGE not in self.kinds

    @property
    def has_zero_attention_architecture(self) -> bool:
        return ViolationKind.USAGE_TRACKING not in self.kinds

    @property
    def prevents_contagion(self) -> bool:
        return ViolationKind.BACKGROUND_WORK not in self.kinds

    @property
    def enables_complete_dissolution(self) -> bool:
        return ViolationKind.RECURRING_TIMER not in self.kinds


def validate_compliance(
    target: object, capabilities: TaskCapabilities,
    policy: TaskCapabilities = EPHEMERAL_POLICY,
) -> ComplianceReport:
    """Run both the lexical scan and the capability check against one target."""
    found = (
        scan_source(inspect.getsource(target))
        + check_dissolution_timer(capabilities)
        + check_capabilities(capabilities, policy)
    )
    return ComplianceReport(
        violations=[str(v) for v in found],
        kinds=frozenset(v.kind for v in found),
    )

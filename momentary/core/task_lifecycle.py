"""Task Lifecycle — pure state machine for manifestation → execution → dissolution.

Invariants:
    - Only two edges exist: ACTIVE -> DISSOLVING and DISSOLVING -> DISSOLVED
    - DISSOLVED is terminal: no transition leaves it
    - ensure_active() is the single guard every execute() passes through
    - All functions are PURE apart from TaskLifecycle.advance() mutating its own state

Design Decisions:
    - Transition table as a frozen dict: every legal edge visible in one place
    - Raises (not error dicts): lifecycle misuse is a programmer bug, never data
"""

from dataclasses import dataclass

from momentary.core.domain_types import TaskState
from momentary.core.errors import ErrorContext, IllegalTransitionError, TaskDissolvedError

ALLOWED_TRANSITIONS: dict[TaskState, frozenset[TaskState]] = {
    TaskState.ACTIVE: frozenset({TaskState.DISSOLVING}),
    TaskState.DISSOLVING: frozenset({TaskState.DISSOLVED}),
    TaskState.DISSOLVED: frozenset(),
}


def can_transition(current: TaskState, target: TaskState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@dataclass
class TaskLifecycle:
    """Per-task lifecycle state — no IO, no timers."""

    task_id: str
    state: TaskState = TaskState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is TaskState.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self.state is TaskState.DISSOLVED

    def advance(self, target: TaskState) -> None:
        """Move along a legal edge or raise IllegalTransitionError."""
        if not can_transition(self.state, target):
            raise IllegalTransitionError(
                self.state.value, target.value,
                ErrorContext(task_id=self.task_id, state=self.state.value),
            )
        self.state = target

    def ensure_active(self) -> None:
        """Guard for execute(): raise TaskDissolvedError unless ACTIVE."""
        if not self.is_active:
            raise TaskDissolvedError(
                self.task_id, ErrorContext(state=self.state.value),
            )

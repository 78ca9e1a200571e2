"""Task records and the task status state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TaskStatus(str, Enum):
    """Lifecycle states a task can be in."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


class InvalidTransitionError(ValueError):
    """Raised when a task cannot move from one status to another."""

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = str(from_status)
        self.to_status = str(to_status)
        super().__init__(
            f"invalid status transition: {self.from_status} -> {self.to_status}"
        )


@dataclass
class Task:
    """A unit of work that can be assigned to an agent."""

    id: str = ""
    title: str = ""
    description: str = ""
    status: str = TaskStatus.PENDING.value
    priority: str = "medium"
    assigned_to: str = ""
    created_by: str = ""
    blocked_by: list[str] = field(default_factory=list)
    result: str = ""
    created_at: str = ""
    updated_at: str = ""


_VALID_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset(
        {TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED}
    ),
    TaskStatus.ASSIGNED: frozenset(
        {
            TaskStatus.IN_PROGRESS,
            TaskStatus.BLOCKED,
            TaskStatus.PENDING,
            TaskStatus.CANCELLED,
        }
    ),
    TaskStatus.IN_PROGRESS: frozenset(
        {TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.BLOCKED}
    ),
    TaskStatus.BLOCKED: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.PENDING, TaskStatus.CANCELLED}
    ),
}

_TERMINAL = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED})


def _coerce(status: str) -> TaskStatus | None:
    try:
        return TaskStatus(status)
    except ValueError:
        return None


def validate_transition(from_status: str, to_status: str) -> None:
    """Raise InvalidTransitionError unless the transition is allowed."""
    source = _coerce(from_status)
    target = _coerce(to_status)
    if source is None or target is None:
        raise InvalidTransitionError(from_status, to_status)
    if target not in _VALID_TRANSITIONS.get(source, frozenset()):
        raise InvalidTransitionError(from_status, to_status)


def is_terminal(status: str) -> bool:
    """Report whether a status ends the task lifecycle."""
    return _coerce(status) in _TERMINAL
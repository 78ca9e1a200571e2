"""Task creation, delegation, status changes and queries."""

from __future__ import annotations

import secrets
import string
import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone

from agentcom.task.model import Task, TaskStatus, validate_transition

_ALPHABET = string.ascii_letters + string.digits + "_-"


def _nanoid(size: int = 21) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(size))


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _copy(task: Task) -> Task:
    return replace(task, blocked_by=list(task.blocked_by))


class TaskStore:
    """Thread-safe in-memory task table."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.Lock()

    def insert_task(self, task: Task) -> None:
        """Store a new task, filling in its id and timestamps."""
        with self._lock:
            if not task.id:
                task.id = "tsk_" + _nanoid()
            if task.id in self._tasks:
                raise ValueError(f"task already exists: {task.id}")
            now = _now()
            task.status = str(task.status)
            task.created_at = task.created_at or now
            task.updated_at = now
            self._tasks[task.id] = _copy(task)

    def find_task_by_id(self, task_id: str) -> Task:
        with self._lock:
            return _copy(self._get(task_id))

    def update_task(self, task: Task) -> None:
        """Replace a stored task with the given record."""
        with self._lock:
            self._get(task.id)
            task.status = str(task.status)
            task.updated_at = _now()
            self._tasks[task.id] = _copy(task)

    def update_task_status(self, task_id: str, status: str, result: str) -> None:
        with self._lock:
            stored = self._get(task_id)
            stored.status = str(status)
            stored.result = result
            stored.updated_at = _now()

    def list_all_tasks(self) -> list[Task]:
        return self._select(lambda _task: True)

    def list_tasks_by_status(self, status: str) -> list[Task]:
        wanted = str(status)
        return self._select(lambda task: task.status == wanted)

    def list_tasks_by_assignee(self, agent_id: str) -> list[Task]:
        return self._select(lambda task: task.assigned_to == agent_id)

    def _get(self, task_id: str) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise KeyError(f"task not found: {task_id}") from None

    def _select(self, predicate) -> list[Task]:
        with self._lock:
            return [_copy(task) for task in self._tasks.values() if predicate(task)]


class TaskManager:
    """Creates tasks and moves them through their lifecycle."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def create(
        self,
        title: str,
        description: str = "",
        priority: str = "",
        assigned_to: str = "",
        created_by: str = "",
        blocked_by: Iterable[str] | None = None,
    ) -> Task:
        """Create a pending task; priority defaults to medium."""
        task = Task(
            id="tsk_" + _nanoid(),
            title=title,
            description=description,
            status=TaskStatus.PENDING.value,
            priority=priority.strip() or "medium",
            assigned_to=assigned_to,
            created_by=created_by,
            blocked_by=list(blocked_by or ()),
        )
        self._store.insert_task(task)
        return task

    def delegate(self, task_id: str, target_agent_id: str) -> None:
        """Assign a task to an agent and mark it assigned."""
        task = self._store.find_task_by_id(task_id)
        validate_transition(task.status, TaskStatus.ASSIGNED)
        task.assigned_to = target_agent_id
        task.status = TaskStatus.ASSIGNED.value
        self._store.update_task(task)
        self._store.update_task_status(task_id, TaskStatus.ASSIGNED.value, task.result)

    def update_status(self, task_id: str, new_status: str, result: str = "") -> None:
        """Move a task to a new status, checking the transition first."""
        task = self._store.find_task_by_id(task_id)
        validate_transition(task.status, new_status)
        self._store.update_task_status(task_id, str(new_status), result)


class TaskQuery:
    """Read-only task lookups."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def list_all(self) -> list[Task]:
        return self._store.list_all_tasks()

    def list_by_status(self, status: str) -> list[Task]:
        return self._store.list_tasks_by_status(status)

    def list_by_assignee(self, agent_id: str) -> list[Task]:
        return self._store.list_tasks_by_assignee(agent_id)

    def find_by_id(self, task_id: str) -> Task:
        return self._store.find_task_by_id(task_id)
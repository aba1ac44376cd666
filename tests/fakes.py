"""In-memory ``TaskRepository`` used by the service tests."""

from uuid import UUID

from task_manager.entities import TaskRecord, TaskStatus
from task_manager.errors import PersistenceFailure

_FIELDS = ("id", "title", "description", "status", "created_at", "updated_at", "due_date")


def _snapshot(task: TaskRecord) -> dict:
    return {name: getattr(task, name) for name in _FIELDS}


class InMemoryTaskRepository:
    """Dict-backed store with unit-of-work semantics.

    Loaded tasks are detached copies: changes only become visible to later
    reads once ``commit`` succeeds.
    """

    def __init__(self) -> None:
        self._rows: dict[UUID, dict] = {}
        self._upserts: dict[UUID, TaskRecord] = {}
        self._removals: dict[UUID, TaskRecord] = {}
        self.commits = 0
        self.fail_next_commit = False

    def seed(self, task: TaskRecord) -> TaskRecord:
        self._rows[task.id] = _snapshot(task)
        return task

    def _ordered(self, rows: list[dict]) -> list[TaskRecord]:
        rows = sorted(rows, key=lambda r: r["created_at"], reverse=True)
        return [TaskRecord(**row) for row in rows]

    def list_all(self) -> list[TaskRecord]:
        return self._ordered(list(self._rows.values()))

    def list_by_status(self, status: TaskStatus) -> list[TaskRecord]:
        return self._ordered([r for r in self._rows.values() if r["status"] == status])

    def get_by_id(self, task_id: UUID) -> TaskRecord | None:
        row = self._rows.get(task_id)
        return TaskRecord(**row) if row is not None else None

    def insert(self, task: TaskRecord) -> TaskRecord:
        self._upserts[task.id] = task
        return task

    def mark_dirty(self, task: TaskRecord) -> None:
        self._upserts[task.id] = task

    def mark_removed(self, task: TaskRecord) -> None:
        self._removals[task.id] = task

    def commit(self) -> int:
        self.commits += 1
        pending = set(self._upserts) | set(self._removals)
        if self.fail_next_commit:
            self.fail_next_commit = False
            self._upserts.clear()
            self._removals.clear()
            raise PersistenceFailure("The task store could not apply the change.")
        for task_id, task in self._upserts.items():
            self._rows[task_id] = _snapshot(task)
        for task_id in self._removals:
            self._rows.pop(task_id, None)
        self._upserts.clear()
        self._removals.clear()
        return len(pending)

"""Task storage.

``TaskRepository`` is the contract the service layer depends on. The
SQLAlchemy implementation maps it onto a request-scoped ``Session``: reads
go straight to the database, writes accumulate in the session until
``commit`` applies them atomically.
"""

import logging
from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from task_manager.entities import TaskRecord, TaskStatus
from task_manager.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class TaskRepository(Protocol):
    """Persistence contract for tasks."""

    def list_all(self) -> Sequence[TaskRecord]:
        """All tasks, newest first. An empty store yields an empty sequence."""
        ...

    def list_by_status(self, status: TaskStatus) -> Sequence[TaskRecord]:
        """Tasks with exactly ``status``, newest first."""
        ...

    def get_by_id(self, task_id: UUID) -> TaskRecord | None:
        """The task with ``task_id``, or None. Absence is not an error here."""
        ...

    def insert(self, task: TaskRecord) -> TaskRecord:
        """Stage a fully-built task for insertion."""
        ...

    def mark_dirty(self, task: TaskRecord) -> None:
        """Record that a loaded task's fields changed."""
        ...

    def mark_removed(self, task: TaskRecord) -> None:
        """Stage a task for hard deletion."""
        ...

    def commit(self) -> int:
        """Apply all staged changes atomically. Returns the number of affected tasks."""
        ...


class SqlAlchemyTaskRepository:
    """``TaskRepository`` backed by a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._pending: set[UUID] = set()

    def list_all(self) -> list[TaskRecord]:
        stmt = select(TaskRecord).order_by(TaskRecord.created_at.desc())
        return list(self._session.scalars(stmt))

    def list_by_status(self, status: TaskStatus) -> list[TaskRecord]:
        stmt = (
            select(TaskRecord)
            .where(TaskRecord.status == status)
            .order_by(TaskRecord.created_at.desc())
        )
        return list(self._session.scalars(stmt))

    def get_by_id(self, task_id: UUID) -> TaskRecord | None:
        return self._session.get(TaskRecord, task_id)

    def insert(self, task: TaskRecord) -> TaskRecord:
        self._session.add(task)
        self._pending.add(task.id)
        return task

    def mark_dirty(self, task: TaskRecord) -> None:
        self._session.add(task)
        self._pending.add(task.id)

    def mark_removed(self, task: TaskRecord) -> None:
        self._session.delete(task)
        self._pending.add(task.id)

    def commit(self) -> int:
        affected = len(self._pending)
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception("Failed to commit %d pending task change(s)", affected)
            raise PersistenceFailure("The task store could not apply the change.") from exc
        finally:
            self._pending.clear()
        logger.debug("Committed %d task change(s)", affected)
        return affected

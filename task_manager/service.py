"""Task lifecycle service: one method per API operation.

Every mutating operation runs validate -> load -> mutate -> commit, and
commits at most once. Nothing is written if validation or lookup fails.
"""

import logging
from collections.abc import Callable
from uuid import UUID

from task_manager.entities import TaskRecord, TaskStatus
from task_manager.errors import TaskNotFound
from task_manager.models import Task, TaskCreate, TaskUpdate
from task_manager.store import TaskRepository
from task_manager.validation import check_status, check_task_id, ensure_valid

logger = logging.getLogger(__name__)


class TaskService:
    """Owns task validation, state transitions and persistence for one request."""

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def list_tasks(self) -> list[Task]:
        """Return all tasks, newest first."""
        return [Task.model_validate(t) for t in self._repository.list_all()]

    def list_tasks_by_status(self, status: int) -> list[Task]:
        """Return tasks whose status is exactly ``status``, newest first."""
        ensure_valid(check_status(status))
        tasks = self._repository.list_by_status(TaskStatus.parse(status))
        return [Task.model_validate(t) for t in tasks]

    def get_task(self, task_id: UUID) -> Task:
        ensure_valid(check_task_id(task_id))
        return Task.model_validate(self._load(task_id))

    def create_task(self, data: TaskCreate) -> Task:
        """Create a task. Its status always starts as ``NOT_STARTED``.

        ``data`` has already passed the request model rules.
        """
        task = TaskRecord.new(data.title, data.description, data.due_date)
        self._repository.insert(task)
        self._repository.commit()
        logger.info("Created task %s", task.id)
        return Task.model_validate(task)

    def update_task(self, task_id: UUID, data: TaskUpdate) -> Task:
        """Replace a task's title, description and due date."""
        ensure_valid(check_task_id(task_id))
        task = self._load(task_id)
        task.update_details(data.title, data.description, data.due_date)
        self._repository.mark_dirty(task)
        self._repository.commit()
        logger.info("Updated task %s", task.id)
        return Task.model_validate(task)

    def delete_task(self, task_id: UUID) -> None:
        """Hard-delete a task."""
        ensure_valid(check_task_id(task_id))
        task = self._load(task_id)
        self._repository.mark_removed(task)
        self._repository.commit()
        logger.info("Deleted task %s", task_id)

    def mark_complete(self, task_id: UUID) -> Task:
        return self._transition(task_id, TaskRecord.mark_completed)

    def mark_incomplete(self, task_id: UUID) -> Task:
        """Reset a task to ``NOT_STARTED``, whatever its current status."""
        return self._transition(task_id, TaskRecord.mark_not_started)

    def mark_in_progress(self, task_id: UUID) -> Task:
        return self._transition(task_id, TaskRecord.mark_in_progress)

    def _transition(self, task_id: UUID, apply: Callable[[TaskRecord], None]) -> Task:
        ensure_valid(check_task_id(task_id))
        task = self._load(task_id)
        apply(task)
        self._repository.mark_dirty(task)
        self._repository.commit()
        logger.info("Task %s is now %s", task.id, task.status.name)
        return Task.model_validate(task)

    def _load(self, task_id: UUID) -> TaskRecord:
        task = self._repository.get_by_id(task_id)
        if task is None:
            logger.info("Task %s not found", task_id)
            raise TaskNotFound(task_id)
        return task

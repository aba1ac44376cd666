"""Errors raised by the task lifecycle service.

Each error maps to exactly one HTTP status in ``task_manager.main``.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str


class TaskManagerError(Exception):
    """Base class for all task manager errors."""


class ValidationFailed(TaskManagerError):
    """One or more input fields were rejected before any store interaction."""

    def __init__(self, errors: list[FieldError]) -> None:
        if not errors:
            raise ValueError("ValidationFailed requires at least one field error")
        self.errors = list(errors)
        super().__init__("; ".join(e.message for e in self.errors))


class TaskNotFound(TaskManagerError):
    """No task exists with the requested identifier."""

    def __init__(self, task_id: UUID) -> None:
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} was not found.")


class PersistenceFailure(TaskManagerError):
    """The store failed to apply a unit of work; nothing was persisted."""


class InvalidOperation(TaskManagerError):
    """An operation was attempted with a value the domain does not allow."""

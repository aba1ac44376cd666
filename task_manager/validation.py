"""Input validation run before any task is loaded or persisted.

Body rules live on the request models in ``task_manager.models``;
``field_errors`` converts their pydantic errors into ``FieldError`` lists.
The ``check_*`` functions cover path values. They return an ordered list
of field errors (empty when the input is valid) and have no side effects.
``ensure_valid`` turns a non-empty list into ``ValidationFailed``.
"""

from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from task_manager.entities import TaskStatus
from task_manager.errors import FieldError, ValidationFailed

_NIL_UUID = UUID(int=0)

# Pydantic's built-in messages, reworded per field.
_MESSAGES = {
    ("title", "string_too_long"): "Title must not exceed {max_length} characters",
    ("description", "string_too_long"): "Description must not exceed {max_length} characters",
}


def field_errors(errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Convert pydantic error dicts (``ValidationError.errors()``) into field errors."""
    result = []
    for err in errors:
        loc = err.get("loc") or ()
        field = str(loc[-1]) if loc else ""
        template = _MESSAGES.get((field, err.get("type")))
        message = template.format(**err.get("ctx", {})) if template else err["msg"]
        result.append(FieldError(field, message))
    return result


def check_task_id(task_id: UUID | None) -> list[FieldError]:
    if task_id is None or task_id == _NIL_UUID:
        return [FieldError("id", "Task ID is required")]
    return []


def check_status(status: object) -> list[FieldError]:
    valid_values = {s.value for s in TaskStatus}
    if isinstance(status, bool) or not isinstance(status, int) or status not in valid_values:
        return [FieldError("status", "Passed value is not part of Status Values")]
    return []


def ensure_valid(*error_lists: list[FieldError]) -> None:
    """Raise ``ValidationFailed`` with every collected error, in order."""
    errors = [error for errors in error_lists for error in errors]
    if errors:
        raise ValidationFailed(errors)

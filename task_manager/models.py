"""Pydantic models for the Task Manager API.

Field names are camelCase on the wire; request bodies also accept the
snake_case attribute names. The request models carry the title,
description and due date rules; ``task_manager.validation`` turns their
errors into ``FieldError`` lists.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from task_manager.entities import TaskStatus, as_utc, utcnow

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _TaskDetails(_WireModel):
    """Title, description and due date, as sent by create and update requests.

    ``due_date`` is compared against ``context["now"]`` when a validation
    context provides one, otherwise against the current UTC time.
    """

    title: str | None = Field(
        default=None,
        max_length=TITLE_MAX_LENGTH,
        validate_default=True,
        description="The task title (required, 1-200 characters)",
    )
    description: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Optional details (up to 1000 characters), null clears it",
    )
    due_date: datetime | None = Field(default=None, description="Optional due date in the future")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            raise PydanticCustomError("title_required", "Title is required")
        return value

    @field_validator("due_date")
    @classmethod
    def due_date_in_future(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        if value is None:
            return value
        now = (info.context or {}).get("now") or utcnow()
        try:
            due = as_utc(value)
        except OverflowError:
            # Offsets near datetime.min/max cannot be expressed in UTC.
            raise PydanticCustomError("due_date_out_of_range", "Due date is out of range") from None
        if due <= as_utc(now):
            raise PydanticCustomError("due_date_not_future", "Due date must be in the future")
        return value


class TaskCreate(_TaskDetails):
    """Request body for creating a new task.

    Any ``id``, ``status`` or timestamp sent by the client is ignored.
    """


class TaskUpdate(_TaskDetails):
    """Request body for replacing a task's details. Status is never changed."""


class Task(_WireModel):
    """A task item in the task manager."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Unique identifier for the task")
    title: str = Field(..., description="The task title")
    description: str | None = Field(default=None, description="The task description")
    status: TaskStatus = Field(
        ...,
        description="0 = NotStarted, 1 = InProgress, 2 = Completed",
    )
    created_at: datetime = Field(..., description="When the task was created (UTC)")
    updated_at: datetime = Field(..., description="When the task was last updated (UTC)")
    due_date: datetime | None = Field(default=None, description="When the task is due (UTC)")


class FieldErrorModel(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    detail: str
    errors: list[FieldErrorModel] | None = None


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=utcnow)

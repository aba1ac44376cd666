"""Task entity and its status state machine.

``TaskRecord`` is both the domain entity and its SQLAlchemy mapping. Its
mutation methods only ever touch one field group: the status transitions
change ``status``, ``update_details`` changes ``title``/``description``/
``due_date``. Every mutation stamps ``updated_at``.
"""

from datetime import UTC, datetime
from enum import IntEnum
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, Integer, String, TypeDecorator, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from task_manager.errors import InvalidOperation


class TaskStatus(IntEnum):
    """Lifecycle state of a task. Encoded on the wire and in storage as its ordinal."""

    NOT_STARTED = 0
    IN_PROGRESS = 1
    COMPLETED = 2

    @classmethod
    def parse(cls, value: object) -> "TaskStatus":
        """Convert ``value`` to a status, raising ``InvalidOperation`` when out of range."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidOperation(f"{value!r} is not a valid task status.")
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidOperation(f"{value!r} is not a valid task status.") from exc


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalise ``value`` to UTC. Naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class UTCDateTime(TypeDecorator):
    """Stores datetimes as naive UTC and always loads them back as aware UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class StatusType(TypeDecorator):
    """Stores ``TaskStatus`` as its integer ordinal."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(TaskStatus.parse(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return TaskStatus.parse(value)


class Base(DeclarativeBase):
    """Declarative base for all ORM mappings."""


class TaskRecord(Base):
    """A tracked task."""

    __tablename__ = "Tasks"

    id: Mapped[UUID] = mapped_column("Id", Uuid, primary_key=True)
    title: Mapped[str] = mapped_column("Title", String(200), nullable=False)
    description: Mapped[str | None] = mapped_column("Description", String(1000), nullable=True)
    status: Mapped[TaskStatus] = mapped_column("Status", StatusType, nullable=False)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column("UpdatedAt", UTCDateTime, nullable=False)
    due_date: Mapped[datetime | None] = mapped_column("DueDate", UTCDateTime, nullable=True)

    @classmethod
    def new(
        cls,
        title: str,
        description: str | None = None,
        due_date: datetime | None = None,
    ) -> "TaskRecord":
        """Build a fresh task: new id, ``NOT_STARTED``, both timestamps set to now."""
        now = utcnow()
        return cls(
            id=uuid4(),
            title=title,
            description=description,
            status=TaskStatus.NOT_STARTED,
            created_at=now,
            updated_at=now,
            due_date=as_utc(due_date) if due_date is not None else None,
        )

    def mark_in_progress(self) -> None:
        self._transition_to(TaskStatus.IN_PROGRESS)

    def mark_completed(self) -> None:
        self._transition_to(TaskStatus.COMPLETED)

    def mark_not_started(self) -> None:
        self._transition_to(TaskStatus.NOT_STARTED)

    def update_details(self, title: str, description: str | None, due_date: datetime | None) -> None:
        """Replace title, description and due date. Status is left untouched."""
        self.title = title
        self.description = description
        self.due_date = as_utc(due_date) if due_date is not None else None
        self._touch()

    def _transition_to(self, status: TaskStatus) -> None:
        # Any state may move to any other; there is no terminal state.
        self.status = TaskStatus.parse(status)
        self._touch()

    def _touch(self) -> None:
        now = utcnow()
        # updated_at never decreases.
        if self.updated_at is not None and now < self.updated_at:
            now = self.updated_at
        self.updated_at = now

    def __repr__(self) -> str:
        return f"<TaskRecord(id={self.id}, title={self.title!r}, status={self.status!r})>"


Index("IX_Tasks_Status", TaskRecord.status)
Index("IX_Tasks_CreatedAt", TaskRecord.created_at)

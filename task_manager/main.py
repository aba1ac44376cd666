"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from task_manager.config import Settings, get_settings
from task_manager.database import create_db_engine, create_session_factory, get_session, init_db
from task_manager.errors import InvalidOperation, PersistenceFailure, TaskNotFound, ValidationFailed
from task_manager.logging_setup import setup_logging
from task_manager.models import ErrorResponse, HealthResponse, Task, TaskCreate, TaskUpdate
from task_manager.service import TaskService
from task_manager.store import SqlAlchemyTaskRepository
from task_manager.validation import field_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    return TaskService(SqlAlchemyTaskRepository(session))


@router.get("", response_model=list[Task])
def list_tasks(service: TaskService = Depends(get_task_service)) -> list[Task]:
    """List all tasks, newest first."""
    return service.list_tasks()


@router.get("/status/{task_status}", response_model=list[Task], responses=_BAD_REQUEST)
def list_tasks_by_status(
    task_status: int,
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    """List tasks with the given status: 0 = NotStarted, 1 = InProgress, 2 = Completed."""
    return service.list_tasks_by_status(task_status)


@router.get("/{task_id}", response_model=Task, responses=_NOT_FOUND)
def get_task(task_id: UUID, service: TaskService = Depends(get_task_service)) -> Task:
    """Get a specific task by ID."""
    return service.get_task(task_id)


@router.post(
    "",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    responses=_BAD_REQUEST,
)
def create_task(
    data: TaskCreate,
    request: Request,
    response: Response,
    service: TaskService = Depends(get_task_service),
) -> Task:
    """Create a new task. New tasks always start as NotStarted."""
    task = service.create_task(data)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{task.id}"
    return task


@router.put("/{task_id}", response_model=Task, responses={**_NOT_FOUND, **_BAD_REQUEST})
def update_task(
    task_id: UUID,
    data: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> Task:
    """Replace a task's title, description and due date. The status is not changed."""
    return service.update_task(task_id, data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
def delete_task(task_id: UUID, service: TaskService = Depends(get_task_service)) -> None:
    """Delete a task permanently."""
    service.delete_task(task_id)


@router.patch("/{task_id}/complete", response_model=Task, responses=_NOT_FOUND)
def mark_task_complete(task_id: UUID, service: TaskService = Depends(get_task_service)) -> Task:
    """Mark a task as Completed."""
    return service.mark_complete(task_id)


@router.patch("/{task_id}/incomplete", response_model=Task, responses=_NOT_FOUND)
def mark_task_incomplete(task_id: UUID, service: TaskService = Depends(get_task_service)) -> Task:
    """Reset a task to NotStarted."""
    return service.mark_incomplete(task_id)


@router.patch("/{task_id}/inprogress", response_model=Task, responses=_NOT_FOUND)
def mark_task_in_progress(task_id: UUID, service: TaskService = Depends(get_task_service)) -> Task:
    """Mark a task as InProgress."""
    return service.mark_in_progress(task_id)


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": [{"field": e.field, "message": e.message} for e in exc.errors],
        },
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await validation_failed_handler(request, ValidationFailed(field_errors(exc.errors())))


async def invalid_operation_handler(request: Request, exc: InvalidOperation) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def task_not_found_handler(request: Request, exc: TaskNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API application for ``settings`` (defaults to the environment)."""
    settings = settings or get_settings()

    engine = create_db_engine(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.configure_logging:
            setup_logging(settings.log_level, settings.log_file)
        logger.info(
            "Starting %s %s (%s)", settings.app_name, settings.app_version, settings.environment
        )
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Task tracking API: create, edit, delete and move tasks through their lifecycle.",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidOperation, invalid_operation_handler)
    app.add_exception_handler(TaskNotFound, task_not_found_handler)
    app.add_exception_handler(PersistenceFailure, persistence_failure_handler)

    @app.get("/api/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(version=settings.app_version)

    app.include_router(router, prefix=settings.api_prefix)
    return app


def run() -> None:
    """Run the API with uvicorn using the environment's settings.

    Equivalent to ``uvicorn --factory task_manager.main:create_app``.
    """
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.app_host, port=settings.app_port, log_config=None)

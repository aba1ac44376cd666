"""Pytest fixtures for the Task Manager API tests."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from task_manager.config import Settings
from task_manager.database import create_db_engine, create_session_factory, init_db
from task_manager.main import create_app
from task_manager.service import TaskService
from tests.fakes import InMemoryTaskRepository

API = "/api/v1"


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory database."""
    return Settings(database_url="sqlite://", app_version="9.9.9", configure_logging=False)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create a test client for the API (runs startup so the schema exists)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def service(repository: InMemoryTaskRepository) -> TaskService:
    return TaskService(repository)

"""Tests for the health check endpoint and application startup."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

import task_manager.main as main_module
from task_manager.config import Settings
from task_manager.main import create_app


def test_health_check(client: TestClient) -> None:
    """Test that health check returns healthy status."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "9.9.9"

    stamp = datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
    assert stamp.utcoffset() == timedelta(0)
    assert abs(datetime.now(UTC) - stamp) < timedelta(minutes=1)


def test_startup_configures_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(main_module, "setup_logging", lambda *args: calls.append(args))
    settings = Settings(database_url="sqlite://", log_level="DEBUG", log_file="api.log")

    with TestClient(create_app(settings)):
        assert calls == [("DEBUG", "api.log")]


def test_startup_can_leave_logging_alone(
    monkeypatch: pytest.MonkeyPatch, settings: Settings
) -> None:
    calls = []
    monkeypatch.setattr(main_module, "setup_logging", lambda *args: calls.append(args))

    with TestClient(create_app(settings)):
        assert calls == []


def test_importing_main_builds_no_app() -> None:
    assert not hasattr(main_module, "app")

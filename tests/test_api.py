"""Test HTTP API endpoints."""

import pytest
from fastapi.testclient import TestClient

from stockflow.container import get_health_checker, get_monitor
from stockflow.main import app
from stockflow.pipeline import CycleResult
from stockflow.services import HealthChecker


class FakeMonitor:
    """Monitor stand-in that records check requests."""

    def __init__(self, started: bool = True) -> None:
        self.started = started
        self.requests: list[str] = []
        self.scheduler = None

    async def request_check(self, source: str = "manual") -> str:
        if not self.started:
            raise RuntimeError("Alert monitor not started")
        self.requests.append(source)
        return f"{source}_abc123"


@pytest.fixture
def checker():
    return HealthChecker(unhealthy_threshold=2)


@pytest.fixture
def monitor():
    return FakeMonitor()


@pytest.fixture
def client(monitor, checker):
    app.dependency_overrides[get_monitor] = lambda: monitor
    app.dependency_overrides[get_health_checker] = lambda: checker
    yield TestClient(app)
    app.dependency_overrides.clear()


def failed_cycle() -> CycleResult:
    return CycleResult(
        success=False,
        fetched_count=0,
        new_count=0,
        processed_count=0,
        delivered_count=0,
        failed_count=0,
        error="feed down",
    )


def test_trigger_check(client, monitor):
    """Test a manual check is queued and acknowledged at once."""
    response = client.post("/api/v1/notifications/check")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Notification check started"
    assert body["correlation_id"] == "manual_abc123"
    assert monitor.requests == ["manual"]


def test_trigger_check_not_started(client, monitor):
    """Test a stopped monitor answers 503."""
    monitor.started = False

    response = client.post("/api/v1/notifications/check")

    assert response.status_code == 503


def test_monitoring_status(client, checker):
    """Test status reports schedule and the last cycle."""
    checker.record_cycle(failed_cycle())

    response = client.get("/api/v1/notifications/status")

    assert response.status_code == 200
    body = response.json()
    assert body["interval_minutes"] >= 1
    assert body["scheduler_running"] is False
    assert body["last_cycle"]["success"] is False
    assert body["last_cycle"]["error"] == "feed down"


def test_health(client):
    """Test health endpoint on a fresh checker."""
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["last_cycle_at"] is None
    assert body["version"]


def test_ready_unhealthy(client, checker):
    """Test readiness fails after repeated failed cycles."""
    assert client.get("/api/v1/health/ready").status_code == 200

    checker.record_cycle(failed_cycle())
    checker.record_cycle(failed_cycle())

    assert client.get("/api/v1/health/ready").status_code == 503


def test_live(client):
    """Test liveness endpoint."""
    response = client.get("/api/v1/health/live")

    assert response.status_code == 200
    assert response.json()["alive"] is True

"""
Unit tests for pathbench.api module.
Tests the HTTP trigger surface with in-memory backends.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pathbench.api import RunRequest, app, get_orchestrator, get_settings
from pathbench.backends import DirectBackend, HttpBackend
from pathbench.backends.base import BackendTag
from pathbench.benchmark.orchestrator import BenchmarkOrchestrator
from pathbench.config import DEFAULT_ITERATIONS, DEFAULT_SCALE, MAX_SCALE, Settings


@pytest.fixture
def client_factory(make_backend, fast_settings):
    """Build a TestClient whose runs use fake backends."""

    def _client(primary=None, alternate=None):
        fast_settings.include_load_phases = False

        def _orchestrator():
            return BenchmarkOrchestrator(
                primary or make_backend(BackendTag.PRIMARY),
                alternate or make_backend(BackendTag.ALTERNATE),
                fast_settings,
            )

        app.dependency_overrides[get_orchestrator] = _orchestrator
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


class TestAPI:
    """Test the API endpoints."""

    def test_app_is_fastapi_instance(self):
        assert isinstance(app, FastAPI)

    def test_health(self, client_factory):
        response = client_factory().get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "timestamp" in body

    def test_run_returns_report(self, client_factory):
        client = client_factory()

        response = client.post("/benchmark/run", json={"user_count": 20, "load_iterations": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["test_config"] == {"user_count": 20, "load_iterations": 2}
        report = body["report"]
        assert report["primary"]["total_operations"] > 0
        assert report["primary"]["success_rate"] == 1.0
        assert "point_lookup" in report["categories"]
        assert {s["backend"] for s in report["samples"]} == {"primary", "alternate"}

    def test_run_without_body_uses_defaults(self, client_factory):
        client = client_factory()

        response = client.post("/benchmark/run")

        assert response.status_code == 200
        assert response.json()["test_config"] == {
            "user_count": DEFAULT_SCALE,
            "load_iterations": DEFAULT_ITERATIONS,
        }

    @pytest.mark.parametrize(
        "payload",
        [
            {"user_count": 0},
            {"user_count": MAX_SCALE + 1},
            {"load_iterations": -1},
            {"user_count": "many"},
        ],
    )
    def test_invalid_parameters_rejected(self, client_factory, payload):
        client = client_factory()

        response = client.post("/benchmark/run", json=payload)

        assert response.status_code == 422

    def test_setup_failure_returns_500(self, client_factory, make_backend):
        alternate = make_backend(BackendTag.ALTERNATE)
        alternate.fail_connect = True
        client = client_factory(alternate=alternate)

        response = client.post("/benchmark/run", json={"user_count": 5, "load_iterations": 1})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "warmup" in body["error"]
        assert alternate.closed

    def test_operation_failures_still_succeed(self, client_factory, make_backend):
        alternate = make_backend(BackendTag.ALTERNATE, fail_on=["join"])
        client = client_factory(alternate=alternate)

        response = client.post("/benchmark/run", json={"user_count": 5, "load_iterations": 2})

        assert response.status_code == 200
        report = response.json()["report"]
        assert report["alternate"]["success_rate"] < 1.0
        assert "join" not in report["categories"]


class TestDependencies:
    def test_orchestrator_gets_fresh_backends(self):
        settings = Settings(http_url="http://sql.test", http_token="secret")

        first = get_orchestrator(settings)
        second = get_orchestrator(settings)

        assert isinstance(first.primary, DirectBackend)
        assert isinstance(first.alternate, HttpBackend)
        assert first.alternate.base_url == "http://sql.test"
        assert first.alternate.token == "secret"
        assert first.primary is not second.primary

    def test_settings_come_from_environment(self, monkeypatch):
        monkeypatch.setenv("PATHBENCH_CONCURRENCY", "7")
        assert get_settings().concurrency == 7

    def test_run_request_defaults(self):
        request = RunRequest()
        assert request.user_count == DEFAULT_SCALE
        assert request.load_iterations == DEFAULT_ITERATIONS

"""Integration tests for health probes and application-wide HTTP behaviour."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from src.pricehub.core.services import DbSessionService
from tests.fixtures.core import API


class TestHealth:
    def test_liveness(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "timestamp" in response.json()

    def test_readiness(self, client: TestClient):
        response = client.get("/health/ready")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["database"]["status"] == "healthy"
        assert body["environment"] == "test"

    def test_readiness_when_database_is_down(self, client: TestClient):
        with patch.object(DbSessionService, "health_check", return_value=False):
            response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_only_liveness_and_readiness_are_exposed(self, client: TestClient):
        paths = {
            route.path
            for route in client.app.routes
            if getattr(route, "path", "").startswith("/health")
        }
        assert paths == {"/health", "/health/ready"}
        assert client.get("/health/database").status_code == 404


class TestHttpBehaviour:
    def test_unknown_route(self, client: TestClient):
        response = client.get(f"{API}/nothing-here")
        assert response.status_code == 404
        assert response.json() == {
            "error": {
                "message": f"Route GET {API}/nothing-here not found",
                "statusCode": 404,
                "errorType": "HTTPException",
                "stack": response.json()["error"]["stack"],
            }
        }

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client: TestClient):
        response = client.get("/health")
        assert response.headers["X-Request-ID"]

    def test_security_headers(self, client: TestClient):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in response.headers

"""Unit tests for the JSON error envelope and exception mapping."""

import json

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError, SQLAlchemyError
from starlette.requests import Request

from src.pricehub.api.http.middleware.errors import (
    classify_integrity_error,
    register_exception_handlers,
    unhandled_exception_response,
)
from src.pricehub.runtime.config.config_data import ConfigData
from src.pricehub.runtime.context import with_context


class FakeDriverError(Exception):
    def __init__(self, message: str, pgcode: str | None = None):
        super().__init__(message)
        self.pgcode = pgcode


class Body(BaseModel):
    name: str
    quantity: int


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/http")
    def raise_http():
        raise HTTPException(status_code=403, detail="Nope")

    @app.post("/validate")
    def validate(body: Body):
        return body

    @app.get("/missing")
    def missing():
        raise NoResultFound()

    @app.get("/duplicate")
    def duplicate():
        raise IntegrityError(
            "INSERT", {}, FakeDriverError("UNIQUE constraint failed: tenanttable.email")
        )

    @app.get("/down")
    def down():
        raise OperationalError("SELECT 1", {}, FakeDriverError("connection refused"))

    @app.get("/db")
    def db_error():
        raise SQLAlchemyError("boom")

    return app


@pytest.fixture
def error_client(error_app: FastAPI) -> TestClient:
    return TestClient(error_app, raise_server_exceptions=False)


def make_request(path: str = "/thing", method: str = "GET") -> Request:
    return Request(
        {
            "type": "http",
            "method": method,
            "path": path,
            "headers": [(b"x-request-id", b"req-42")],
            "query_string": b"",
            "client": ("10.0.0.1", 1234),
        }
    )


class TestIntegrityClassification:
    @pytest.mark.parametrize(
        ("orig", "expected_status"),
        [
            (FakeDriverError("duplicate key", pgcode="23505"), 409),
            (FakeDriverError("UNIQUE constraint failed: producttable.sku"), 409),
            (FakeDriverError("violates fk", pgcode="23503"), 400),
            (FakeDriverError("FOREIGN KEY constraint failed"), 400),
            (FakeDriverError("NOT NULL constraint failed"), 400),
        ],
    )
    def test_status_codes(self, orig, expected_status):
        status_code, _ = classify_integrity_error(IntegrityError("stmt", {}, orig))
        assert status_code == expected_status

    def test_foreign_key_message(self):
        _, message = classify_integrity_error(
            IntegrityError("stmt", {}, FakeDriverError("x", pgcode="23503"))
        )
        assert message == "Invalid reference to related record"


class TestErrorEnvelope:
    def test_http_exception(self, error_client: TestClient):
        response = error_client.get("/http")
        assert response.status_code == 403
        error = response.json()["error"]
        assert error["message"] == "Nope"
        assert error["statusCode"] == 403

    def test_unknown_route(self, error_client: TestClient):
        response = error_client.get("/does/not/exist")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Route GET /does/not/exist not found"

    def test_validation_errors_are_400(self, error_client: TestClient):
        response = error_client.post("/validate", json={"name": "x", "quantity": "many"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["message"] == "Validation failed"
        assert [e["field"] for e in error["errors"]] == ["quantity"]

    def test_no_result(self, error_client: TestClient):
        response = error_client.get("/missing")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Record not found"

    def test_integrity_error(self, error_client: TestClient):
        response = error_client.get("/duplicate")
        assert response.status_code == 409

    def test_database_unavailable(self, error_client: TestClient):
        response = error_client.get("/down")
        assert response.status_code == 503
        assert "Database connection failed" in response.json()["error"]["message"]

    def test_generic_database_error(self, error_client: TestClient):
        response = error_client.get("/db")
        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Database error"

    def test_details_exposed_outside_production(self, error_client: TestClient):
        error = error_client.get("/http").json()["error"]
        assert error["errorType"] == "HTTPException"
        assert "Traceback" in error["stack"]


class TestUnhandledExceptions:
    def test_message_and_request_id(self):
        response = unhandled_exception_response(make_request(), RuntimeError("kaboom"))
        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["error"]["message"] == "kaboom"
        assert response.headers["X-Request-ID"] == "req-42"

    def test_production_hides_internals(self):
        override = ConfigData()
        override.app.environment = "production"
        with with_context(override):
            response = unhandled_exception_response(make_request(), RuntimeError("kaboom"))
        body = json.loads(response.body)
        assert body["error"]["message"] == "Internal Server Error"
        assert "stack" not in body["error"]
        assert "errorType" not in body["error"]

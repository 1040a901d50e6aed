"""Database, service and HTTP client fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from src.pricehub.api.http.app import app
from src.pricehub.api.http.app_data import ApplicationDependencies
from src.pricehub.api.http.middleware.limiter import _create_rate_limiter
from src.pricehub.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)

API = "/api/v1"


@pytest.fixture
def db_service() -> Generator[DbSessionService, None, None]:
    """Fresh in-memory database per test."""
    service = DbSessionService("sqlite://")
    service.create_all()
    yield service
    service.drop_all()
    service.dispose()


@pytest.fixture
def db_session(db_service: DbSessionService) -> Generator[Session, None, None]:
    session = db_service.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def jwt_generate_service() -> JwtGeneratorService:
    return JwtGeneratorService()


@pytest.fixture
def jwt_verify_service() -> JwtVerificationService:
    return JwtVerificationService()


@pytest.fixture
def client(
    db_service: DbSessionService,
    jwt_generate_service: JwtGeneratorService,
    jwt_verify_service: JwtVerificationService,
) -> Generator[TestClient, None, None]:
    """Test client wired to the per-test database, without running startup."""
    previous = getattr(app.state, "app_dependencies", None)
    app.state.app_dependencies = ApplicationDependencies(
        jwt_verify_service=jwt_verify_service,
        jwt_generation_service=jwt_generate_service,
        database_service=db_service,
    )
    _create_rate_limiter.cache_clear()
    try:
        yield TestClient(app)
    finally:
        app.state.app_dependencies = previous

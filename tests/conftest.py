"""Test configuration shared by unit and integration tests."""

import os

# Must be set before the application modules load their configuration
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-access-secret-with-enough-entropy")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-with-enough-entropy")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from tests.fixtures import *  # noqa: E402,F401,F403

"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RateLimiterConfig(BaseModel):
    """Rate limiter configuration for the public auth endpoints."""

    requests: int = Field(
        default=20, description="Number of requests allowed per window"
    )
    window_ms: int = Field(default=60000, description="Time window in milliseconds")
    enabled: bool = Field(default=True, description="Enable rate limiting")
    per_endpoint: bool = Field(
        default=True, description="Apply rate limiting per endpoint"
    )
    per_method: bool = Field(
        default=True, description="Apply rate limiting per HTTP method"
    )


class JWTConfig(BaseModel):
    """JWT issuance and validation configuration."""

    access_secret: str | None = Field(
        default=None, description="Secret used to sign access tokens"
    )
    refresh_secret: str | None = Field(
        default=None, description="Secret used to sign refresh tokens"
    )
    algorithm: str = Field(default="HS256", description="Signing algorithm")
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms accepted during validation",
    )
    issuer: str = Field(default="pricehub-api", description="Issuer claim value")
    access_expires_seconds: int = Field(
        default=3600, description="Access token lifetime in seconds"
    )
    refresh_expires_seconds: int = Field(
        default=7 * 24 * 3600, description="Refresh token lifetime in seconds"
    )
    clock_skew: int = Field(default=30, description="Clock skew tolerance in seconds")


class SecurityConfig(BaseModel):
    """Password and error exposure settings."""

    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost")
    min_password_length: int = Field(
        default=8, description="Minimum accepted password length"
    )
    expose_error_details: bool | None = Field(
        default=None,
        description="Include stack traces in error bodies (defaults to non-production)",
    )


class PaginationConfig(BaseModel):
    """Pagination defaults for list endpoints."""

    default_limit: int = Field(default=20, description="Default page size")
    max_limit: int = Field(default=100, description="Largest accepted page size")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./pricehub.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password.

        A mounted secrets file wins over an environment variable; when neither
        is configured the password embedded in the URL (if any) is used.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(
                    f"Environment variable {self.password_env_var} not set"
                )
            return password

        from sqlalchemy.engine import make_url

        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        if self.is_sqlite:
            return self.url

        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password
        if resolved_password and resolved_password != base_url.password:
            if base_url.password:
                logger.warning(
                    "Database password from secrets does not match the one in the URL. "
                    "Using password from secrets."
                )
            base_url = base_url.set(password=resolved_password)
        return base_url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    name: str = Field(default="PriceHub API", description="Application title")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    api_prefix: str = Field(default="/api/v1", description="Prefix for API routes")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    rate_limiter: RateLimiterConfig = Field(
        default_factory=RateLimiterConfig, description="Rate limiter configuration"
    )
    pagination: PaginationConfig = Field(
        default_factory=PaginationConfig, description="Pagination configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @property
    def expose_error_details(self) -> bool:
        if self.security.expose_error_details is not None:
            return self.security.expose_error_details
        return self.app.environment != "production"

import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger

from src.pricehub.core.models.claims import TokenPayload, TokenType
from src.pricehub.runtime.config.config_data import ConfigData
from src.pricehub.runtime.context import get_config

# Registered claims are always set by the generator itself
_RESERVED = {"iss", "sub", "exp", "iat", "nbf", "jti", "type"}


def signing_secret(config: ConfigData, token_type: TokenType) -> str:
    """Return the configured secret for ``token_type`` or fail with HTTP 500."""
    secret = (
        config.jwt.access_secret
        if token_type == "access"
        else config.jwt.refresh_secret
    )
    if not secret:
        raise HTTPException(
            status_code=500, detail=f"JWT {token_type} secret not configured"
        )
    return secret


class JwtGeneratorService:
    """Service for generating signed access and refresh tokens."""

    def generate_jwt(
        self,
        subject: str,
        token_type: TokenType,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        include_jti: bool = True,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim - the user ID
            token_type: ``access`` or ``refresh``; selects secret and lifetime
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime; defaults to the configured
                lifetime for ``token_type``
            include_jti: Whether to include a unique JWT ID claim
            secret: Optional signing secret overriding the configured one

        Returns:
            Signed JWT token string

        Raises:
            HTTPException: If the signing secret is missing or encoding fails
        """
        config = get_config()
        secret = secret or signing_secret(config, token_type)
        algorithm = config.jwt.algorithm

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                f"Attempted to use disallowed algorithm: {algorithm}, only {config.jwt.allowed_algorithms} are allowed"
            )
            raise HTTPException(
                status_code=500, detail=f"Algorithm {algorithm} not allowed"
            )

        if expires_in_seconds is None:
            expires_in_seconds = (
                config.jwt.access_expires_seconds
                if token_type == "access"
                else config.jwt.refresh_expires_seconds
            )

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": config.jwt.issuer,
            "sub": subject,
            "type": token_type,
            "iat": now,
            "exp": now + expires_in_seconds,
        }
        if include_jti:
            payload["jti"] = generate_token(16)

        if claims:
            payload.update({k: v for k, v in claims.items() if k not in _RESERVED})

        try:
            token = JsonWebToken([algorithm]).encode(
                {"alg": algorithm, "typ": "JWT"}, payload, secret
            )
        except JoseError as e:
            raise HTTPException(
                status_code=500, detail=f"JWT encoding failed: {str(e)}"
            ) from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self, payload: TokenPayload, expires_in_seconds: int | None = None
    ) -> str:
        """Generate a short-lived access token carrying role and tenant claims.

        Example:
            token = service.generate_access_token(
                TokenPayload(
                    user_id="user-123",
                    tenant_id="tenant-456",
                    role="supplier_admin",
                    tenant_type="supplier",
                )
            )
        """
        return self.generate_jwt(
            subject=payload.user_id,
            token_type="access",
            claims=payload.to_claims(),
            expires_in_seconds=expires_in_seconds,
        )

    def generate_refresh_token(
        self, payload: TokenPayload, expires_in_seconds: int | None = None
    ) -> str:
        """Generate a long-lived refresh token signed with the refresh secret."""
        return self.generate_jwt(
            subject=payload.user_id,
            token_type="refresh",
            claims=payload.to_claims(),
            expires_in_seconds=expires_in_seconds,
        )

    def generate_token_pair(self, payload: TokenPayload) -> dict[str, str]:
        return {
            "accessToken": self.generate_access_token(payload),
            "refreshToken": self.generate_refresh_token(payload),
        }

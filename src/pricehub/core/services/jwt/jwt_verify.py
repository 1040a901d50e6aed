"""JWT verification service."""

from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger
from pydantic import ValidationError

from src.pricehub.core.models.claims import TokenPayload, TokenType
from src.pricehub.core.services.jwt.jwt_gen import signing_secret
from src.pricehub.runtime.context import get_config


class JwtVerificationService:
    def verify_jwt(
        self,
        token: str,
        token_type: TokenType,
        *,
        key: str | None = None,
    ) -> TokenPayload:
        """Verify signature, registered claims and token type.

        Raises:
            HTTPException: 401 for any invalid token, 500 when the
                verification secret is not configured
        """
        cfg = get_config()
        verification_key = key or signing_secret(cfg, token_type)

        if not token:
            raise HTTPException(status_code=401, detail="Empty token")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.issuer]},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = JsonWebToken(cfg.jwt.allowed_algorithms).decode(
                token, verification_key, claims_options=claims_options
            )
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected {} token: {}", token_type, exc)
            raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

        if claims.get("type") != token_type:
            raise HTTPException(status_code=401, detail="Invalid token type")

        try:
            return TokenPayload.model_validate(dict(claims))
        except ValidationError as exc:
            raise HTTPException(status_code=401, detail="Malformed token claims") from exc

    def verify_access_token(self, token: str) -> TokenPayload:
        return self.verify_jwt(token, "access")

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return self.verify_jwt(token, "refresh")

"""Token payload models shared by the JWT services and the auth guards."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TokenType = Literal["access", "refresh"]


class TokenPayload(BaseModel):
    """Application claims carried by access and refresh tokens.

    Field aliases match the wire names used in the token body.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="sub")
    tenant_id: str = Field(default="", alias="tenantId")
    role: str
    tenant_type: str = Field(alias="tenantType")
    token_type: TokenType | None = Field(default=None, alias="type")
    issuer: str | None = Field(default=None, alias="iss")
    issued_at: int | None = Field(default=None, alias="iat")
    expires_at: int | None = Field(default=None, alias="exp")
    jti: str | None = None

    def to_claims(self) -> dict[str, Any]:
        """Application claims only; registered claims are added when signing."""
        return {
            "sub": self.user_id,
            "tenantId": self.tenant_id,
            "role": self.role,
            "tenantType": self.tenant_type,
        }


class AuthContext(BaseModel):
    """The authenticated caller, as resolved from the token and the database."""

    user_id: str
    email: str
    tenant_id: str | None
    role: str
    tenant_type: str
    permissions: dict[str, dict[str, bool]] = Field(default_factory=dict)

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"

    @property
    def is_tenant_admin(self) -> bool:
        return self.role in ("supplier_admin", "company_admin")

    def can(self, resource: str, action: str) -> bool:
        """Admins can do everything; staff need an explicit permission."""
        if self.is_super_admin or self.is_tenant_admin:
            return True
        return self.permissions.get(resource, {}).get(action) is True

"""Request and response models for registration and login."""

from datetime import datetime

from pydantic import EmailStr, Field

from src.pricehub.entities import TenantType, UserRole

from ._base import ApiModel


class RegisterInput(ApiModel):
    tenant_name: str = Field(min_length=1, max_length=255)
    tenant_type: TenantType
    email: EmailStr
    password: str
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: UserRole | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    postal_code: str | None = Field(default=None, max_length=20)
    # Sent by the registration form; the tenant type already carries it
    registration_type: str | None = None


class LoginInput(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshInput(ApiModel):
    refresh_token: str = Field(min_length=1)


class TokenPair(ApiModel):
    access_token: str
    refresh_token: str


class AccessToken(ApiModel):
    access_token: str


class RegisteredUser(ApiModel):
    id: str
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    status: str
    tenant_id: str | None
    tenant_type: str
    tenant_status: str


class RegisterResult(ApiModel):
    message: str
    user: RegisteredUser


class LoggedInUser(ApiModel):
    id: str
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    tenant_id: str | None
    tenant_type: str


class LoginResult(ApiModel):
    user: LoggedInUser
    tokens: TokenPair


class TenantSummary(ApiModel):
    id: str
    name: str
    type: str
    email: str
    phone: str | None = None
    address: str | None = None


class CurrentUser(ApiModel):
    id: str
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    status: str
    permissions: dict[str, dict[str, bool]]
    last_login_at: datetime | None
    tenant: TenantSummary | None

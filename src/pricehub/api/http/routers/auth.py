"""Registration, login and token endpoints."""

from fastapi import APIRouter, Depends, status

from src.pricehub.api.http.deps import authenticate, get_auth_service
from src.pricehub.api.http.middleware.limiter import rate_limit
from src.pricehub.core.models.auth import (
    AccessToken,
    CurrentUser,
    LoginInput,
    LoginResult,
    RefreshInput,
    RegisterInput,
    RegisterResult,
)
from src.pricehub.core.models.claims import AuthContext
from src.pricehub.core.services import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResult,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit())],
)
def register(
    data: RegisterInput,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResult:
    """Register a tenant and its first admin; both wait for approval."""
    return service.register(data)


@router.post(
    "/login",
    response_model=LoginResult,
    dependencies=[Depends(rate_limit())],
)
def login(
    data: LoginInput,
    service: AuthService = Depends(get_auth_service),
) -> LoginResult:
    return service.login(data)


@router.post(
    "/refresh",
    response_model=AccessToken,
    dependencies=[Depends(rate_limit())],
)
def refresh(
    data: RefreshInput,
    service: AuthService = Depends(get_auth_service),
) -> AccessToken:
    return service.refresh_access_token(data.refresh_token)


@router.get("/me", response_model=CurrentUser)
def me(
    caller: AuthContext = Depends(authenticate),
    service: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    return service.get_current_user(caller.user_id)

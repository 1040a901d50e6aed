"""Tenant admin endpoints for managing the users of their own tenant."""

from fastapi import APIRouter, Depends, status

from src.pricehub.api.http.deps import (
    authenticate,
    get_user_management_service,
    require_tenant_admin,
)
from src.pricehub.core.models.admin import (
    ActiveStatusInput,
    ApprovalInput,
    PermissionsInput,
    StaffUserInput,
    UserList,
    UserResult,
)
from src.pricehub.core.services import UserManagementService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(authenticate), Depends(require_tenant_admin())],
)


@router.get("", response_model=UserList)
def list_users(
    service: UserManagementService = Depends(get_user_management_service),
) -> UserList:
    return UserList(users=service.list_users())


@router.post("", response_model=UserResult, status_code=status.HTTP_201_CREATED)
def create_user(
    data: StaffUserInput,
    service: UserManagementService = Depends(get_user_management_service),
) -> UserResult:
    user = service.create_staff_user(data)
    return UserResult(message="User created successfully", user=user)


@router.post("/{user_id}/approve", response_model=UserResult)
def approve_user(
    user_id: str,
    data: ApprovalInput,
    service: UserManagementService = Depends(get_user_management_service),
) -> UserResult:
    user = service.approve_user(user_id, data.approved)
    message = "User approved successfully" if data.approved else "User rejected"
    return UserResult(message=message, user=user)


@router.put("/{user_id}/permissions", response_model=UserResult)
def update_permissions(
    user_id: str,
    data: PermissionsInput,
    service: UserManagementService = Depends(get_user_management_service),
) -> UserResult:
    user = service.update_permissions(user_id, data.permissions)
    return UserResult(message="Permissions updated successfully", user=user)


@router.put("/{user_id}/toggle-status", response_model=UserResult)
def toggle_user_status(
    user_id: str,
    data: ActiveStatusInput,
    service: UserManagementService = Depends(get_user_management_service),
) -> UserResult:
    user = service.set_user_active(user_id, data.is_active)
    state = "activated" if data.is_active else "deactivated"
    return UserResult(message=f"User {state} successfully", user=user)

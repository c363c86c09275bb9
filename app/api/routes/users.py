from fastapi import APIRouter, Depends, status

from app.api.deps import get_user_service, require_owner, require_roles
from app.models import User
from app.schemas.auth import AccessTokenClaims
from app.schemas.common import APIResponse
from app.schemas.users import (
    ROLES,
    CreateUserRequest,
    DeletedUserResponse,
    UpdateUserRequest,
    UserDetailResponse,
    UserListResponse,
    UserSummaryResponse,
)
from app.services.auth_service import format_timestamp
from app.services.user_service import UserService


router = APIRouter(prefix="/users", tags=["Users"])


def to_detail(user: User) -> UserDetailResponse:
    return UserDetailResponse(
        id=user.id,
        full_name=user.full_name,
        username=user.username,
        email=user.email,
        role=user.role,
        phone_number=user.phone_number,
        is_active=user.is_active,
        last_login_at=format_timestamp(user.last_login_at),
        created_at=format_timestamp(user.created_at),
        updated_at=format_timestamp(user.updated_at),
    )


@router.post(
    "",
    response_model=APIResponse[UserDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    data: CreateUserRequest,
    _: AccessTokenClaims = Depends(require_owner),
    user_service: UserService = Depends(get_user_service),
):
    """
    Create a new employee account (Owner only).
    """
    user = user_service.create_user(data)
    return APIResponse[UserDetailResponse](
        message="User account created successfully", data=to_detail(user)
    )


@router.get("", response_model=APIResponse[UserListResponse])
def get_all_users(
    _: AccessTokenClaims = Depends(require_owner),
    user_service: UserService = Depends(get_user_service),
):
    """
    Get all employees (Owner only).
    """
    users = user_service.list_users()
    return APIResponse[UserListResponse](
        message="Users retrieved successfully",
        data=UserListResponse(
            users=[UserSummaryResponse.model_validate(u) for u in users],
            total=len(users),
        ),
    )


@router.get("/{user_id}", response_model=APIResponse[UserDetailResponse])
def get_user(
    user_id: int,
    _: AccessTokenClaims = Depends(require_owner),
    user_service: UserService = Depends(get_user_service),
):
    """
    Get a single employee (Owner only).
    """
    user = user_service.get_user(user_id)
    return APIResponse[UserDetailResponse](
        message="User detail retrieved successfully", data=to_detail(user)
    )


@router.put("/{user_id}", response_model=APIResponse[UserDetailResponse])
def update_user(
    user_id: int,
    data: UpdateUserRequest,
    claims: AccessTokenClaims = Depends(require_roles(*ROLES)),
    user_service: UserService = Depends(get_user_service),
):
    """
    Update an employee profile. Non-owners may only update themselves.
    """
    user = user_service.update_user(user_id, data, claims.user_id, claims.role)
    return APIResponse[UserDetailResponse](message="User updated successfully", data=to_detail(user))


@router.delete("/{user_id}", response_model=APIResponse[DeletedUserResponse])
def delete_user(
    user_id: int,
    claims: AccessTokenClaims = Depends(require_owner),
    user_service: UserService = Depends(get_user_service),
):
    """
    Deactivate an employee account (Owner only, never yourself).
    """
    user_service.deactivate_user(user_id, claims.user_id)
    return APIResponse[DeletedUserResponse](
        message="User account deactivated successfully", data=DeletedUserResponse(id=user_id)
    )

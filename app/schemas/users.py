from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, EmailStr, Field

# Role type
RoleType = Literal["owner", "cashier", "staff", "courier"]
ROLES = get_args(RoleType)

USERNAME_PATTERN = r"^[A-Za-z0-9_.\-]+$"
PHONE_PATTERN = r"^[0-9]+$"
MIN_PASSWORD_LENGTH = 8


class CreateUserRequest(BaseModel):
    full_name: str = Field(..., min_length=3, max_length=150)
    username: str = Field(..., min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    phone_number: str = Field(..., min_length=1, max_length=30, pattern=PHONE_PATTERN)
    role: RoleType


class UpdateUserRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    full_name: Optional[str] = Field(None, min_length=3, max_length=150)
    username: Optional[str] = Field(None, min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH, max_length=128)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=30, pattern=PHONE_PATTERN)
    role: Optional[RoleType] = None
    is_active: Optional[bool] = None


class UserSummaryResponse(BaseModel):
    """Concise user data for list views."""
    id: int
    full_name: str
    username: str
    role: str
    is_active: bool

    model_config = {"from_attributes": True}


class UserDetailResponse(BaseModel):
    id: int
    full_name: str
    username: str
    email: str
    role: str
    phone_number: str
    is_active: bool
    last_login_at: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


class UserListResponse(BaseModel):
    users: List[UserSummaryResponse]
    total: int


class DeletedUserResponse(BaseModel):
    id: int

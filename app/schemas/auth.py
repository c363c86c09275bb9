from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


# Request schemas
class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, max_length=255)


# Response schemas
class TokenResponse(BaseModel):
    token_type: str = "Bearer"
    access_token: str
    refresh_token: str
    expires_in: int  # seconds


class AuthUserSummary(BaseModel):
    """Minimal user info returned with a fresh token pair."""
    id: int
    full_name: str
    username: str
    role: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: TokenResponse
    user: AuthUserSummary


class RefreshTokenResponse(BaseModel):
    token_type: str = "Bearer"
    access_token: str
    expires_in: int


class LogoutResponse(BaseModel):
    status: Literal["access_terminated"] = "access_terminated"


class AuthMeResponse(BaseModel):
    id: int
    full_name: str
    username: str
    email: str
    role: str
    phone_number: str
    is_active: bool
    last_login_at: Optional[str] = None
    created_at: str


class AccessTokenClaims(BaseModel):
    """Verified contents of an access token, attached to the request."""
    user_id: int
    username: str
    role: str
    jti: str
    issued_at: datetime
    expires_at: datetime
    issuer: str

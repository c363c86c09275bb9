from fastapi import APIRouter, Depends, Request

from app.api.deps import get_auth_service, get_current_claims
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.rate_limit import limiter, LOGIN_LIMIT, REFRESH_LIMIT
from app.schemas.auth import (
    AccessTokenClaims,
    AuthMeResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
)
from app.schemas.common import APIResponse
from app.services.auth_service import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=APIResponse[LoginResponse])
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with username and password.
    Returns an access token, a refresh token and a user summary.
    """
    result = auth_service.authenticate(data.username, data.password)
    return APIResponse[LoginResponse](message="Login successfully", data=result)


@router.post("/refresh-token", response_model=APIResponse[RefreshTokenResponse])
@limiter.limit(REFRESH_LIMIT)
def refresh_access_token(
    request: Request,
    data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Get a new access token using a valid refresh token.
    The refresh token is not rotated.
    """
    result = auth_service.renew(data.refresh_token)
    return APIResponse[RefreshTokenResponse](
        message="Access token refreshed successfully", data=result
    )


@router.post("/logout", response_model=APIResponse[LogoutResponse])
def logout(
    data: RefreshTokenRequest,
    claims: AccessTokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Logout by deleting the refresh token and blacklisting the current access token.
    """
    try:
        auth_service.revoke(
            refresh_token=data.refresh_token,
            jti=claims.jti,
            expires_at=claims.expires_at,
            requesting_user_id=claims.user_id,
        )
    except UnauthorizedError as e:
        raise ForbiddenError(e.detail)

    return APIResponse[LogoutResponse](message="Logout successfully", data=LogoutResponse())


@router.get("/me", response_model=APIResponse[AuthMeResponse])
def get_current_user_info(
    claims: AccessTokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Get the authenticated user's profile.
    """
    result = auth_service.get_profile(claims.user_id)
    return APIResponse[AuthMeResponse](message="User profile retrieved successfully", data=result)

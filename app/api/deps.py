from typing import Callable, Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import AuthConfig, settings
from app.core.database import SessionLocal
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.schemas.auth import AccessTokenClaims
from app.services.auth_service import AuthService
from app.services.session_store import SessionStore
from app.services.user_service import UserService


# HTTP Bearer token scheme. Missing headers are reported by get_current_claims
security = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_auth_config() -> AuthConfig:
    """Token settings, frozen at the point they enter the service layer."""
    return settings.auth_config()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_auth_service(
    db: Session = Depends(get_db),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthService:
    return AuthService(users=UserService(db), store=SessionStore(db), config=config)


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> AccessTokenClaims:
    """
    Dependency resolving the bearer token into verified claims.
    Raises if the header is missing, the token is invalid, or it was logged out.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Unauthorized: Missing or invalid token format")

    return auth_service.authorize(credentials.credentials)


def require_roles(*allowed_roles: str) -> Callable[..., AccessTokenClaims]:
    """
    Dependency factory restricting a route to the given roles.
    The role comes from the verified token claims.
    """

    def checker(claims: AccessTokenClaims = Depends(get_current_claims)) -> AccessTokenClaims:
        if claims.role not in allowed_roles:
            raise ForbiddenError("You do not have permission to access this resource")
        return claims

    return checker


require_owner = require_roles("owner")

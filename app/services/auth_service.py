import logging
from datetime import datetime
from typing import Optional

from app.core.config import AuthConfig
from app.core.database import utcnow
from app.core.exceptions import (
    AccountInactiveError,
    InvalidCredentialsError,
    InvalidTokenError,
    StorageError,
    TokenExpiredError,
    TokenRevokedError,
    UnauthorizedError,
    UserNotFoundError,
)
from app.core.security import (
    create_access_token,
    generate_refresh_token,
    verify_access_token,
    verify_password,
)
from app.models import User
from app.schemas.auth import (
    AccessTokenClaims,
    AuthMeResponse,
    AuthUserSummary,
    LoginResponse,
    RefreshTokenResponse,
    TokenResponse,
)
from app.services.session_store import SessionStore
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(TIMESTAMP_FORMAT) if value else None


class AuthService:
    """
    Session lifecycle: login, renewal, logout and the per-request check.

    Holds no state of its own; everything lives in the session store, so one
    instance per request is fine and concurrent requests need no locking.
    """

    def __init__(self, users: UserService, store: SessionStore, config: AuthConfig):
        self.users = users
        self.store = store
        self.config = config

    @property
    def expires_in(self) -> int:
        return int(self.config.access_token_ttl.total_seconds())

    def _issue_access_token(self, user: User) -> tuple[str, str]:
        return create_access_token(
            user_id=user.id,
            username=user.username,
            role=user.role,
            secret_key=self.config.secret_key,
            expires_delta=self.config.access_token_ttl,
            algorithm=self.config.algorithm,
            issuer=self.config.issuer,
        )

    def authenticate(self, username: str, password: str) -> LoginResponse:
        """
        Verify credentials and open a session.

        Unknown usernames and wrong passwords raise the same error. An inactive
        account is only reported once the password has been proven.
        """
        user = self.users.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for username {username!r}")
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountInactiveError()

        user_id = user.id
        summary = AuthUserSummary.model_validate(user)
        access_token, _ = self._issue_access_token(user)
        refresh_token = generate_refresh_token()
        self.store.save_refresh_token(
            user_id=user_id,
            token=refresh_token,
            expires_at=utcnow() + self.config.refresh_token_ttl,
        )

        # Login does not depend on the timestamp write. A failed write rolls
        # the session back, so nothing below may touch ``user``
        try:
            self.users.update_last_login(user_id)
        except StorageError as e:
            logger.warning(f"Could not record last login for user {user_id}: {e}")

        return LoginResponse(
            token=TokenResponse(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=self.expires_in,
            ),
            user=summary,
        )

    def renew(self, refresh_token: str) -> RefreshTokenResponse:
        """
        Issue a new access token for a live refresh token.

        The refresh token itself is reused until it expires. Expired rows are
        left for the cleanup job.
        """
        stored = self.store.find_refresh_token(refresh_token)
        if stored is None:
            raise InvalidTokenError()

        if stored.expires_at <= utcnow():
            raise TokenExpiredError()

        user = self.users.get_user_by_id(stored.user_id)
        if user is None:
            raise UserNotFoundError()

        access_token, _ = self._issue_access_token(user)
        return RefreshTokenResponse(access_token=access_token, expires_in=self.expires_in)

    def revoke(
        self,
        refresh_token: str,
        jti: str,
        expires_at: datetime,
        requesting_user_id: int,
    ) -> None:
        """
        Log out: drop the refresh token and blacklist the access token.

        An unknown refresh token is treated as already logged out. A refresh
        token owned by someone other than the bearer is refused and left alone.
        """
        stored = self.store.find_refresh_token(refresh_token)
        if stored is None:
            return

        if stored.user_id != requesting_user_id:
            logger.warning(
                f"User {requesting_user_id} tried to revoke a session of user {stored.user_id}"
            )
            raise UnauthorizedError("You cannot logout another user's session")

        self.store.delete_refresh_token(refresh_token)
        self.store.blacklist(jti, expires_at)
        logger.info(f"User {requesting_user_id} logged out")

    def get_profile(self, user_id: int) -> AuthMeResponse:
        user = self.users.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        if not user.is_active:
            raise AccountInactiveError()

        return AuthMeResponse(
            id=user.id,
            full_name=user.full_name,
            username=user.username,
            email=user.email,
            role=user.role,
            phone_number=user.phone_number,
            is_active=user.is_active,
            last_login_at=format_timestamp(user.last_login_at),
            created_at=format_timestamp(user.created_at),
        )

    def authorize(self, access_token: str) -> AccessTokenClaims:
        """
        Validate a bearer token for a protected request.

        Signature and expiry are checked before the blacklist so forged or
        stale tokens never cost a database round trip.
        """
        claims = verify_access_token(
            access_token,
            self.config.secret_key,
            algorithm=self.config.algorithm,
            issuer=self.config.issuer,
        )

        if self.store.is_blacklisted(claims.jti):
            raise TokenRevokedError()

        return claims

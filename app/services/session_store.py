"""Persistence for refresh tokens and blacklisted access tokens."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.core.exceptions import StorageError
from app.core.security import hash_token
from app.models import RefreshToken, TokenBlacklist

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Owns every write to ``refresh_tokens`` and ``token_blacklist``.

    Each call commits on its own. Database failures are rolled back, logged
    and re-raised as ``StorageError`` so callers never see driver messages.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, exc: Exception) -> StorageError:
        self.db.rollback()
        logger.error(f"SessionStore.{operation} failed: {exc}")
        return StorageError()

    def save_refresh_token(
        self, user_id: int, token: str, expires_at: datetime
    ) -> RefreshToken:
        """Store a refresh token hash for a newly authenticated session."""
        refresh_token = RefreshToken(
            user_id=user_id,
            token_hash=hash_token(token),
            expires_at=expires_at,
        )
        try:
            self.db.add(refresh_token)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("save_refresh_token", e)
        return refresh_token

    def find_refresh_token(self, token: str) -> Optional[RefreshToken]:
        """Look up a refresh token by its value. Expired rows are returned too."""
        try:
            return self.db.query(RefreshToken).filter(
                RefreshToken.token_hash == hash_token(token)
            ).first()
        except SQLAlchemyError as e:
            raise self._fail("find_refresh_token", e)

    def delete_refresh_token(self, token: str) -> None:
        try:
            self.db.query(RefreshToken).filter(
                RefreshToken.token_hash == hash_token(token)
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_refresh_token", e)

    def blacklist(self, jti: str, expires_at: datetime) -> None:
        """Add an access token JTI to the blacklist. Already listed is a no-op."""
        if self.is_listed(jti):
            return
        try:
            self.db.add(TokenBlacklist(jti=jti, expires_at=expires_at))
            self.db.commit()
        except IntegrityError:
            # Concurrent logout with the same access token got there first
            self.db.rollback()
        except SQLAlchemyError as e:
            raise self._fail("blacklist", e)

    def is_listed(self, jti: str) -> bool:
        """Whether a row exists for this JTI, expired or not."""
        try:
            return self.db.query(TokenBlacklist.id).filter(
                TokenBlacklist.jti == jti
            ).first() is not None
        except SQLAlchemyError as e:
            raise self._fail("is_listed", e)

    def is_blacklisted(self, jti: str) -> bool:
        """Check if a token is blacklisted and the entry has not aged out."""
        try:
            return self.db.query(TokenBlacklist.id).filter(
                TokenBlacklist.jti == jti,
                TokenBlacklist.expires_at > utcnow(),
            ).first() is not None
        except SQLAlchemyError as e:
            raise self._fail("is_blacklisted", e)

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """
        Remove expired blacklist entries and refresh tokens.
        Returns number of rows removed.
        """
        now = now or utcnow()
        try:
            blacklist_deleted = self.db.query(TokenBlacklist).filter(
                TokenBlacklist.expires_at <= now
            ).delete(synchronize_session=False)

            refresh_deleted = self.db.query(RefreshToken).filter(
                RefreshToken.expires_at <= now
            ).delete(synchronize_session=False)

            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("cleanup_expired", e)
        return blacklist_deleted + refresh_deleted

"""Refresh token and access-token blacklist models."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base, utcnow


class TokenBlacklist(Base):
    """Stores the JTI of access tokens revoked by logout until they expire."""

    __tablename__ = "token_blacklist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    jti = Column(String(36), unique=True, nullable=False, index=True)  # JWT ID
    expires_at = Column(DateTime, nullable=False)  # copied from the access token
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Index for cleanup of expired tokens
    __table_args__ = (
        Index("ix_token_blacklist_expires_at", "expires_at"),
    )


class RefreshToken(Base):
    """Stores live refresh tokens. Only the SHA-256 of the token is kept."""

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False)  # SHA-256 hash
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

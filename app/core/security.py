from datetime import datetime, timedelta, timezone
from uuid import uuid4
import hashlib
import secrets

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError
from passlib.context import CryptContext

from app.core.config import TOKEN_ISSUER
from app.core.exceptions import (
    AccessTokenExpiredError,
    BadSignatureError,
    MalformedTokenError,
)
from app.schemas.auth import AccessTokenClaims

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Length in bytes of entropy behind an opaque refresh token
REFRESH_TOKEN_BYTES = 48


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or corrupted hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def hash_token(token: str) -> str:
    """Create SHA-256 hash of a token for storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_refresh_token() -> str:
    """Opaque, random refresh token. Carries no user data."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    secret_key: str,
    expires_delta: timedelta,
    algorithm: str = "HS256",
    issuer: str = TOKEN_ISSUER,
) -> tuple[str, str]:
    """
    Create a signed JWT access token.
    Returns (token, jti).
    """
    now = datetime.now(timezone.utc)
    jti = str(uuid4())

    to_encode = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "jti": jti,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "iss": issuer,
    }

    encoded_jwt = jwt.encode(to_encode, secret_key, algorithm=algorithm)
    return encoded_jwt, jti


def verify_access_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
    issuer: str = TOKEN_ISSUER,
) -> AccessTokenClaims:
    """
    Validate an access token and return its claims.

    The algorithm is pinned: a header naming anything else is rejected before
    the signature is looked at, so ``none`` or asymmetric-key tricks never
    reach verification.

    Raises:
        MalformedTokenError: not a JWT, or claims missing / of the wrong type
        BadSignatureError: wrong key or unexpected algorithm
        AccessTokenExpiredError: signature valid but past ``exp``
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise MalformedTokenError()

    if header.get("alg") != algorithm:
        raise BadSignatureError("Unexpected signing algorithm")

    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm], issuer=issuer)
    except ExpiredSignatureError:
        raise AccessTokenExpiredError()
    except JWTClaimsError:
        raise MalformedTokenError("Invalid token claims")
    except JWTError:
        # Structure and algorithm were checked above, so this is the signature
        raise BadSignatureError()

    try:
        return AccessTokenClaims(
            user_id=int(payload["sub"]),
            username=payload["username"],
            role=payload["role"],
            jti=payload["jti"],
            issued_at=_from_timestamp(payload["iat"]),
            expires_at=_from_timestamp(payload["exp"]),
            issuer=payload["iss"],
        )
    except (KeyError, TypeError, ValueError):
        raise MalformedTokenError("Invalid token claims")


def _from_timestamp(value) -> datetime:
    """Numeric JWT date to naive UTC, matching how timestamps are stored."""
    return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)

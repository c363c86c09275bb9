from app.models.user import User
from app.models.token_blacklist import TokenBlacklist, RefreshToken

__all__ = [
    "User",
    "TokenBlacklist",
    "RefreshToken",
]

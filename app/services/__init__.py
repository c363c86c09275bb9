from app.services.auth_service import AuthService
from app.services.session_store import SessionStore
from app.services.user_service import UserService

__all__ = [
    "AuthService",
    "SessionStore",
    "UserService",
]

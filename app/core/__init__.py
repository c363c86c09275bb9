from app.core.config import settings
from app.core.database import Base, engine, SessionLocal
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    verify_access_token,
)

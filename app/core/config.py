from datetime import timedelta

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings

TOKEN_ISSUER = "vip-laundry-backend"


class AuthConfig(BaseModel):
    """Immutable token settings handed to the session manager at construction."""

    model_config = ConfigDict(frozen=True)

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_hours: int = 24
    issuer: str = TOKEN_ISSUER

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(hours=self.refresh_token_expire_hours)


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    APP_NAME: str = "VIP Laundry Backend"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 25
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_ECHO: bool = False

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_HOURS: int = 24

    # CORS (comma separated)
    CORS_ALLOWED_ORIGINS: str = "*"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Expired token sweep, 0 disables the job
    TOKEN_CLEANUP_INTERVAL_MINUTES: int = 0

    def validate_required_secrets(self) -> list[str]:
        """Validate that critical secrets are set. Returns list of errors."""
        errors = []
        if not self.SECRET_KEY or len(self.SECRET_KEY) < 16:
            errors.append("SECRET_KEY must be set and at least 16 characters")
        if not self.DATABASE_URL:
            errors.append("DATABASE_URL must be set")
        if self.ALGORITHM not in ("HS256", "HS384", "HS512"):
            errors.append("ALGORITHM must be an HMAC algorithm (HS256, HS384, HS512)")
        if self.ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
            errors.append("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        if self.REFRESH_TOKEN_EXPIRE_HOURS <= 0:
            errors.append("REFRESH_TOKEN_EXPIRE_HOURS must be positive")
        return errors

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]

    def auth_config(self) -> AuthConfig:
        return AuthConfig(
            secret_key=self.SECRET_KEY,
            algorithm=self.ALGORITHM,
            access_token_expire_minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES,
            refresh_token_expire_hours=self.REFRESH_TOKEN_EXPIRE_HOURS,
        )

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

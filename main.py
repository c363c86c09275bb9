from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from slowapi.errors import RateLimitExceeded
import logging

from app.core.config import settings
from app.core.database import engine, utcnow
from app.core.exceptions import LaundryException
from app.core.rate_limit import limiter
from app.core.middleware import SecurityHeadersMiddleware, RequestValidationMiddleware
from app.api.errors import (
    laundry_exception_handler,
    validation_exception_handler,
    sqlalchemy_exception_handler,
    general_exception_handler,
    rate_limit_exceeded_handler,
)
from app.api.routes.auth import router as auth_router
from app.api.routes.users import router as users_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
VERSION = "1.0.0"

# Determine if running in production
IS_PRODUCTION = settings.ENVIRONMENT == "production"


def run_migrations():
    """Run database migrations on startup."""
    try:
        from alembic.config import Config
        from alembic import command

        logger.info("Running database migrations...")
        alembic_cfg = Config("alembic.ini")
        command.upgrade(alembic_cfg, "head")
        logger.info("Database migrations completed successfully")
    except Exception as e:
        # Migrations may already be applied by the deploy pipeline
        logger.error(f"Failed to run migrations: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME}...")

    config_errors = settings.validate_required_secrets()
    for error in config_errors:
        logger.error(f"Configuration error: {error}")
    if config_errors and IS_PRODUCTION:
        raise RuntimeError("Refusing to start with invalid configuration")

    if IS_PRODUCTION:
        run_migrations()

    from app.core.scheduler import start_scheduler, shutdown_scheduler
    start_scheduler()

    logger.info(f"{settings.APP_NAME} started successfully")
    yield
    shutdown_scheduler()
    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Employee management and session authentication for the laundry shop",
    version=VERSION,
    lifespan=lifespan,
    # Disable docs in production
    docs_url=None if IS_PRODUCTION else "/docs",
    redoc_url=None if IS_PRODUCTION else "/redoc",
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Exception handlers
app.add_exception_handler(LaundryException, laundry_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Security middleware (order matters - first added = last executed)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestValidationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Include routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)


@app.get("/")
def root():
    return {"message": f"Welcome to {settings.APP_NAME}"}


@app.get("/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    health_status = {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "version": VERSION,
    }

    # Check database connectivity
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["database"] = "disconnected"

    return health_status

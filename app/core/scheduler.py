import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.memory import MemoryJobStore

from app.core.config import settings

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(
    jobstores={"default": MemoryJobStore()},
    job_defaults={"coalesce": True, "max_instances": 1},
)

CLEANUP_JOB_ID = "cleanup_expired_tokens"


def cleanup_expired_tokens() -> int:
    """Purge blacklist entries and refresh tokens whose expiry has passed."""
    from app.core.database import SessionLocal
    from app.services.session_store import SessionStore

    db = SessionLocal()
    try:
        removed = SessionStore(db).cleanup_expired()
        logger.info(f"Token cleanup removed {removed} expired rows")
        return removed
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler with the token cleanup job, if one is configured."""
    interval = settings.TOKEN_CLEANUP_INTERVAL_MINUTES
    if interval <= 0:
        logger.info("Token cleanup job disabled")
        return

    scheduler.add_job(
        cleanup_expired_tokens,
        "interval",
        minutes=interval,
        id=CLEANUP_JOB_ID,
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"APScheduler started, token cleanup every {interval} minutes")


def shutdown_scheduler():
    """Gracefully shut down the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("APScheduler shut down")

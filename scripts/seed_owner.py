#!/usr/bin/env python3
"""
Create the first owner account so someone can log in and add employees.
Run with: python -m scripts.seed_owner --username owner --password '...' \
    --full-name 'Shop Owner' --email owner@viplaundry.com --phone 0800000000
"""

import argparse
import logging
import sys

from app.core.database import Base, SessionLocal, engine
from app.core.exceptions import DuplicateError
from app.schemas.users import CreateUserRequest
from app.services.user_service import UserService

logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create an owner account.")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--full-name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--phone", required=True)
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables directly instead of relying on alembic (local dev only)",
    )
    return parser.parse_args(argv)


def create_owner(args) -> int:
    """Create the owner. Returns a process exit code."""
    if args.create_tables:
        import app.models  # noqa: F401
        Base.metadata.create_all(bind=engine)

    data = CreateUserRequest(
        full_name=args.full_name,
        username=args.username,
        email=args.email,
        password=args.password,
        phone_number=args.phone,
        role="owner",
    )

    db = SessionLocal()
    try:
        user = UserService(db).create_user(data)
    except DuplicateError:
        logger.error("A user with that username, email or phone number already exists")
        return 1
    finally:
        db.close()

    logger.info(f"Owner account created: id={user.id} username={user.username}")
    return 0


if __name__ == "__main__":
    sys.exit(create_owner(parse_args()))

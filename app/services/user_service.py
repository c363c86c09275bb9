import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.core.exceptions import DuplicateError, ForbiddenError, NotFoundError, StorageError
from app.core.sanitization import sanitize_name
from app.core.security import get_password_hash
from app.models import User
from app.schemas.users import CreateUserRequest, UpdateUserRequest

logger = logging.getLogger(__name__)

OWNER_ROLE = "owner"


class UserService:
    """Service for employee account management."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            # Unique constraint closed a race the pre-checks could not see
            self.db.rollback()
            logger.info(f"UserService.{operation} hit a uniqueness constraint: {e.orig}")
            raise DuplicateError()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"UserService.{operation} failed: {e}")
            raise StorageError()

    # Lookups used by authentication
    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by ID."""
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"UserService.get_user_by_id failed: {e}")
            raise StorageError()

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        try:
            return self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError as e:
            logger.error(f"UserService.get_user_by_username failed: {e}")
            raise StorageError()

    def update_last_login(self, user_id: int) -> None:
        try:
            self.db.query(User).filter(User.id == user_id).update(
                {"last_login_at": utcnow()}, synchronize_session=False
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"UserService.update_last_login failed: {e}")
            raise StorageError()
        self._commit("update_last_login")

    def _exists(self, column, value, exclude_id: int = 0) -> bool:
        return self.db.query(User.id).filter(
            column == value, User.id != exclude_id
        ).first() is not None

    # Management
    def create_user(self, data: CreateUserRequest) -> User:
        """Register a new employee. Username, email and phone must be unused."""
        if (
            self._exists(User.username, data.username)
            or self._exists(User.email, data.email)
            or self._exists(User.phone_number, data.phone_number)
        ):
            raise DuplicateError()

        user = User(
            full_name=sanitize_name(data.full_name),
            username=data.username,
            email=data.email,
            password_hash=get_password_hash(data.password),
            role=data.role,
            phone_number=data.phone_number,
            is_active=True,
        )
        self.db.add(user)
        self._commit("create_user")
        self.db.refresh(user)
        logger.info(f"Created user {user.username} with role {user.role}")
        return user

    def list_users(self) -> List[User]:
        """Get all users, newest first."""
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def get_user(self, user_id: int) -> User:
        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User")
        return user

    def update_user(
        self,
        target_id: int,
        data: UpdateUserRequest,
        requester_id: int,
        requester_role: str,
    ) -> User:
        """
        Update an employee profile.

        Owners may edit anyone. Everyone else may only edit themselves, and
        their role / active flag changes are ignored.
        """
        user = self.get_user(target_id)

        if requester_role != OWNER_ROLE:
            if target_id != requester_id:
                raise ForbiddenError("You do not have permission to modify this profile")
            data = data.model_copy(update={"role": None, "is_active": None})

        if data.full_name:
            user.full_name = sanitize_name(data.full_name)

        if data.username and data.username != user.username:
            if self._exists(User.username, data.username, target_id):
                raise DuplicateError()
            user.username = data.username

        if data.email and data.email != user.email:
            if self._exists(User.email, data.email, target_id):
                raise DuplicateError()
            user.email = data.email

        if data.phone_number and data.phone_number != user.phone_number:
            if self._exists(User.phone_number, data.phone_number, target_id):
                raise DuplicateError()
            user.phone_number = data.phone_number

        if data.role:
            user.role = data.role

        if data.password:
            user.password_hash = get_password_hash(data.password)

        if data.is_active is not None:
            user.is_active = data.is_active

        user.updated_at = utcnow()
        self._commit("update_user")
        self.db.refresh(user)
        return user

    def deactivate_user(self, target_id: int, requester_id: int) -> None:
        """Soft delete a user. Nobody can deactivate themselves."""
        if target_id == requester_id:
            raise ForbiddenError("Action not permitted (cannot delete self)")

        user = self.get_user(target_id)
        user.is_active = False
        user.updated_at = utcnow()
        self._commit("deactivate_user")
        logger.info(f"Deactivated user {user.username}")

"""User management utilities.

This module provides user storage, password hashing and notification
bookkeeping. It is the identity store and credential verifier behind
``AuthManager``.
"""

import logging
from datetime import datetime
from typing import List, Optional

import bcrypt
import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS
from core.exceptions import ConflictError
from models.notification import NotificationModel
from models.user import UserModel

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of the input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, bcrypt_rounds: int = BCRYPT_ROUNDS):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            # malformed stored hash
            logger.error("Password verification error: %s", e)
            return False

    def create_user(
        self,
        login: str,
        password: str,
        name: Optional[str] = None,
        surname: Optional[str] = None,
    ) -> UserModel:
        """Create a new user.

        Args:
            login: Unique login for the new user.
            password: Plain text password.
            name: Optional first name.
            surname: Optional last name.

        Returns:
            Created UserModel.

        Raises:
            ConflictError: If the login is already taken.
        """
        if self.get_user_by_login(login) is not None:
            raise ConflictError(f"User '{login}' already exists")

        model = UserModel(
            login=login,
            password_hash=self.hash_password(password),
            name=name,
            surname=surname,
            create_at=datetime.now(pytz.utc).isoformat(),
        )

        # Two concurrent sign-ups can both pass the check above; the unique
        # constraint on login decides the race.
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"User '{login}' already exists") from e

        logger.info("Created user: %s", login)
        return model

    def get_user_by_login(self, login: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.login == login).first()

    def get_user_by_id(self, user_id: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.user_id == user_id).first()

    def list_notifications(self, user_id: str) -> List[NotificationModel]:
        return (
            self.db.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.id)
            .all()
        )

    def delete_notifications(
        self, user_id: str, notification_ids: List[int]
    ) -> List[NotificationModel]:
        """Delete some of the user's notifications.

        Ids that belong to other users or do not exist are ignored.

        Args:
            user_id: Owner of the notifications.
            notification_ids: Ids to delete.

        Returns:
            The user's remaining notifications in insertion order.
        """
        if notification_ids:
            deleted = (
                self.db.query(NotificationModel)
                .filter(
                    NotificationModel.user_id == user_id,
                    NotificationModel.id.in_(notification_ids),
                )
                .delete(synchronize_session=False)
            )
            self.db.commit()
            logger.info("Deleted %d notification(s) of user %s", deleted, user_id)
        return self.list_notifications(user_id)

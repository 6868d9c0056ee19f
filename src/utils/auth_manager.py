"""Session token management.

Issues, validates, rotates and revokes the access/refresh token pair of a
user. Only a sha256 digest of the single active refresh token is stored on
the user row; ``NULL`` means the user has no session.

Per-user state machine::

    NoSession --sign_in--> Active(T1) --refresh(T1)--> Active(T2)
    Active(*) --logout--> NoSession

A refresh presenting anything but the stored token is rejected and leaves
the state unchanged.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

import pytz
from jose import JWTError, jwt
from sqlalchemy import update
from sqlalchemy.orm import Session

from config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ACCESS_SECRET,
    JWT_ALGORITHM,
    JWT_REFRESH_SECRET,
    REFRESH_TOKEN_EXPIRE_DAYS,
)
from core.exceptions import UnauthorizedError
from models.notification import NotificationModel
from models.user import UserModel
from schemas.user import TokenPair
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

INVALID_CREDENTIALS = "Invalid authentication credentials"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_token(
    subject: str, token_type: str, secret: str, expires_delta: timedelta
) -> str:
    """Create a signed JWT.

    Args:
        subject: User id stored in the ``sub`` claim.
        token_type: "access" or "refresh", stored in the ``type`` claim.
        secret: Signing key.
        expires_delta: Lifetime of the token.

    Returns:
        Encoded JWT token string.
    """
    now = datetime.now(pytz.utc)
    to_encode = {
        "sub": subject,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        # makes two tokens issued within the same second distinct
        "jti": secrets.token_hex(16),
    }
    return jwt.encode(to_encode, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str, token_type: str) -> str:
    """Verify a JWT and return its subject.

    Raises:
        UnauthorizedError: If the signature, expiry or token type is wrong.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError(INVALID_CREDENTIALS)
    subject = payload.get("sub")
    if not subject or payload.get("type") != token_type:
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return subject


class AuthManager:
    """Sign-up, sign-in, logout and refresh-token rotation."""

    def __init__(
        self,
        db: Session,
        user_manager: Optional[UserManager] = None,
        access_expires: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_expires: timedelta = timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    ):
        self.db = db
        self.users = user_manager or UserManager(db)
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires

    def _issue_tokens(self, user_id: str) -> TokenPair:
        return TokenPair(
            access_token=create_token(
                user_id, ACCESS_TOKEN_TYPE, JWT_ACCESS_SECRET, self.access_expires
            ),
            refresh_token=create_token(
                user_id, REFRESH_TOKEN_TYPE, JWT_REFRESH_SECRET, self.refresh_expires
            ),
        )

    def sign_up(
        self,
        login: str,
        password: str,
        name: Optional[str] = None,
        surname: Optional[str] = None,
    ) -> UserModel:
        """Register a new user. Raises ``ConflictError`` on a duplicate login."""
        return self.users.create_user(login, password, name=name, surname=surname)

    def sign_in(self, login: str, password: str) -> TokenPair:
        """Check credentials and start a new session.

        Any earlier refresh token of the user stops being honored.

        Raises:
            UnauthorizedError: If the login is unknown or the password wrong.
        """
        user = self.users.get_user_by_login(login)
        if user is None or not self.users.verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid login or password")

        tokens = self._issue_tokens(user.user_id)
        user.refresh_token_hash = hash_token(tokens.refresh_token)
        self.db.commit()
        logger.info("User %s signed in", user.user_id)
        return tokens

    def logout(self, user_id: str) -> None:
        self.db.execute(
            update(UserModel)
            .where(UserModel.user_id == user_id)
            .values(refresh_token_hash=None)
        )
        self.db.commit()
        logger.info("User %s logged out", user_id)

    def refresh_tokens(self, user_id: str, presented_refresh_token: str) -> TokenPair:
        """Exchange the current refresh token for a new token pair.

        The stored digest is swapped with a compare-and-swap update, so of two
        concurrent calls presenting the same token only one can win.

        Args:
            user_id: User the refresh token was verified for.
            presented_refresh_token: The raw refresh token.

        Returns:
            The new access/refresh token pair.

        Raises:
            UnauthorizedError: If there is no session, the token is not the
                stored one, or a concurrent refresh rotated it first.
        """
        if self.verify_refresh_token(presented_refresh_token) != user_id:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        user = self.users.get_user_by_id(user_id)
        if user is None or user.refresh_token_hash is None:
            raise UnauthorizedError("Access denied")

        presented_hash = hash_token(presented_refresh_token)
        if not hmac.compare_digest(presented_hash, user.refresh_token_hash):
            logger.warning("Rejected stale refresh token for user %s", user_id)
            raise UnauthorizedError("Access denied")

        tokens = self._issue_tokens(user_id)
        result = self.db.execute(
            update(UserModel)
            .where(
                UserModel.user_id == user_id,
                UserModel.refresh_token_hash == presented_hash,
            )
            .values(refresh_token_hash=hash_token(tokens.refresh_token))
        )
        self.db.commit()
        if result.rowcount != 1:
            logger.warning("Lost refresh token rotation race for user %s", user_id)
            raise UnauthorizedError("Access denied")

        logger.info("Rotated refresh token for user %s", user_id)
        return tokens

    def verify_access_token(self, token: str) -> str:
        """Return the user id of a valid access token."""
        return decode_token(token, JWT_ACCESS_SECRET, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> str:
        """Return the user id of a validly signed, unexpired refresh token."""
        return decode_token(token, JWT_REFRESH_SECRET, REFRESH_TOKEN_TYPE)

    def get_current_user(self, access_token: str) -> UserModel:
        """Resolve an access token to its user.

        Raises:
            UnauthorizedError: If the token is invalid or the user is gone.
        """
        user = self.users.get_user_by_id(self.verify_access_token(access_token))
        if user is None:
            raise UnauthorizedError("User not found")
        return user

    def delete_notifications(
        self, user_id: str, notification_ids: List[int]
    ) -> List[NotificationModel]:
        return self.users.delete_notifications(user_id, notification_ids)

"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from typing import Set

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import Base, generate_id


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True, default=generate_id)
    login = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    surname = Column(String, nullable=True)
    # sha256 hex digest of the single active refresh token, NULL when signed out
    refresh_token_hash = Column(String, nullable=True)
    create_at = Column(String, nullable=False)  # ISO format string

    memberships = relationship(
        "ClassMembershipModel",
        back_populates="user",
        passive_deletes=True,
    )
    notifications = relationship(
        "NotificationModel",
        back_populates="user",
        order_by="NotificationModel.id",
        passive_deletes=True,
    )

    @property
    def class_ids(self) -> Set[str]:
        """Ids of every class the user owns or is a member of."""
        return {m.class_id for m in self.memberships}

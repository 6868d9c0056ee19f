from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base

OWNER_ROLE = "owner"
MEMBER_ROLE = "member"


class ClassMembershipModel(Base):
    """One row per (class, user, role).

    Both ``UserModel.class_ids`` and ``ClassModel.owner_ids``/``member_ids``
    are read from this table, so the two sides of the relation cannot drift.
    """

    __tablename__ = "class_memberships"
    __table_args__ = (
        UniqueConstraint(
            "class_id",
            "user_id",
            "role_in_class",
            name="uq_class_memberships_class_user_role",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.class_id", ondelete="CASCADE"), index=True)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True)
    role_in_class = Column(String, nullable=False)  # 'owner' or 'member'
    joined_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="memberships")
    user = relationship("UserModel", back_populates="memberships")

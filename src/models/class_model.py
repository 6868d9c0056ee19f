from typing import Set

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import Base, generate_id


class ClassModel(Base):
    __tablename__ = "classes"

    class_id = Column(String, primary_key=True, index=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    access_token = Column(String, unique=True, index=True, nullable=False)
    create_at = Column(String, nullable=False)
    update_at = Column(String, nullable=False)

    memberships = relationship(
        "ClassMembershipModel",
        back_populates="class_",
        cascade="all, delete-orphan",
    )
    lessons = relationship(
        "LessonModel",
        back_populates="class_",
        order_by="LessonModel.position",
        cascade="all, delete-orphan",
    )
    marks = relationship(
        "MarkModel",
        back_populates="class_",
        cascade="all, delete-orphan",
    )

    @property
    def owner_ids(self) -> Set[str]:
        return {m.user_id for m in self.memberships if m.role_in_class == "owner"}

    @property
    def member_ids(self) -> Set[str]:
        return {m.user_id for m in self.memberships if m.role_in_class == "member"}

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, generate_id


class MarkModel(Base):
    """Grade book entry."""

    __tablename__ = "marks"

    mark_id = Column(String, primary_key=True, index=True, default=generate_id)
    class_id = Column(
        String,
        ForeignKey("classes.class_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    student_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    lesson_id = Column(
        String,
        ForeignKey("lessons.lesson_id", ondelete="CASCADE"),
        nullable=True,
    )
    value = Column(String, nullable=False)
    create_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="marks")
    student = relationship("UserModel")
    lesson = relationship("LessonModel")

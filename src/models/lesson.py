from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base, generate_id


class LessonModel(Base):
    __tablename__ = "lessons"

    lesson_id = Column(String, primary_key=True, index=True, default=generate_id)
    class_id = Column(
        String,
        ForeignKey("classes.class_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    attached_elements = Column(JSON, default=list)  # ordered element ids
    create_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="lessons")

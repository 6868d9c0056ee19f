from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class NotificationModel(Base):
    __tablename__ = "notifications"

    # autoincrement id preserves insertion order
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    message = Column(String, nullable=False)
    create_at = Column(String, nullable=False)

    user = relationship("UserModel", back_populates="notifications")

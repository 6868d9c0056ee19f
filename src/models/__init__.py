"""Database models package."""

from .base import Base
from .user import UserModel
from .notification import NotificationModel
from .class_model import ClassModel
from .class_membership import ClassMembershipModel
from .lesson import LessonModel
from .mark import MarkModel

__all__ = [
    "Base",
    "UserModel",
    "NotificationModel",
    "ClassModel",
    "ClassMembershipModel",
    "LessonModel",
    "MarkModel",
]

"""Conversions from ORM models to API schemas."""

from typing import List

from models.class_model import ClassModel
from models.class_membership import OWNER_ROLE
from models.lesson import LessonModel
from models.mark import MarkModel
from models.notification import NotificationModel
from models.user import UserModel
from schemas.class_schema import ClassInfo, LessonInfo, MarkInfo, MemberInfo
from schemas.user import Notification, User


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        login=model.login,
        name=model.name,
        surname=model.surname,
        class_ids=sorted(model.class_ids),
        create_at=model.create_at,
    )


def model_to_notification(model: NotificationModel) -> Notification:
    return Notification(
        notification_id=model.id,
        message=model.message,
        create_at=model.create_at,
    )


def model_to_lesson(model: LessonModel) -> LessonInfo:
    return LessonInfo(
        lesson_id=model.lesson_id,
        title=model.title,
        position=model.position,
        attached_elements=list(model.attached_elements or []),
    )


def model_to_class(model: ClassModel) -> ClassInfo:
    """Build a ClassInfo with owner/member projections and ordered lessons."""
    owners: List[MemberInfo] = []
    members: List[MemberInfo] = []
    for membership in sorted(model.memberships, key=lambda m: m.id):
        user = membership.user
        info = MemberInfo(
            user_id=user.user_id,
            login=user.login,
            name=user.name,
            surname=user.surname,
        )
        if membership.role_in_class == OWNER_ROLE:
            owners.append(info)
        else:
            members.append(info)

    return ClassInfo(
        class_id=model.class_id,
        title=model.title,
        description=model.description,
        access_token=model.access_token,
        owners=owners,
        members=members,
        lessons=[model_to_lesson(lesson) for lesson in model.lessons],
        create_at=model.create_at,
        update_at=model.update_at,
    )


def model_to_mark(model: MarkModel) -> MarkInfo:
    return MarkInfo(
        mark_id=model.mark_id,
        class_id=model.class_id,
        student_id=model.student_id,
        lesson_id=model.lesson_id,
        value=model.value,
        create_at=model.create_at,
    )

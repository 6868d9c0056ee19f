"""Class management utilities.

Owns the user <-> class relation. Owners and members are rows of
``class_memberships`` and a user's class set is read from the same rows, so
every operation below changes both sides of the relation in a single commit.
"""

import logging
import secrets
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from config import CLASS_ACCESS_TOKEN_BYTES, OWNER_ONLY_MODERATION
from core.exceptions import ConflictError, NotFoundError
from core.guards import (
    is_member,
    is_owner,
    require_member,
    require_non_empty,
    require_owner,
    require_valid_id,
)
from models.base import generate_id
from models.class_membership import MEMBER_ROLE, OWNER_ROLE, ClassMembershipModel
from models.class_model import ClassModel
from models.lesson import LessonModel
from models.notification import NotificationModel
from models.user import UserModel
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(pytz.utc).isoformat()


def _unique(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class ClassManager:
    """Manages classes, owners and members."""

    def __init__(self, db: Session, owner_only_moderation: bool = OWNER_ONLY_MODERATION):
        """Initialize ClassManager.

        Args:
            db: SQLAlchemy Session.
            owner_only_moderation: Require owner role for removing members and
                changing owners. When False any authenticated user passing the
                existence checks may do so.
        """
        self.db = db
        self.owner_only_moderation = owner_only_moderation

    def _query(self):
        return self.db.query(ClassModel).options(
            selectinload(ClassModel.memberships).joinedload(ClassMembershipModel.user),
            selectinload(ClassModel.lessons),
        )

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(conflict_message) from e

    def _new_access_token(self) -> str:
        while True:
            token = secrets.token_urlsafe(CLASS_ACCESS_TOKEN_BYTES)
            taken = (
                self.db.query(ClassModel.class_id)
                .filter(ClassModel.access_token == token)
                .first()
            )
            if not taken:
                return token

    def _notify(self, user_ids: Iterable[str], message: str) -> None:
        now = _now()
        for user_id in sorted(user_ids):
            self.db.add(NotificationModel(user_id=user_id, message=message, create_at=now))

    def get_class(self, class_id: str, message: str = "Wrong path") -> ClassModel:
        """Load a class by id.

        Args:
            class_id: Class id from the request.
            message: BadRequest message for a malformed id.

        Raises:
            BadRequestError: If the id is malformed.
            NotFoundError: If no such class exists.
        """
        require_valid_id(class_id, message)
        model = self._query().filter(ClassModel.class_id == class_id).first()
        return require_non_empty(model, "Class not found")

    def list_classes(self, user_id: str) -> Dict[str, list]:
        """List the user's classes (with lessons) and notifications.

        Returns:
            Dict with "classes" (oldest first) and "notifications"
            (insertion order).
        """
        classes = (
            self._query()
            .join(ClassMembershipModel, ClassMembershipModel.class_id == ClassModel.class_id)
            .filter(ClassMembershipModel.user_id == user_id)
            .order_by(ClassModel.create_at, ClassModel.class_id)
            .distinct()
            .all()
        )
        notifications = UserManager(self.db).list_notifications(user_id)
        return {"classes": classes, "notifications": notifications}

    def create(self, user_id: str, title: str, description: Optional[str] = None) -> ClassModel:
        """Create a class owned by ``user_id`` with a fresh access token."""
        now = _now()
        model = ClassModel(
            class_id=generate_id(),
            title=title,
            description=description,
            access_token=self._new_access_token(),
            create_at=now,
            update_at=now,
        )
        model.memberships.append(
            ClassMembershipModel(user_id=user_id, role_in_class=OWNER_ROLE, joined_at=now)
        )
        self.db.add(model)
        self._commit("Class could not be created")
        logger.info("User %s created class %s", user_id, model.class_id)
        return self.get_class(model.class_id)

    def connect(self, user_id: str, access_token: str) -> ClassModel:
        """Join a class as a member using its access token.

        Raises:
            NotFoundError: If no class has this access token.
            ConflictError: If the user already owns or is a member of the class.
        """
        model = require_non_empty(
            self._query().filter(ClassModel.access_token == access_token).first(),
            "Class not found",
        )
        if is_member(model, user_id):
            raise ConflictError("You are already in class")

        model.memberships.append(
            ClassMembershipModel(user_id=user_id, role_in_class=MEMBER_ROLE, joined_at=_now())
        )
        # a concurrent join of the same user trips the unique constraint
        self._commit("You are already in class")
        logger.info("User %s joined class %s", user_id, model.class_id)
        return self.get_class(model.class_id)

    def remove_member(self, user_id: str, class_id: str, member_id: str) -> ClassModel:
        """Remove a member from a class.

        With owner-only moderation the caller must be an owner, unless they
        are removing themself.

        Raises:
            BadRequestError: If ``class_id`` is malformed.
            NotFoundError: If the class, the membership or the user is missing.
            ForbiddenError: If the caller may not moderate this class.
        """
        model = self.get_class(class_id)
        if self.owner_only_moderation and member_id != user_id:
            require_owner(model, user_id, "You can not remove members")

        membership = next(
            (
                m
                for m in model.memberships
                if m.user_id == member_id and m.role_in_class == MEMBER_ROLE
            ),
            None,
        )
        require_non_empty(membership, "User not found")
        require_non_empty(UserManager(self.db).get_user_by_id(member_id), "User not found")

        self.db.delete(membership)
        if member_id != user_id:
            self._notify([member_id], f"You were removed from class \"{model.title}\"")
        self.db.commit()
        logger.info("User %s removed member %s from class %s", user_id, member_id, class_id)
        return self.get_class(class_id)

    def remove_class(self, user_id: str, class_id: str) -> None:
        """Delete a class together with its memberships, lessons and marks.

        Raises:
            BadRequestError: If ``class_id`` is malformed.
            NotFoundError: If the class does not exist.
            ForbiddenError: If the caller is not an owner.
        """
        model = self.get_class(class_id)
        require_owner(model, user_id, "You can not remove class")
        former = (model.owner_ids | model.member_ids) - {user_id}
        self.db.delete(model)
        self._notify(former, f"Class \"{model.title}\" was removed")
        self.db.commit()
        logger.info("User %s removed class %s", user_id, class_id)

    def info(self, user_id: str, class_id: str) -> Dict[str, object]:
        """Return the class and whether the caller owns it.

        Raises:
            ForbiddenError: If the caller is neither owner nor member.
        """
        model = self.get_class(class_id)
        require_member(model, user_id, "You can not open this classroom")
        return {"class": model, "is_owner": is_owner(model, user_id)}

    def update_info(
        self,
        class_id: str,
        user_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ClassModel:
        """Update title and/or description; ``None`` leaves a field unchanged."""
        model = self.get_class(class_id)
        require_owner(model, user_id, "You can not update class info")
        if title is not None:
            model.title = title
        if description is not None:
            model.description = description
        model.update_at = _now()
        self.db.commit()
        logger.info("User %s updated class %s", user_id, class_id)
        return self.get_class(class_id)

    def _check_owner_change(self, class_id: str, user_id: str, owner_ids: List[str]) -> ClassModel:
        require_valid_id(class_id)
        for owner_id in owner_ids:
            require_valid_id(owner_id, "Wrong owner id")
        model = self.get_class(class_id)
        if self.owner_only_moderation:
            require_owner(model, user_id, "You can not change class owners")
        return model

    def add_owners(self, class_id: str, user_id: str, owner_ids: List[str]) -> ClassModel:
        """Grant the owner role to existing users.

        Users that already own the class are skipped.

        Raises:
            BadRequestError: If any id is malformed.
            NotFoundError: If the class or one of the users does not exist.
            ForbiddenError: If owner-only moderation is on and the caller is
                not an owner.
        """
        owner_ids = _unique(owner_ids)
        model = self._check_owner_change(class_id, user_id, owner_ids)

        found = {
            row.user_id
            for row in self.db.query(UserModel.user_id)
            .filter(UserModel.user_id.in_(owner_ids))
            .all()
        }
        if len(found) != len(owner_ids):
            raise NotFoundError("User not found")

        now = _now()
        current = model.owner_ids
        for owner_id in owner_ids:
            if owner_id not in current:
                model.memberships.append(
                    ClassMembershipModel(user_id=owner_id, role_in_class=OWNER_ROLE, joined_at=now)
                )
        self._commit("User is already an owner")
        logger.info("User %s added owners %s to class %s", user_id, owner_ids, class_id)
        return self.get_class(class_id)

    def remove_owners(self, class_id: str, user_id: str, owner_ids: List[str]) -> ClassModel:
        """Revoke the owner role.

        Raises:
            BadRequestError: If any id is malformed.
            NotFoundError: If the class does not exist or an id is not an owner.
            ForbiddenError: If owner-only moderation is on and the caller is
                not an owner.
            ConflictError: If no owner would be left.
        """
        owner_ids = _unique(owner_ids)
        model = self._check_owner_change(class_id, user_id, owner_ids)

        current = model.owner_ids
        if any(owner_id not in current for owner_id in owner_ids):
            raise NotFoundError("Owner not found")
        if not current - set(owner_ids):
            raise ConflictError("Class must keep at least one owner")

        for membership in list(model.memberships):
            if membership.role_in_class == OWNER_ROLE and membership.user_id in owner_ids:
                self.db.delete(membership)
        self.db.commit()
        logger.info("User %s removed owners %s from class %s", user_id, owner_ids, class_id)
        return self.get_class(class_id)

    def regenerate_access_token(self, class_id: str, user_id: str) -> ClassModel:
        """Replace the class access token; the old one stops working."""
        model = self.get_class(class_id)
        require_owner(model, user_id, "You can not change the access token")
        model.access_token = self._new_access_token()
        model.update_at = _now()
        self._commit("Access token could not be generated")
        logger.info("User %s regenerated access token of class %s", user_id, class_id)
        return self.get_class(class_id)

    def add_lesson(self, class_id: str, user_id: str, title: str) -> LessonModel:
        """Append a lesson to the end of the class's lesson list."""
        model = self.get_class(class_id)
        require_owner(model, user_id, "You can not add lessons")
        lesson = LessonModel(
            lesson_id=generate_id(),
            title=title,
            position=len(model.lessons),
            attached_elements=[],
            create_at=_now(),
        )
        model.lessons.append(lesson)
        self.db.commit()
        self.db.refresh(lesson)
        logger.info("User %s added lesson %s to class %s", user_id, lesson.lesson_id, class_id)
        return lesson

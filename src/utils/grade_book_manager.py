"""Grade book access."""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.guards import is_member, require_owner
from models.base import generate_id
from models.mark import MarkModel
from utils.class_manager import ClassManager

logger = logging.getLogger(__name__)


class GradeBookManager:
    """Owner-only read and write paths over a class's marks."""

    def __init__(self, db: Session):
        self.db = db
        self.classes = ClassManager(db)

    def get_grade_book(self, user_id: str, class_id: str) -> List[MarkModel]:
        """Return every mark recorded for the class.

        Args:
            user_id: Caller, must own the class.
            class_id: Class id.

        Returns:
            All marks of the class, oldest first.

        Raises:
            BadRequestError: If ``class_id`` is malformed.
            NotFoundError: If the class does not exist.
            ForbiddenError: If the caller is not an owner.
        """
        class_model = self.classes.get_class(class_id, "Class not found")
        require_owner(class_model, user_id, "You can not open the grade book")
        return (
            self.db.query(MarkModel)
            .filter(MarkModel.class_id == class_model.class_id)
            .order_by(MarkModel.create_at, MarkModel.mark_id)
            .all()
        )

    def record_mark(
        self,
        user_id: str,
        class_id: str,
        student_id: str,
        value: str,
        lesson_id: Optional[str] = None,
    ) -> MarkModel:
        """Add a mark for a student of the class.

        Raises:
            ForbiddenError: If the caller is not an owner.
            NotFoundError: If the student is not in the class or the lesson
                does not belong to it.
        """
        class_model = self.classes.get_class(class_id)
        require_owner(class_model, user_id, "You can not edit the grade book")
        if not is_member(class_model, student_id):
            raise NotFoundError("Student not found")
        if lesson_id is not None and lesson_id not in {
            lesson.lesson_id for lesson in class_model.lessons
        }:
            raise NotFoundError("Lesson not found")

        mark = MarkModel(
            mark_id=generate_id(),
            student_id=student_id,
            lesson_id=lesson_id,
            value=value,
            create_at=datetime.now(pytz.utc).isoformat(),
        )
        class_model.marks.append(mark)
        self.db.commit()
        self.db.refresh(mark)
        logger.info("User %s recorded a mark for %s in class %s", user_id, student_id, class_id)
        return mark

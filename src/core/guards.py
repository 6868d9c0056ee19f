"""Authorization guards for class operations.

Each guard is a pure check over values the caller already loaded and raises
a typed ``ClassroomError`` on failure. Operations run them in a fixed order
(id shape, existence, role, business rule) before touching the database.
"""

import re
from typing import Optional, TypeVar

from core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from models.class_model import ClassModel

T = TypeVar("T")

ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")


def is_valid_id(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(ID_PATTERN.match(value))


def require_valid_id(value: Optional[str], message: str = "Wrong path") -> str:
    """Reject identifiers that do not have the store's id shape.

    Args:
        value: Identifier taken from the request.
        message: Error message for the caller.

    Returns:
        The identifier, unchanged.

    Raises:
        BadRequestError: If the identifier is malformed.
    """
    if not is_valid_id(value):
        raise BadRequestError(message)
    return value


def require_non_empty(entity: Optional[T], message: str) -> T:
    """Return the looked-up entity or raise ``NotFoundError`` if it is absent."""
    if entity is None:
        raise NotFoundError(message)
    return entity


def is_owner(class_model: ClassModel, user_id: str) -> bool:
    return user_id in class_model.owner_ids


def is_member(class_model: ClassModel, user_id: str) -> bool:
    """True for owners and plain members alike."""
    return user_id in class_model.owner_ids | class_model.member_ids


def require_member(class_model: ClassModel, user_id: str, message: str) -> None:
    if not is_member(class_model, user_id):
        raise ForbiddenError(message)


def require_owner(class_model: ClassModel, user_id: str, message: str) -> None:
    if not is_owner(class_model, user_id):
        raise ForbiddenError(message)

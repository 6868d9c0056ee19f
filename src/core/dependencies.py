"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Every manager gets the request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import auth_manager
from utils import class_manager
from utils import grade_book_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_auth_manager(db: Session = Depends(get_db)) -> auth_manager.AuthManager:
    """Get AuthManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        AuthManager instance.
    """
    return auth_manager.AuthManager(db)


def get_class_manager(db: Session = Depends(get_db)) -> class_manager.ClassManager:
    """Get ClassManager instance with request-scoped DB session."""
    return class_manager.ClassManager(db)


def get_grade_book_manager(
    db: Session = Depends(get_db),
) -> grade_book_manager.GradeBookManager:
    """Get GradeBookManager instance with request-scoped DB session."""
    return grade_book_manager.GradeBookManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
AuthManagerDep = Annotated[
    auth_manager.AuthManager, Depends(get_auth_manager)
]
ClassManagerDep = Annotated[
    class_manager.ClassManager, Depends(get_class_manager)
]
GradeBookManagerDep = Annotated[
    grade_book_manager.GradeBookManager, Depends(get_grade_book_manager)
]

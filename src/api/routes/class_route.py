"""Class management routes."""

from typing import List

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user
from core.dependencies import ClassManagerDep, GradeBookManagerDep
from models.user import UserModel
from schemas.class_schema import (
    ClassDetailResponse,
    ClassInfo,
    ClassListResponse,
    ConnectClassRequest,
    CreateClassRequest,
    CreateLessonRequest,
    LessonInfo,
    MarkInfo,
    OwnersRequest,
    RecordMarkRequest,
    RemoveMemberRequest,
    UpdateClassRequest,
)
from utils.converters import (
    model_to_class,
    model_to_lesson,
    model_to_mark,
    model_to_notification,
)

router = APIRouter(prefix="/api/classes", tags=["Class"])


@router.get("", response_model=ClassListResponse, summary="List my classes")
def list_classes(
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassListResponse:
    result = class_manager.list_classes(current_user.user_id)
    return ClassListResponse(
        classes=[model_to_class(model) for model in result["classes"]],
        notifications=[model_to_notification(n) for n in result["notifications"]],
    )


@router.post("", response_model=ClassInfo, summary="Create a class")
def create_class(
    req: CreateClassRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.create(current_user.user_id, req.title, req.description)
    return model_to_class(model)


@router.post("/connect", response_model=ClassInfo, summary="Join a class by access token")
def connect_to_class(
    req: ConnectClassRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.connect(current_user.user_id, req.access_token.strip())
    return model_to_class(model)


@router.get("/{class_id}", response_model=ClassDetailResponse, summary="Class info")
def class_info(
    class_id: str,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassDetailResponse:
    result = class_manager.info(current_user.user_id, class_id)
    return ClassDetailResponse(
        class_=model_to_class(result["class"]),
        is_owner=result["is_owner"],
    )


@router.patch("/{class_id}", response_model=ClassInfo, summary="Update class info")
def update_class_info(
    class_id: str,
    req: UpdateClassRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.update_info(
        class_id, current_user.user_id, title=req.title, description=req.description
    )
    return model_to_class(model)


@router.delete("/{class_id}", summary="Remove a class")
def remove_class(
    class_id: str,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> dict:
    """Delete a class. Only an owner can do this."""
    class_manager.remove_class(current_user.user_id, class_id)
    return {"success": True, "message": "Class deleted successfully"}


@router.patch("/{class_id}/removeMember", response_model=ClassInfo, summary="Remove a member")
def remove_member(
    class_id: str,
    req: RemoveMemberRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.remove_member(current_user.user_id, class_id, req.member_id)
    return model_to_class(model)


@router.patch("/{class_id}/addOwner", response_model=ClassInfo, summary="Add owners")
def add_owner(
    class_id: str,
    req: OwnersRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.add_owners(class_id, current_user.user_id, req.owners)
    return model_to_class(model)


@router.patch("/{class_id}/removeOwner", response_model=ClassInfo, summary="Remove owners")
def remove_owner(
    class_id: str,
    req: OwnersRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.remove_owners(class_id, current_user.user_id, req.owners)
    return model_to_class(model)


@router.post("/{class_id}/accessToken", response_model=ClassInfo, summary="Regenerate access token")
def regenerate_access_token(
    class_id: str,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> ClassInfo:
    model = class_manager.regenerate_access_token(class_id, current_user.user_id)
    return model_to_class(model)


@router.post("/{class_id}/lessons", response_model=LessonInfo, summary="Add a lesson")
def add_lesson(
    class_id: str,
    req: CreateLessonRequest,
    class_manager: ClassManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> LessonInfo:
    lesson = class_manager.add_lesson(class_id, current_user.user_id, req.title)
    return model_to_lesson(lesson)


@router.get("/{class_id}/gradeBook", response_model=List[MarkInfo], summary="Grade book")
def get_grade_book(
    class_id: str,
    grade_book_manager: GradeBookManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> List[MarkInfo]:
    marks = grade_book_manager.get_grade_book(current_user.user_id, class_id)
    return [model_to_mark(mark) for mark in marks]


@router.post("/{class_id}/marks", response_model=MarkInfo, summary="Record a mark")
def record_mark(
    class_id: str,
    req: RecordMarkRequest,
    grade_book_manager: GradeBookManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> MarkInfo:
    mark = grade_book_manager.record_mark(
        current_user.user_id,
        class_id,
        req.student_id,
        req.value,
        lesson_id=req.lesson_id,
    )
    return model_to_mark(mark)

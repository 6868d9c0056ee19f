"""Class, lesson and grade book schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.user import Notification


class LessonInfo(BaseModel):
    lesson_id: str
    title: str
    position: int
    attached_elements: List[str] = []


class MemberInfo(BaseModel):
    """Projection of a user inside a class listing."""

    user_id: str
    login: str
    name: Optional[str] = None
    surname: Optional[str] = None


class ClassInfo(BaseModel):
    class_id: str
    title: str
    description: Optional[str] = None
    access_token: str
    owners: List[MemberInfo] = []
    members: List[MemberInfo] = []
    lessons: List[LessonInfo] = []
    create_at: str
    update_at: str


class ClassListResponse(BaseModel):
    classes: List[ClassInfo]
    notifications: List[Notification]


class ClassDetailResponse(BaseModel):
    class_: ClassInfo = Field(alias="class")
    is_owner: bool

    model_config = {"populate_by_name": True}


class CreateClassRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class ConnectClassRequest(BaseModel):
    access_token: str = Field(alias="accessToken")

    model_config = {"populate_by_name": True}


class UpdateClassRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class OwnersRequest(BaseModel):
    owners: List[str] = Field(min_length=1)


class RemoveMemberRequest(BaseModel):
    member_id: str = Field(alias="memberId")

    model_config = {"populate_by_name": True}


class CreateLessonRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)

    model_config = {"str_strip_whitespace": True}


class RecordMarkRequest(BaseModel):
    student_id: str
    value: str = Field(min_length=1, max_length=32)
    lesson_id: Optional[str] = None


class MarkInfo(BaseModel):
    mark_id: str
    class_id: str
    student_id: str
    lesson_id: Optional[str] = None
    value: str
    create_at: str

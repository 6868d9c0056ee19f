"""User and authentication schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Public view of a user; never carries credentials."""

    user_id: str
    login: str
    name: Optional[str] = None
    surname: Optional[str] = None
    class_ids: List[str] = Field(
        default=[],
        description="Ids of every class the user owns or is a member of.",
    )
    create_at: str


class Notification(BaseModel):
    notification_id: int
    message: str
    create_at: str


class SignUpRequest(BaseModel):
    login: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6, max_length=128)
    name: Optional[str] = None
    surname: Optional[str] = None


class SignInRequest(BaseModel):
    login: str
    password: str


class TokenPair(BaseModel):
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")

    model_config = {"populate_by_name": True}


class DeleteNotificationsRequest(BaseModel):
    notification_ids: List[int] = Field(
        description="Ids of the caller's notifications to delete."
    )


class CurrentUserResponse(BaseModel):
    user: User
    notifications: List[Notification] = []

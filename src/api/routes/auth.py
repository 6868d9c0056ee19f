"""Authentication routes.

This module handles HTTP endpoints for sign-up, sign-in, logout, token
refresh and the current user's notifications.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import AuthManagerDep
from core.exceptions import UnauthorizedError
from models.user import UserModel
from schemas.user import (
    CurrentUserResponse,
    DeleteNotificationsRequest,
    Notification,
    SignInRequest,
    SignUpRequest,
    TokenPair,
    User,
)
from utils.converters import model_to_notification, model_to_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Missing headers are reported as 401 by the handlers below
security = HTTPBearer(auto_error=False)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing authentication credentials")
    return credentials.credentials


def get_current_user(
    auth_manager: AuthManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserModel:
    """Resolve the access token in the Authorization header to a user.

    Raises:
        UnauthorizedError: If the header is missing, the token invalid or
            the user unknown.
    """
    return auth_manager.get_current_user(_bearer_token(credentials))


@router.put("/signUp", response_model=User, summary="Sign up")
def sign_up(req: SignUpRequest, auth_manager: AuthManagerDep) -> User:
    user = auth_manager.sign_up(
        req.login, req.password, name=req.name, surname=req.surname
    )
    return model_to_user(user)


@router.post("/signIn", response_model=TokenPair, summary="Sign in")
def sign_in(req: SignInRequest, auth_manager: AuthManagerDep) -> TokenPair:
    """Exchange login and password for an access/refresh token pair."""
    return auth_manager.sign_in(req.login, req.password)


@router.get("/logout", summary="Log out")
def logout(
    auth_manager: AuthManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> dict:
    """Revoke the caller's refresh token.

    The access token stays valid until it expires.
    """
    auth_manager.logout(current_user.user_id)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/refresh", response_model=TokenPair, summary="Refresh tokens")
def refresh_tokens(
    auth_manager: AuthManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenPair:
    """Rotate the token pair. The refresh token is sent as the bearer token."""
    refresh_token = _bearer_token(credentials)
    user_id = auth_manager.verify_refresh_token(refresh_token)
    return auth_manager.refresh_tokens(user_id, refresh_token)


@router.patch(
    "/deleteNotifications",
    response_model=List[Notification],
    summary="Delete notifications",
)
def delete_notifications(
    req: DeleteNotificationsRequest,
    auth_manager: AuthManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> List[Notification]:
    remaining = auth_manager.delete_notifications(
        current_user.user_id, req.notification_ids
    )
    return [model_to_notification(n) for n in remaining]


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    current_user: UserModel = Depends(get_current_user),
) -> CurrentUserResponse:
    return CurrentUserResponse(
        user=model_to_user(current_user),
        notifications=[model_to_notification(n) for n in current_user.notifications],
    )

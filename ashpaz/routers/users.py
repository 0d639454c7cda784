import logging

from fastapi import Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ashpaz.config import Settings
from ashpaz.database import User, get_db
from ashpaz.routers.auth import get_current_user
from ashpaz.routers.base import api_router, get_settings
from ashpaz.schemas.auth import RegisterRequest
from ashpaz.schemas.user import UserUpdate
from ashpaz.services.auth_service import AuthService
from ashpaz.services.user_service import UserService, to_public_user
from ashpaz.token_utils import clear_auth_cookie, set_auth_cookie

logger = logging.getLogger(__name__)


@api_router.post("/users/register", status_code=status.HTTP_201_CREATED)
def register_user(
    request: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = UserService(db).register_user(request)
    # Registration signs the user in straight away.
    set_auth_cookie(response, AuthService(db, settings).issue_token(user), secure=settings.is_production)
    logger.info(f"Registered user {user.id}")
    return {"message": "User registered successfully", "user": to_public_user(user)}


@api_router.get("/users/me")
def get_me(current_user: User = Depends(get_current_user)):
    return {"user": to_public_user(current_user)}


@api_router.put("/users/me")
def update_me(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        user, changed = UserService(db).update_user(current_user.id, user_update)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not changed:
        return {"message": "No changes provided", "user": to_public_user(user)}
    return {"message": "User updated successfully", "user": to_public_user(user)}


@api_router.delete("/users/me")
def delete_me(
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id
    UserService(db).delete_user(user_id)
    clear_auth_cookie(response, secure=settings.is_production)
    logger.info(f"Deleted user {user_id}")
    return {"message": "User deleted successfully"}

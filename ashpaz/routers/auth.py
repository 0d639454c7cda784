import logging
import secrets
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, HTTPException, Request, Response
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ashpaz.config import Settings
from ashpaz.database import User, get_db
from ashpaz.oauth import (
    OAuthError, exchange_code_for_tokens, get_google_auth_url, get_google_oauth_config, get_google_user_info
)
from ashpaz.routers.base import api_router, get_settings
from ashpaz.schemas.auth import LoginRequest
from ashpaz.services.auth_service import AuthService, EmailNotVerified
from ashpaz.services.user_service import to_public_user
from ashpaz.token_utils import (
    AUTH_COOKIE_NAME, OAUTH_STATE_COOKIE_NAME, OAUTH_STATE_MAX_AGE, clear_auth_cookie, set_auth_cookie
)

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    # The session cookie is the normal path; a Bearer header works for API clients.
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    return AuthService(db, settings).authenticate(token)


@api_router.post("/users/login")
def login_user(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    service = AuthService(db, settings)
    user = service.login_user(request)
    set_auth_cookie(response, service.issue_token(user), secure=settings.is_production)
    return {"message": "Login successful", "user": to_public_user(user)}


@api_router.post("/users/logout")
def logout_user(response: Response, settings: Settings = Depends(get_settings)):
    clear_auth_cookie(response, secure=settings.is_production)
    return {"message": "Logout successful"}


def _login_redirect(message: str) -> RedirectResponse:
    response = RedirectResponse(f"/login?error={quote(message)}")
    response.delete_cookie(OAUTH_STATE_COOKIE_NAME, path="/")
    return response


@api_router.get("/auth/google")
def google_login(settings: Settings = Depends(get_settings)):
    try:
        config = get_google_oauth_config(settings)
    except OAuthError as e:
        logger.error(f"Error initiating Google OAuth: {e}")
        raise HTTPException(status_code=500, detail="Failed to initiate Google authentication")

    # Random state for CSRF protection, checked again in the callback.
    state = secrets.token_urlsafe(24)
    response = RedirectResponse(get_google_auth_url(config, state))
    response.set_cookie(
        key=OAUTH_STATE_COOKIE_NAME,
        value=state,
        max_age=OAUTH_STATE_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@api_router.get("/auth/google/callback")
def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if error:
        logger.error(f"[OAuth Callback] OAuth error: {error}")
        return _login_redirect("Google authentication failed")
    if not code:
        logger.error("[OAuth Callback] No authorization code received")
        return _login_redirect("No authorization code received")

    stored_state = request.cookies.get(OAUTH_STATE_COOKIE_NAME)
    if not state or state != stored_state:
        logger.error("[OAuth Callback] State mismatch")
        return _login_redirect("Invalid state parameter")

    service = AuthService(db, settings)
    try:
        config = get_google_oauth_config(settings)
        logger.info("[OAuth Callback] Exchanging code for tokens")
        tokens = exchange_code_for_tokens(config, code)
        logger.info("[OAuth Callback] Fetching user info from Google")
        info = get_google_user_info(tokens["access_token"])
        user = service.login_with_google(info)
    except EmailNotVerified:
        logger.warning("[OAuth Callback] Refusing to link an unverified Google email to an existing account")
        return _login_redirect("Email not verified")
    except Exception:
        logger.exception("[OAuth Callback] Google OAuth callback failed")
        return _login_redirect("Authentication failed. Please try again.")

    response = RedirectResponse("/")
    set_auth_cookie(response, service.issue_token(user), secure=settings.is_production)
    response.delete_cookie(OAUTH_STATE_COOKIE_NAME, path="/")
    logger.info(f"[OAuth Callback] OAuth flow completed for user {user.id}")
    return response

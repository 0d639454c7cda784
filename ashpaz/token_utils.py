import jwt
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from ashpaz.errors import InvalidToken

ALGORITHM = "HS256"
SESSION_TOKEN_EXPIRE_DAYS = 7

AUTH_COOKIE_NAME = "auth_token"
OAUTH_STATE_COOKIE_NAME = "oauth_state"
OAUTH_STATE_MAX_AGE = 60 * 10
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * SESSION_TOKEN_EXPIRE_DAYS


def create_session_token(data: dict, secret: str, expires_delta: timedelta = None) -> Dict[str, Any]:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=SESSION_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    token = jwt.encode(to_encode, secret, algorithm=ALGORITHM)
    return {
        "token": token,
        "expires_at": int(expire.timestamp())
    }


def decode_token(token: str, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token expired")
    except jwt.InvalidTokenError:
        raise InvalidToken("Invalid token")


def set_auth_cookie(response, token: str, secure: bool = False):
    """Attach the session token as an HTTP-only cookie."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def clear_auth_cookie(response, secure: bool = False):
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )

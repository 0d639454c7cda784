"""
Google OAuth configuration and helpers.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import requests

from ashpaz.config import Settings

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
OAUTH_TIMEOUT_SECONDS = 15


class OAuthError(Exception):
    """Raised when the identity provider rejects a request."""


@dataclass
class GoogleOAuthConfig:
    client_id: str
    client_secret: str
    redirect_uri: str


@dataclass
class GoogleUserInfo:
    sub: str
    email: str
    email_verified: bool
    name: str


def get_google_oauth_config(settings: Settings) -> GoogleOAuthConfig:
    if not settings.google_client_id or not settings.google_client_secret:
        raise OAuthError("Google OAuth credentials not configured")
    return GoogleOAuthConfig(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=f"{settings.public_base_url}/api/auth/google/callback",
    )


def get_google_auth_url(config: GoogleOAuthConfig, state: Optional[str] = None) -> str:
    params = {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "response_type": "code",
        "scope": "openid email profile",
        "access_type": "offline",
    }
    if state:
        params["state"] = state
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def exchange_code_for_tokens(config: GoogleOAuthConfig, code: str, session=None) -> dict:
    """Exchange an authorization code for an access token."""
    http = session or requests
    response = http.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "redirect_uri": config.redirect_uri,
            "grant_type": "authorization_code",
        },
        timeout=OAUTH_TIMEOUT_SECONDS,
    )
    if not response.ok:
        raise OAuthError(f"Failed to exchange code for tokens: {response.text[:200]}")
    return response.json()


def get_google_user_info(access_token: str, session=None) -> GoogleUserInfo:
    http = session or requests
    response = http.get(
        GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=OAUTH_TIMEOUT_SECONDS,
    )
    if not response.ok:
        raise OAuthError("Failed to fetch Google user info")
    data = response.json()
    # The v2 endpoint says "id"/"verified_email"; OpenID Connect says "sub"/"email_verified".
    sub = data.get("sub") or data.get("id")
    email = data.get("email")
    if not sub or not email:
        raise OAuthError("Google user info is missing the account id or email")
    return GoogleUserInfo(
        sub=str(sub),
        email=email,
        email_verified=bool(data.get("email_verified", data.get("verified_email", False))),
        name=data.get("name") or email.split("@")[0],
    )

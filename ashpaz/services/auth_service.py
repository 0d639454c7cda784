import logging

from sqlalchemy.orm import Session

from ashpaz.config import Settings
from ashpaz.database import User
from ashpaz.errors import Unauthorized
from ashpaz.oauth import GoogleUserInfo
from ashpaz.password_utils import verify_password
from ashpaz.schemas.auth import LoginRequest
from ashpaz.token_utils import create_session_token, decode_token

logger = logging.getLogger(__name__)


class EmailNotVerified(Exception):
    """The identity provider did not verify the email we would link on."""


class AuthService:
    """Service for authentication-related business logic."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def issue_token(self, user: User) -> str:
        """Signed session token carrying the user id and email."""
        return create_session_token({"user_id": user.id, "email": user.email}, self.settings.jwt_secret)["token"]

    def login_user(self, request: LoginRequest) -> User:
        """Check email and password. Every failure looks the same to the caller."""
        db_user = self.db.query(User).filter(User.email == request.email.lower()).first()
        if not db_user or not verify_password(request.password, db_user.password_hash):
            raise Unauthorized("Invalid email or password")
        return db_user

    def validate_token(self, token: str) -> dict:
        """Validate and decode token."""
        return decode_token(token, self.settings.jwt_secret)

    def authenticate(self, token: str) -> User:
        """Resolve a session token to a live user; a deleted user's token stops working."""
        if not token:
            raise Unauthorized("Authentication required")
        payload = self.validate_token(token)
        user_id = payload.get("user_id")
        db_user = self.db.query(User).filter(User.id == user_id).first() if user_id is not None else None
        if not db_user:
            raise Unauthorized("User not found")
        return db_user

    def login_with_google(self, info: GoogleUserInfo) -> User:
        """Find the user for a Google identity, linking or creating the account as needed."""
        db_user = self.db.query(User).filter(User.google_id == info.sub).first()
        if db_user:
            logger.info(f"Google sign-in for existing user {db_user.id}")
            return db_user

        email = info.email.lower()
        db_user = self.db.query(User).filter(User.email == email).first()
        if db_user:
            if not info.email_verified:
                raise EmailNotVerified(email)
            logger.info(f"Linking Google account to existing user {db_user.id}")
            db_user.google_id = info.sub
            self.db.commit()
            self.db.refresh(db_user)
            return db_user

        db_user = User(email=email, name=info.name[:100], google_id=info.sub, password_hash=None)
        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)
        logger.info(f"Created user {db_user.id} from Google sign-in")
        return db_user

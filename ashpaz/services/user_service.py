from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ashpaz.database import User
from ashpaz.errors import Conflict, NotFound, Unauthorized
from ashpaz.password_utils import hash_password, verify_password
from ashpaz.schemas.auth import RegisterRequest
from ashpaz.schemas.user import PublicUser, UserUpdate
from ashpaz.utils_time import format_datetime_iso as format_dt


def to_public_user(user: User) -> PublicUser:
    return PublicUser(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=format_dt(user.created_at),
        updated_at=format_dt(user.updated_at),
    )


class UserService:
    """Service for user-related business logic."""

    def __init__(self, db: Session):
        self.db = db

    def _commit_or_conflict(self, message: str):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(message)

    def register_user(self, request: RegisterRequest) -> User:
        """Register a new user."""
        email = request.email.lower()
        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise Conflict("User with this email already exists")

        db_user = User(
            email=email,
            name=request.name,
            password_hash=hash_password(request.password),
        )
        self.db.add(db_user)
        self._commit_or_conflict("User with this email already exists")
        self.db.refresh(db_user)
        return db_user

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def update_user(self, user_id: int, user_update: UserUpdate) -> tuple:
        """
        Apply a profile update. Returns (user, changed).

        A new password needs the current one, unless the account has no
        password yet (signed up with Google).
        """
        user = self.get_user(user_id)
        changed = False

        if user_update.email is not None and user_update.email.lower() != user.email.lower():
            email = user_update.email.lower()
            taken = self.db.query(User).filter(User.email == email, User.id != user.id).first()
            if taken:
                raise Conflict("Email is already in use")
            user.email = email
            changed = True

        if user_update.new_password:
            if user.password_hash:
                if not user_update.current_password:
                    raise ValueError("Current password is required to change password")
                if not verify_password(user_update.current_password, user.password_hash):
                    raise Unauthorized("Current password is incorrect")
            user.password_hash = hash_password(user_update.new_password)
            changed = True

        if user_update.name is not None and user_update.name != user.name:
            user.name = user_update.name
            changed = True

        if not changed:
            return user, False

        self._commit_or_conflict("Email is already in use")
        self.db.refresh(user)
        return user, True

    def delete_user(self, user_id: int):
        """Delete the account; saved recipes go with it."""
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()

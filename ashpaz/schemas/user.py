from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr, field_validator


class UserUpdate(BaseModel):
    """Schema for updating the current user's profile."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=100)] = None
    email: Optional[EmailStr] = None
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[constr(min_length=8, max_length=128)] = Field(None, alias="newPassword")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v is not None else v


class PublicUser(BaseModel):
    """User fields that are safe to send to the client."""
    id: int
    email: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

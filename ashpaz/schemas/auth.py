from pydantic import BaseModel, EmailStr, constr, field_validator


class RegisterRequest(BaseModel):
    """Schema for user registration."""
    email: EmailStr
    password: constr(min_length=8, max_length=128)
    name: constr(strip_whitespace=True, min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: EmailStr
    password: constr(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

"""Auth schemas. JSON uses camelCase (firstName, userId); attributes stay snake_case."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from app.models.user import UserRole

PASSWORD_MIN_LENGTH = 6


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _require_text(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field} is required")
    return value


def _validate_password(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Password is required")
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return value


class UserCreate(CamelModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str

    @field_validator("first_name", "last_name")
    @classmethod
    def names_present(cls, v: str, info) -> str:
        return _require_text(v, info.field_name)

    @field_validator("password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return _validate_password(v)


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class VerifyEmailRequest(CamelModel):
    user_id: int
    otp: str


class EmailRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    user_id: int
    otp: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return _validate_password(v)


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_verified: bool
    credits: int
    created_at: datetime | None = None


class Token(CamelModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResponse


class RegisterResponse(CamelModel):
    message: str
    user_id: int
    role: UserRole


class CodeSentResponse(CamelModel):
    message: str
    user_id: int


class MessageResponse(CamelModel):
    message: str

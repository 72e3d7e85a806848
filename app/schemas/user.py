"""Self-service schemas."""
from datetime import datetime

from pydantic import field_validator

from app.schemas.auth import CamelModel, UserResponse, _validate_password


class ProfileUpdate(CamelModel):
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ProfileResponse(CamelModel):
    message: str
    user: UserResponse


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_valid(cls, v: str) -> str:
        return _validate_password(v)


class CreditHistoryResponse(CamelModel):
    id: int
    user_id: int
    admin_id: int
    previous_credits: int
    new_credits: int
    reason: str | None
    created_at: datetime | None = None


class CreditsResponse(CamelModel):
    credits: int
    history: list[CreditHistoryResponse]

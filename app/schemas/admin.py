"""Admin console schemas."""
from pydantic import EmailStr, Field

from app.models.user import UserRole
from app.schemas.auth import CamelModel, UserCreate, UserResponse


class AdminUserUpdate(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    is_verified: bool | None = None


class RoleChangeRequest(CamelModel):
    role: UserRole


class CreditUpdateRequest(CamelModel):
    credits: int = Field(ge=0)
    reason: str | None = None


class AdminCreate(UserCreate):
    pass


class UserEnvelope(CamelModel):
    message: str
    user: UserResponse


class AdminEnvelope(CamelModel):
    message: str
    admin: UserResponse

"""Accounts: identity, credentials, verification state, role and credit balance."""
from sqlalchemy import Column, BigInteger, Integer, String, Enum as SQLEnum, DateTime, Boolean
from sqlalchemy.sql import func
from app.database import Base
import enum


class UserRole(str, enum.Enum):
    """Role tiers, ordered user < admin < prime_admin."""

    user = "user"
    admin = "admin"
    prime_admin = "prime_admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    @property
    def is_elevated(self) -> bool:
        return self.satisfies(UserRole.admin)

    def satisfies(self, minimum: "UserRole") -> bool:
        """True if this role is at least as high as `minimum`."""
        return self.rank >= UserRole(minimum).rank


_ROLE_RANK = {UserRole.user: 0, UserRole.admin: 1, UserRole.prime_admin: 2}


class User(Base):
    __tablename__ = "users"

    # Assigned by app.services.accounts: 8 digits for users, 10 for admins.
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    # Null for accounts created through Google sign-in.
    hashed_password = Column(String(255), nullable=True)
    google_id = Column(String(255), unique=True, nullable=True)

    is_verified = Column(Boolean, default=False, nullable=False)
    otp_code = Column(String(10), nullable=True)
    otp_expires_at = Column(DateTime(timezone=True), nullable=True)

    role = Column(SQLEnum(UserRole), default=UserRole.user, nullable=False, index=True)
    credits = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)

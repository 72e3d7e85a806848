"""One-time codes for email verification and password reset.

A code is stored on the account with an expiry. It is accepted once: a successful
check clears both fields, and issuing a new code overwrites the previous one.
"""
from __future__ import annotations

import enum
import logging
import secrets
from datetime import datetime, timedelta, timezone

from app.config import Settings
from app.models.user import User

logger = logging.getLogger(__name__)


class OtpResult(str, enum.Enum):
    ok = "ok"
    missing = "missing"
    expired = "expired"
    mismatch = "mismatch"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_code(length: int = 6) -> str:
    if length < 1:
        raise ValueError("code length must be positive")
    return "".join(secrets.choice("0123456789") for _ in range(length))


def issue_code(user: User, settings: Settings, now: datetime | None = None) -> str:
    """Store a fresh code on `user` and return it. Caller commits."""
    now = now or _utcnow()
    code = generate_code(settings.otp_length)
    user.otp_code = code
    user.otp_expires_at = now + timedelta(minutes=settings.otp_expire_minutes)
    if settings.is_development:
        logger.info("Generated OTP for user_id=%s (development only): %s", user.id, code)
    return code


def check_code(user: User, code: str | None, now: datetime | None = None) -> OtpResult:
    """Validate `code` against the one stored on `user`; consumes it on success. Caller commits."""
    now = now or _utcnow()
    if not user.otp_code or not user.otp_expires_at:
        return OtpResult.missing
    if now >= _as_utc(user.otp_expires_at):
        return OtpResult.expired
    supplied = (code or "").strip()
    if not supplied or not secrets.compare_digest(supplied, user.otp_code):
        return OtpResult.mismatch
    user.otp_code = None
    user.otp_expires_at = None
    return OtpResult.ok

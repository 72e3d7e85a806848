"""Account creation and account-level policy checks."""
from __future__ import annotations

import logging
import secrets

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import Settings
from app.errors import Conflict, IdentifierExhausted, ValidationFailed
from app.models.user import User, UserRole
from app.services.auth import get_password_hash

logger = logging.getLogger(__name__)

USER_ID_RANGE = (10_000_000, 99_999_999)
ADMIN_ID_RANGE = (1_000_000_000, 9_999_999_999)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def id_range_for(role: UserRole) -> tuple[int, int]:
    return ADMIN_ID_RANGE if UserRole(role).is_elevated else USER_ID_RANGE


def _random_id(role: UserRole) -> int:
    low, high = id_range_for(role)
    return low + secrets.randbelow(high - low + 1)


def allocate_user_id(db: Session, role: UserRole, max_attempts: int = 10) -> int:
    """Draw ids from the role's range until one is unused, at most `max_attempts` times."""
    for _ in range(max_attempts):
        candidate = _random_id(role)
        if db.get(User, candidate) is None:
            return candidate
    logger.error("No free %s id after %d attempts", UserRole(role).value, max_attempts)
    raise IdentifierExhausted()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_prime_admin(db: Session) -> User | None:
    return db.query(User).filter(User.role == UserRole.prime_admin).first()


def check_institutional_email(email: str, settings: Settings) -> None:
    domain = settings.institutional_email_domain.strip().lower().lstrip("@")
    if not normalize_email(email).endswith("@" + domain):
        raise ValidationFailed(f"Regular user accounts require an email address ending with @{domain}")


def ensure_email_available(db: Session, email: str, exclude_user_id: int | None = None) -> None:
    existing = get_user_by_email(db, email)
    if existing is not None and existing.id != exclude_user_id:
        raise Conflict("User with this email already exists")


def ensure_no_prime_admin(db: Session) -> None:
    if get_prime_admin(db) is not None:
        raise Conflict("A Prime Admin account already exists. There can only be one Prime Admin.")


def create_user(
    db: Session,
    settings: Settings,
    *,
    email: str,
    password: str | None,
    first_name: str,
    last_name: str,
    role: UserRole = UserRole.user,
    is_verified: bool = False,
    google_id: str | None = None,
) -> User:
    """Create and flush a new account. Caller commits.

    Elevated accounts require a password and cannot be linked to Google sign-in;
    standard accounts start with the configured credit balance.
    """
    role = UserRole(role)
    if role.is_elevated and (not password or not password.strip() or google_id):
        raise ValidationFailed(
            "Admin accounts require a password. Google authentication is not supported for admin accounts."
        )
    if not password and not google_id:
        raise ValidationFailed("A password is required")
    if role == UserRole.prime_admin:
        ensure_no_prime_admin(db)
    ensure_email_available(db, email)

    user = User(
        id=allocate_user_id(db, role, settings.id_generation_max_attempts),
        email=normalize_email(email),
        hashed_password=get_password_hash(password) if password else None,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        google_id=google_id,
        role=role,
        is_verified=is_verified,
        credits=settings.default_user_credits if role == UserRole.user else 0,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # Lost a race with a concurrent insert; report the email only if that was the clash
        db.rollback()
        if get_user_by_email(db, email) is not None:
            raise Conflict("User with this email already exists")
        raise Conflict("Account could not be created, please try again")
    logger.info("Created %s account id=%s email=%s", role.value, user.id, user.email)
    return user

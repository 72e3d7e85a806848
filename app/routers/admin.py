"""Admin console: account management, role changes, credits, admin accounts.

Admins (and the Prime Admin) manage user accounts; only the Prime Admin manages
roles and admin accounts. Nobody acts on their own role or deletes themselves,
and the Prime Admin account can never be changed or deleted here.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db
from app.dependencies import get_app_settings, require_admin, require_prime_admin
from app.errors import Forbidden, NotFound, ValidationFailed
from app.models.user import User, UserRole
from app.schemas.admin import (
    AdminCreate,
    AdminEnvelope,
    AdminUserUpdate,
    CreditUpdateRequest,
    RoleChangeRequest,
    UserEnvelope,
)
from app.schemas.auth import MessageResponse, UserResponse
from app.schemas.user import CreditHistoryResponse
from app.services import accounts, credits

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_user_or_404(db: Session, user_id: int, label: str = "User") -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound(f"{label} not found")
    return user


def _ensure_outranks(actor: User, target: User, action: str) -> None:
    """Acting on someone else requires a strictly higher tier."""
    if actor.id != target.id and not actor.role.rank > target.role.rank:
        raise Forbidden(f"You cannot {action} an account at or above your own role")


@router.get("/users", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return [UserResponse.model_validate(u) for u in db.query(User).order_by(User.created_at, User.id).all()]


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return UserResponse.model_validate(_get_user_or_404(db, user_id))


@router.put("/users/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: int,
    data: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)
    _ensure_outranks(current_user, user, "edit")
    if data.email is not None and accounts.normalize_email(data.email) != user.email:
        accounts.ensure_email_available(db, data.email, exclude_user_id=user.id)
        user.email = accounts.normalize_email(data.email)
    if data.first_name is not None:
        if not data.first_name.strip():
            raise ValidationFailed("firstName must not be blank")
        user.first_name = data.first_name.strip()
    if data.last_name is not None:
        if not data.last_name.strip():
            raise ValidationFailed("lastName must not be blank")
        user.last_name = data.last_name.strip()
    if data.is_verified is not None:
        user.is_verified = data.is_verified
    db.commit()
    db.refresh(user)
    return UserEnvelope(message="User updated successfully", user=UserResponse.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise Forbidden("You cannot delete your own account")
    if user.role == UserRole.prime_admin:
        raise Forbidden("The prime admin account cannot be deleted")
    if user.role == UserRole.admin and current_user.role != UserRole.prime_admin:
        raise Forbidden("Only prime admin can delete admin accounts")
    db.delete(user)
    db.commit()
    log.info("User %s deleted by %s", user_id, current_user.id)
    return MessageResponse(message="User deleted successfully")


@router.put("/users/{user_id}/role", response_model=UserEnvelope)
def change_user_role(
    user_id: int,
    data: RoleChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_prime_admin),
):
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise Forbidden("You cannot change your own role")
    if data.role == UserRole.prime_admin or user.role == UserRole.prime_admin:
        raise Forbidden("Prime admin role cannot be assigned or changed")
    if data.role.is_elevated and (not user.has_password or user.google_id):
        raise ValidationFailed("Accounts using Google sign-in cannot be promoted to admin")
    previous = user.role
    user.role = data.role
    db.commit()
    db.refresh(user)
    log.info("Role of user %s changed %s -> %s by %s", user.id, previous.value, user.role.value, current_user.id)
    return UserEnvelope(message="User role updated successfully", user=UserResponse.model_validate(user))


@router.put("/users/{user_id}/credits", response_model=UserEnvelope)
def update_user_credits(
    user_id: int,
    data: CreditUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)
    if user.role != UserRole.user:
        raise ValidationFailed("Credits apply to user accounts only")
    entry = credits.set_credits(db, user, data.credits, actor=current_user, reason=data.reason)
    db.commit()
    db.refresh(user)
    log.info(
        "Credits of user %s set %s -> %s by %s",
        user.id, entry.previous_credits, entry.new_credits, current_user.id,
    )
    return UserEnvelope(message="User credits updated successfully", user=UserResponse.model_validate(user))


@router.get("/users/{user_id}/credit-history", response_model=list[CreditHistoryResponse])
def get_credit_history(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    _get_user_or_404(db, user_id)
    return [CreditHistoryResponse.model_validate(h) for h in credits.list_history(db, user_id)]


@router.get("/admins", response_model=list[UserResponse])
def list_admins(db: Session = Depends(get_db), current_user: User = Depends(require_prime_admin)):
    admins = db.query(User).filter(User.role == UserRole.admin).order_by(User.created_at, User.id).all()
    return [UserResponse.model_validate(a) for a in admins]


@router.post("/admins", response_model=AdminEnvelope, status_code=201)
def create_admin(
    data: AdminCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    current_user: User = Depends(require_prime_admin),
):
    """Create a ready-to-use (verified) admin; no email domain restriction."""
    admin = accounts.create_user(
        db,
        settings,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=UserRole.admin,
        is_verified=True,
    )
    db.commit()
    db.refresh(admin)
    return AdminEnvelope(message="Admin created successfully", admin=UserResponse.model_validate(admin))


@router.delete("/admins/{admin_id}", response_model=MessageResponse)
def delete_admin(admin_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_prime_admin)):
    admin = _get_user_or_404(db, admin_id, label="Admin")
    if admin.role == UserRole.prime_admin:
        raise Forbidden("Cannot delete a Prime Admin account")
    if admin.role != UserRole.admin:
        raise NotFound("Admin not found")
    db.delete(admin)
    db.commit()
    log.info("Admin %s deleted by %s", admin_id, current_user.id)
    return MessageResponse(message="Admin deleted successfully")

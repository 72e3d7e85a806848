"""Self-service: profile, password, own credit balance."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_verified
from app.errors import InvalidCredentials, ValidationFailed
from app.models.user import User
from app.schemas.auth import MessageResponse, UserResponse
from app.schemas.user import (
    ChangePasswordRequest,
    CreditHistoryResponse,
    CreditsResponse,
    ProfileResponse,
    ProfileUpdate,
)
from app.services import credits
from app.services.auth import get_password_hash, verify_password

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserResponse)
def get_profile(current_user: User = Depends(require_verified)):
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_verified),
):
    if data.first_name is not None:
        current_user.first_name = data.first_name
    if data.last_name is not None:
        current_user.last_name = data.last_name
    db.commit()
    db.refresh(current_user)
    return ProfileResponse(message="Profile updated successfully", user=UserResponse.model_validate(current_user))


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_verified),
):
    if not current_user.has_password:
        raise ValidationFailed("This account was created with Google. You cannot change the password.")
    if not verify_password(data.current_password, current_user.hashed_password):
        raise InvalidCredentials("Current password is incorrect")
    current_user.hashed_password = get_password_hash(data.new_password)
    db.commit()
    return MessageResponse(message="Password changed successfully")


@router.get("/credits", response_model=CreditsResponse)
def get_my_credits(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_verified),
):
    history = credits.list_history(db, current_user.id)
    return CreditsResponse(
        credits=current_user.credits,
        history=[CreditHistoryResponse.model_validate(h) for h in history],
    )

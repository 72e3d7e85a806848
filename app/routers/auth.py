"""Registration, email verification, login and password reset."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db
from app.dependencies import get_app_settings, get_current_user, get_mailer
from app.errors import (
    EmailDeliveryFailed,
    EmailNotVerified,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ValidationFailed,
)
from app.models.user import User, UserRole
from app.schemas.auth import (
    CodeSentResponse,
    EmailRequest,
    MessageResponse,
    RegisterResponse,
    ResetPasswordRequest,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
    VerifyEmailRequest,
)
from app.services import accounts
from app.services.auth import create_access_token, get_password_hash, verify_password
from app.services.notifications import Mailer, PURPOSE_RESET_PASSWORD, PURPOSE_VERIFY_EMAIL
from app.services.otp import OtpResult, check_code, issue_code

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])

GOOGLE_ACCOUNT_MESSAGE = "This account was created with Google. Please use Google sign-in."


def _token_response(settings: Settings, user: User, message: str) -> Token:
    token = create_access_token(settings, user.id, user.email, user.role)
    return Token(message=message, token=token, user=UserResponse.model_validate(user))


def _send_code(mailer: Mailer, user: User, code: str, purpose: str = PURPOSE_VERIFY_EMAIL) -> bool:
    sent = mailer.send_otp(user.email, code, purpose)
    if not sent:
        log.warning("Verification code email to %s (user_id=%s, %s) was not sent", user.email, user.id, purpose)
    return sent


def _raise_for_code(result: OtpResult) -> None:
    if result == OtpResult.expired:
        raise ValidationFailed("OTP has expired. Please request a new one.")
    if result == OtpResult.missing:
        raise ValidationFailed("No active verification code. Please request a new one.")
    if result == OtpResult.mismatch:
        raise ValidationFailed("Invalid OTP")


def _register_with_role(
    data: UserCreate,
    role: UserRole,
    db: Session,
    settings: Settings,
    mailer: Mailer,
) -> RegisterResponse:
    log.info("Registration attempt: email=%s role=%s", data.email, role.value)
    user = accounts.create_user(
        db,
        settings,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=role,
    )
    code = issue_code(user, settings)
    db.commit()
    db.refresh(user)
    # Account creation stands even if the email cannot be delivered; /auth/resend-otp recovers.
    _send_code(mailer, user, code)
    label = {UserRole.user: "User", UserRole.admin: "Admin", UserRole.prime_admin: "Prime Admin"}[role]
    return RegisterResponse(
        message=f"{label} registered successfully. Please verify your email with the OTP sent.",
        user_id=user.id,
        role=user.role,
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    data: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    accounts.check_institutional_email(data.email, settings)
    existing = accounts.get_user_by_email(db, data.email)
    if existing is not None and not existing.is_verified and verify_password(data.password, existing.hashed_password):
        # Same person signing up again before verifying: fresh code, no other change
        code = issue_code(existing, settings)
        db.commit()
        _send_code(mailer, existing, code)
        return RegisterResponse(
            message="Account already registered but not verified. A new verification code has been sent.",
            user_id=existing.id,
            role=existing.role,
        )
    return _register_with_role(data, UserRole.user, db, settings, mailer)


@router.post("/register-admin", response_model=RegisterResponse, status_code=201)
def register_admin(
    data: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """Development only: self-register an admin (no email domain restriction)."""
    if not settings.is_development:
        raise Forbidden("Admin registration is not allowed in production mode")
    return _register_with_role(data, UserRole.admin, db, settings, mailer)


@router.post("/register-prime-admin", response_model=RegisterResponse, status_code=201)
def register_prime_admin(
    data: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """Development only: register the single Prime Admin."""
    if not settings.is_development:
        raise Forbidden("Prime Admin registration is not allowed in production mode")
    return _register_with_role(data, UserRole.prime_admin, db, settings, mailer)


@router.post("/verify-email", response_model=Token)
def verify_email(
    data: VerifyEmailRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    user = db.get(User, data.user_id)
    if not user:
        raise NotFound("User not found")
    result = check_code(user, data.otp)
    if result != OtpResult.ok:
        log.info("Email verification failed for user_id=%s: %s", user.id, result.value)
        _raise_for_code(result)
    user.is_verified = True
    db.commit()
    db.refresh(user)
    return _token_response(settings, user, "Email verified successfully")


@router.post("/resend-otp", response_model=CodeSentResponse)
def resend_otp(
    data: EmailRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    user = accounts.get_user_by_email(db, data.email)
    if not user:
        raise NotFound("User not found")
    if user.is_verified:
        raise ValidationFailed("User is already verified")
    code = issue_code(user, settings)
    db.commit()
    if not _send_code(mailer, user, code):
        raise EmailDeliveryFailed()
    return CodeSentResponse(message="Verification code sent successfully", user_id=user.id)


@router.post("/login", response_model=Token)
def login(
    data: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    user = accounts.get_user_by_email(db, data.email)
    if not user:
        raise NotFound("User not found")
    if user.role.is_elevated and (not user.has_password or user.google_id):
        raise InvalidCredentials(
            "Admin accounts must use password authentication. Google authentication is not supported for admin accounts."
        )
    if not user.has_password:
        raise InvalidCredentials(GOOGLE_ACCOUNT_MESSAGE)
    if not verify_password(data.password, user.hashed_password):
        log.info("Failed login for user_id=%s", user.id)
        raise InvalidCredentials()
    if not user.is_verified:
        code = issue_code(user, settings)
        db.commit()
        _send_code(mailer, user, code)
        raise EmailNotVerified(
            "Email not verified. A new verification code has been sent.",
            extra={"userId": user.id},
        )
    return _token_response(settings, user, "Login successful")


@router.post("/forgot-password", response_model=CodeSentResponse)
def forgot_password(
    data: EmailRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    user = accounts.get_user_by_email(db, data.email)
    if not user:
        raise NotFound("User not found")
    if not user.has_password:
        raise ValidationFailed(GOOGLE_ACCOUNT_MESSAGE)
    code = issue_code(user, settings)
    db.commit()
    if not _send_code(mailer, user, code, PURPOSE_RESET_PASSWORD):
        raise EmailDeliveryFailed()
    return CodeSentResponse(message="Password reset code sent to your email", user_id=user.id)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    user = db.get(User, data.user_id)
    if not user:
        raise NotFound("User not found")
    if not user.has_password:
        raise ValidationFailed(GOOGLE_ACCOUNT_MESSAGE)
    result = check_code(user, data.otp)
    if result != OtpResult.ok:
        log.info("Password reset failed for user_id=%s: %s", user.id, result.value)
        _raise_for_code(result)
    user.hashed_password = get_password_hash(data.new_password)
    db.commit()
    log.info("Password reset for user_id=%s", user.id)
    return MessageResponse(message="Password reset successful")


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)

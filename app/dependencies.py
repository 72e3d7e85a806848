"""Shared dependencies: settings, DB session, mailer, current user and tier gates."""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db
from app.errors import EmailNotVerified, Forbidden, InvalidToken, NotAuthenticated
from app.models.user import User, UserRole
from app.services.auth import decode_token_with_error
from app.services.notifications import Mailer

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_token_claims(
    settings: Settings = Depends(get_app_settings),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    if not credentials or (credentials.scheme or "").lower() != "bearer":
        raise NotAuthenticated('Invalid authorization format, expected "Bearer token"')
    token_str = (credentials.credentials or "").strip()
    if not token_str:
        raise NotAuthenticated()
    payload, _ = decode_token_with_error(settings, token_str)
    if not payload:
        raise InvalidToken()
    return payload


def get_current_user(
    db: Session = Depends(get_db),
    claims: dict = Depends(get_token_claims),
) -> User:
    user = db.get(User, claims["id"])
    if not user:
        raise InvalidToken()
    return user


def require_verified(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_verified:
        raise EmailNotVerified()
    return current_user


def require_role(minimum: UserRole):
    """Dependency factory: the caller must be verified and hold at least `minimum`.

    Both the token's role and the stored role must satisfy it, so a demotion takes
    effect before the old token expires.
    """
    minimum = UserRole(minimum)
    label = "Prime Admin" if minimum == UserRole.prime_admin else "Admin"

    def dependency(
        current_user: User = Depends(require_verified),
        claims: dict = Depends(get_token_claims),
    ) -> User:
        if not (claims["role"].satisfies(minimum) and current_user.role.satisfies(minimum)):
            raise Forbidden(f"Forbidden: {label} access required")
        return current_user

    return dependency


require_admin = require_role(UserRole.admin)
require_prime_admin = require_role(UserRole.prime_admin)

"""Password hashing and JWT session tokens."""
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from app.config import Settings
from app.models.user import UserRole


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def verify_password(plain: str, hashed: str | None) -> bool:
    """True if `plain` matches the stored bcrypt hash. Accounts without a hash never match."""
    if not isinstance(plain, str):
        raise TypeError("password must be a string")
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    if not isinstance(password, str):
        raise TypeError("password must be a string")
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def create_access_token(settings: Settings, user_id: int, email: str, role: UserRole) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    payload = {"id": int(user_id), "email": email, "role": UserRole(role).value, "exp": expire}
    raw = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return raw if isinstance(raw, str) else raw.decode("utf-8")


def decode_token_with_error(settings: Settings, token: str) -> tuple[dict | None, str | None]:
    """Decode JWT; returns (payload, error_message). Payload always has id, email and role."""
    if not token or not isinstance(token, str):
        return None, "empty token"
    token = token.strip()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        return None, str(e)
    except jwt.PyJWTError as e:
        return None, str(e)
    try:
        payload["id"] = int(payload["id"])
        payload["role"] = UserRole(payload["role"])
    except (KeyError, TypeError, ValueError):
        return None, "malformed claims"
    if not isinstance(payload.get("email"), str):
        return None, "malformed claims"
    return payload, None

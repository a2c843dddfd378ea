"""
Auth service: password hashing, credential verification and session tokens.
Uses bcrypt directly (no passlib) to avoid passlib/bcrypt version conflicts.
Tokens are self-contained JWTs; there is no server-side session store or revocation list.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from aev_scheduler.config import Settings
from aev_scheduler.models.user import User

# Bcrypt limit is 72 bytes; use 71 so we never exceed
BCRYPT_MAX_BYTES = 71


@dataclass(frozen=True)
class SessionData:
    """What a valid token says about its bearer."""
    user_id: UUID
    email: str
    role: str

    @property
    def is_staff(self) -> bool:
        return self.role == "staff"


def _truncate_to_bytes(s: str, max_bytes: int = BCRYPT_MAX_BYTES) -> bytes:
    """Truncate string to at most max_bytes UTF-8; return bytes for bcrypt."""
    if not s:
        return b""
    encoded = s.encode("utf-8")
    if len(encoded) <= max_bytes:
        return encoded
    return encoded[:max_bytes]


def hash_password(password: str) -> str:
    """Hash password for storage. Raises ValueError if password is None."""
    if password is None:
        raise ValueError("password is required")
    raw = _truncate_to_bytes(password)
    hashed = bcrypt.hashpw(raw, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    raw = _truncate_to_bytes(plain)
    try:
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        # Malformed stored hash counts as a mismatch
        return False


def authenticate(db: Session, email: str, password: str) -> User | None:
    """
    Return the user whose email matches exactly and whose password verifies, else None.
    Unknown email and wrong password are deliberately indistinguishable to the caller.
    """
    if not email or not password:
        return None
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def create_access_token(settings: Settings, user: User, expires_hours: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(hours=expires_hours or settings.jwt_expire_hours)
    # JWT exp must be numeric (Unix timestamp), not datetime
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def session_from_token(settings: Settings, token: str | None) -> SessionData | None:
    """Validate a token and unpack it; any defect yields None (anonymous), never an exception."""
    if not token or not token.strip():
        return None
    payload = decode_access_token(settings, token.strip())
    if not payload or "sub" not in payload:
        return None
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        return None
    return SessionData(
        user_id=user_id,
        email=str(payload.get("email") or ""),
        role=str(payload.get("role") or ""),
    )

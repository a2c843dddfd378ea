"""
Auth routes: staff self-registration, login (JWT in body and cookie), logout, current session.
"""
import hmac
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from aev_scheduler.api.deps import get_app_settings, load_session_user, require_session
from aev_scheduler.config import Settings
from aev_scheduler.database import get_db
from aev_scheduler.errors import ApiError, Conflict, InternalError, Unauthorized, ValidationError
from aev_scheduler.models.user import User
from aev_scheduler.schemas.auth import (
    MIN_PASSWORD_LENGTH,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    SecurityCodeRequest,
    SecurityCodeResponse,
    SessionResponse,
    TokenResponse,
)
from aev_scheduler.schemas.common import MessageResponse
from aev_scheduler.schemas.user import UserResponse
from aev_scheduler.services.auth import SessionData, authenticate, create_access_token, hash_password

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists. Please use a different email."


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a staff account. Role other than "staff" is rejected by the schema."""
    logger.info("Registration request for %s", data.email)
    try:
        if db.query(User).filter(User.email == data.email).first():
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("User created: %s", user.id)
        return RegisterResponse(message="User created successfully", user_id=str(user.id))
    except ApiError:
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning("Register IntegrityError: %s", e)
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)
    except Exception:
        db.rollback()
        logger.exception("Register failed")
        raise InternalError()


@router.post("/register/verify-code", response_model=SecurityCodeResponse)
def verify_registration_code(data: SecurityCodeRequest, settings: Settings = Depends(get_app_settings)):
    """
    Check the six-digit code the login page asks for before showing the staff sign-up form.
    This is a UI convenience, not access control: /api/register does not look at the code,
    so anyone who calls it directly can create a staff account.
    """
    valid = hmac.compare_digest(data.code.strip().encode("utf-8"), settings.staff_registration_code.encode("utf-8"))
    return SecurityCodeResponse(valid=valid)


@router.post("/auth/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Login with email/password; returns JWT and sets it as the session cookie."""
    user = authenticate(db, data.email, data.password)
    if user is None:
        raise Unauthorized("Invalid email or password", headers={"WWW-Authenticate": "Bearer"})
    token = create_access_token(settings, user)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.jwt_expire_hours * 3600,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    logger.info("Login: %s", user.id)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/auth/logout", response_model=MessageResponse)
def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    """Drop the session cookie. The token itself stays valid until it expires."""
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Signed out")


@router.get("/auth/session", response_model=SessionResponse)
def current_session(session: SessionData = Depends(require_session), db: Session = Depends(get_db)):
    """Return the user behind the current session."""
    user = load_session_user(db, session)
    return SessionResponse(user=UserResponse.model_validate(user))

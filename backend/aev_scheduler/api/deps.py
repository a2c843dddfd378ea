"""
Shared dependencies: session resolution from Bearer token or session cookie.
resolve_session never raises; require_session / require_staff turn an anonymous request
into 401/403 before any database session is opened.
"""
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from aev_scheduler.config import Settings
from aev_scheduler.errors import Forbidden, NotFound, Unauthorized
from aev_scheduler.models.user import User
from aev_scheduler.services.auth import SessionData, session_from_token

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def resolve_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> SessionData | None:
    """Token from Authorization header, else from the session cookie; None means anonymous."""
    token = getattr(credentials, "credentials", None) or request.cookies.get(settings.session_cookie_name)
    session = session_from_token(settings, token)
    if session is None and token:
        logger.debug("Auth failed: invalid or expired token")
    return session


def require_session(session: SessionData | None = Depends(resolve_session)) -> SessionData:
    if session is None:
        raise Unauthorized(headers={"WWW-Authenticate": "Bearer"})
    return session


def require_staff(session: SessionData = Depends(require_session)) -> SessionData:
    if not session.is_staff:
        raise Forbidden()
    return session


def load_session_user(db: Session, session: SessionData) -> User:
    """Backing record for a session; 404 when the user was deleted after the token was issued."""
    user = db.query(User).filter(User.id == session.user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user

"""
Users API: list, create, bulk import (always students), delete.
Writes require a staff session. Deleting a user removes its tasks and memberships;
its activity entries stay with user_id cleared.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from aev_scheduler.api.deps import get_app_settings, require_session, require_staff
from aev_scheduler.config import Settings
from aev_scheduler.database import get_db
from aev_scheduler.errors import ApiError, Conflict, InternalError, NotFound, ValidationError
from aev_scheduler.models.user import User
from aev_scheduler.schemas.auth import MIN_PASSWORD_LENGTH
from aev_scheduler.schemas.common import MessageResponse
from aev_scheduler.schemas.user import BulkUserRequest, BulkUserResponse, UserCreateRequest, UserResponse
from aev_scheduler.services.auth import SessionData, hash_password

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)

BULK_IMPORT_ROLE = "student"


def _parse_user_id(user_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise NotFound("User not found")


@router.get("", response_model=list[UserResponse])
def list_users(session: SessionData = Depends(require_session), db: Session = Depends(get_db)):
    """All users, newest first. Search, sort and paging happen client-side."""
    users = db.query(User).order_by(User.created_at.desc()).all()
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreateRequest,
    session: SessionData = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Create a single account with an explicit role."""
    try:
        if db.query(User).filter(User.email == data.email).first():
            raise Conflict("An account with this email already exists.")
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
        logger.info("User %s created by %s", user.id, session.user_id)
        return UserResponse.model_validate(user)
    except ApiError:
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning("Create user IntegrityError: %s", e)
        raise Conflict("An account with this email already exists.")
    except Exception:
        db.rollback()
        logger.exception("Create user failed")
        raise InternalError()


@router.post("/bulk", response_model=BulkUserResponse, status_code=status.HTTP_201_CREATED)
def bulk_create_users(
    data: BulkUserRequest,
    session: SessionData = Depends(require_staff),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Import rows in order as student accounts. The role in each row is ignored: bulk-imported
    accounts are always students. All rows commit together or not at all.
    """
    seen: set[str] = set()
    for row in data.users:
        if row.email in seen:
            raise Conflict(f"Duplicate email in upload: {row.email}")
        seen.add(row.email)
    try:
        existing = db.query(User.email).filter(User.email.in_(list(seen))).first()
        if existing:
            raise Conflict(f"An account with this email already exists: {existing[0]}")
        for row in data.users:
            db.add(User(
                name=row.full_name,
                email=row.email,
                password_hash=hash_password(row.password or settings.bulk_default_password),
                role=BULK_IMPORT_ROLE,
            ))
        db.commit()
    except ApiError:
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning("Bulk create IntegrityError: %s", e)
        raise Conflict("One or more emails already exist.")
    except Exception:
        db.rollback()
        logger.exception("Bulk create users failed")
        raise InternalError()
    logger.info("Bulk import of %s users by %s", len(data.users), session.user_id)
    return BulkUserResponse(message="Users created successfully", count=len(data.users))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    session: SessionData = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Delete immediately; 404 if the user does not exist."""
    uid = _parse_user_id(user_id)
    try:
        user = db.query(User).filter(User.id == uid).first()
        if not user:
            raise NotFound("User not found")
        db.delete(user)
        db.commit()
    except ApiError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Delete user %s failed", uid)
        raise InternalError()
    logger.info("User %s deleted by %s", uid, session.user_id)
    return MessageResponse(message="User deleted successfully")

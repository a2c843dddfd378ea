"""
Dashboard API: one aggregate payload (user, stats, recent activities, tasks, projects).
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from aev_scheduler.api.deps import load_session_user, require_session
from aev_scheduler.database import get_db
from aev_scheduler.errors import ApiError, InternalError
from aev_scheduler.schemas.dashboard import DashboardResponse
from aev_scheduler.services.auth import SessionData
from aev_scheduler.services.dashboard import build_dashboard

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
logger = logging.getLogger(__name__)


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    session: SessionData = Depends(require_session),
    db: Session = Depends(get_db),
):
    """401 is decided by require_session before get_db opens a session."""
    try:
        user = load_session_user(db, session)
        return DashboardResponse.model_validate(build_dashboard(db, user), from_attributes=True)
    except ApiError:
        raise
    except Exception:
        logger.exception("Dashboard aggregation failed for %s", session.user_id)
        raise InternalError()

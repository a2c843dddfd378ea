"""
Projects API: list (staff see all, students see their own), create, get, update, delete,
assign member. Writes require a staff session and append to the activity feed.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from aev_scheduler.api.deps import get_app_settings, load_session_user, require_session, require_staff
from aev_scheduler.config import Settings
from aev_scheduler.database import get_db
from aev_scheduler.errors import InternalError, NotFound
from aev_scheduler.models.project import Project, project_members
from aev_scheduler.models.user import User
from aev_scheduler.schemas.common import MessageResponse
from aev_scheduler.schemas.project import (
    ProjectCreateRequest,
    ProjectMemberRequest,
    ProjectResponse,
    ProjectUpdateRequest,
)
from aev_scheduler.services.activity import record_activity
from aev_scheduler.services.auth import SessionData

router = APIRouter(prefix="/api/projects", tags=["projects"])
logger = logging.getLogger(__name__)

NULLABLE_PROJECT_FIELDS = ("description", "deadline")


def _with_members_and_tasks(query):
    return query.options(selectinload(Project.users), selectinload(Project.tasks))


def _get_project_or_404(db: Session, project_id: str) -> Project:
    try:
        pid = uuid.UUID(project_id)
    except ValueError:
        raise NotFound("Project not found")
    project = _with_members_and_tasks(db.query(Project)).filter(Project.id == pid).first()
    if not project:
        raise NotFound("Project not found")
    return project


def _failure_details(settings: Settings, summary: str, exc: Exception) -> str:
    if settings.debug:
        return f"{summary}: {type(exc).__name__}: {exc}"
    return summary


@router.get("", response_model=list[ProjectResponse])
def list_projects(session: SessionData = Depends(require_session), db: Session = Depends(get_db)):
    """Every project for staff; only member projects for students. Users and tasks embedded."""
    query = _with_members_and_tasks(db.query(Project))
    if not session.is_staff:
        member_ids = select(project_members.c.project_id).where(project_members.c.user_id == session.user_id)
        query = query.filter(Project.id.in_(member_ids))
    projects = query.order_by(Project.created_at.desc()).all()
    return [ProjectResponse.model_validate(p) for p in projects]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreateRequest,
    session: SessionData = Depends(require_staff),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Create a pending project with the caller as its first member."""
    owner = load_session_user(db, session)
    try:
        project = Project(
            name=data.name,
            description=data.description,
            deadline=data.deadline,
            status="pending",
        )
        project.users.append(owner)
        db.add(project)
        db.flush()
        record_activity(db, f'{owner.name} created project "{project.name}"', user_id=owner.id, project_id=project.id)
        db.commit()
        db.refresh(project)
        logger.info("Project %s created by %s", project.id, owner.id)
        return ProjectResponse.model_validate(project)
    except Exception as e:
        db.rollback()
        logger.exception("Create project failed")
        raise InternalError(details=_failure_details(settings, "Project could not be created", e))


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, session: SessionData = Depends(require_session), db: Session = Depends(get_db)):
    project = _get_project_or_404(db, project_id)
    if not session.is_staff and all(u.id != session.user_id for u in project.users):
        raise NotFound("Project not found")
    return ProjectResponse.model_validate(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    data: ProjectUpdateRequest,
    session: SessionData = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Merge provided fields onto the project. Status transitions are unrestricted."""
    project = _get_project_or_404(db, project_id)
    # name and status are NOT NULL; an explicit null for them means "leave as is"
    changes = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_PROJECT_FIELDS
    }
    try:
        for field, value in changes.items():
            setattr(project, field, value)
        if changes:
            summary = ", ".join(sorted(changes))
            record_activity(
                db, f'Project "{project.name}" updated ({summary})', user_id=session.user_id, project_id=project.id
            )
        db.commit()
        db.refresh(project)
        return ProjectResponse.model_validate(project)
    except Exception:
        db.rollback()
        logger.exception("Update project %s failed", project_id)
        raise InternalError()


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(project_id: str, session: SessionData = Depends(require_staff), db: Session = Depends(get_db)):
    """Delete a project and its tasks; activity entries keep their text with project_id cleared."""
    project = _get_project_or_404(db, project_id)
    try:
        db.delete(project)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Delete project %s failed", project_id)
        raise InternalError()
    logger.info("Project %s deleted by %s", project_id, session.user_id)
    return MessageResponse(message="Project deleted successfully")


@router.post("/{project_id}/members", response_model=ProjectResponse)
def add_member(
    project_id: str,
    data: ProjectMemberRequest,
    session: SessionData = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Assign a user (typically a student) to the project. Assigning twice is a no-op."""
    project = _get_project_or_404(db, project_id)
    try:
        uid = uuid.UUID(data.user_id)
    except ValueError:
        raise NotFound("User not found")
    user = db.query(User).filter(User.id == uid).first()
    if not user:
        raise NotFound("User not found")
    if any(u.id == user.id for u in project.users):
        return ProjectResponse.model_validate(project)
    try:
        project.users.append(user)
        record_activity(
            db, f'{user.name} was added to project "{project.name}"', user_id=user.id, project_id=project.id
        )
        db.commit()
        db.refresh(project)
        return ProjectResponse.model_validate(project)
    except Exception:
        db.rollback()
        logger.exception("Add member to project %s failed", project_id)
        raise InternalError()

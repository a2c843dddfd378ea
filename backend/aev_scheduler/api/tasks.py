"""
Tasks API: list own tasks, create, update title/status.
Students work on their own tasks in projects they belong to; staff may create and update tasks for anyone.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from aev_scheduler.api.deps import load_session_user, require_session
from aev_scheduler.database import get_db
from aev_scheduler.errors import Forbidden, InternalError, NotFound
from aev_scheduler.models.project import Project
from aev_scheduler.models.task import Task
from aev_scheduler.models.user import User
from aev_scheduler.schemas.task import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from aev_scheduler.services.activity import record_activity
from aev_scheduler.services.auth import SessionData

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


def _uuid_or_404(value: str, what: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise NotFound(f"{what} not found")


@router.get("", response_model=list[TaskResponse])
def list_my_tasks(session: SessionData = Depends(require_session), db: Session = Depends(get_db)):
    tasks = db.query(Task).filter(Task.user_id == session.user_id).order_by(Task.created_at.desc()).all()
    return [TaskResponse.model_validate(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreateRequest,
    session: SessionData = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Create a task in a project. Owner defaults to the caller."""
    project_id = _uuid_or_404(data.project_id, "Project")
    if data.user_id is None:
        owner = load_session_user(db, session)
    else:
        owner_id = _uuid_or_404(data.user_id, "User")
        if owner_id != session.user_id and not session.is_staff:
            raise Forbidden("Only staff can assign tasks to other users")
        owner = db.query(User).filter(User.id == owner_id).first()
        if not owner:
            raise NotFound("User not found")
    project = db.query(Project).filter(Project.id == project_id).first()
    # Students only see projects they belong to; the rest do not exist for them
    if not project or (not session.is_staff and all(u.id != session.user_id for u in project.users)):
        raise NotFound("Project not found")
    try:
        task = Task(title=data.title.strip(), status=data.status, user_id=owner.id, project_id=project.id)
        db.add(task)
        db.flush()
        record_activity(
            db,
            f'Task "{task.title}" added to "{project.name}"',
            user_id=owner.id,
            project_id=project.id,
            task_id=task.id,
        )
        db.commit()
        db.refresh(task)
        return TaskResponse.model_validate(task)
    except Exception:
        db.rollback()
        logger.exception("Create task failed")
        raise InternalError()


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    data: TaskUpdateRequest,
    session: SessionData = Depends(require_session),
    db: Session = Depends(get_db),
):
    tid = _uuid_or_404(task_id, "Task")
    task = db.query(Task).filter(Task.id == tid).first()
    # Other users' tasks are invisible to students
    if not task or (task.user_id != session.user_id and not session.is_staff):
        raise NotFound("Task not found")
    try:
        if data.title is not None:
            task.title = data.title.strip()
        if data.status is not None and data.status != task.status:
            task.status = data.status
            record_activity(
                db,
                f'Task "{task.title}" moved to {data.status}',
                user_id=session.user_id,
                project_id=task.project_id,
                task_id=task.id,
            )
        db.commit()
        db.refresh(task)
        return TaskResponse.model_validate(task)
    except Exception:
        db.rollback()
        logger.exception("Update task %s failed", task_id)
        raise InternalError()

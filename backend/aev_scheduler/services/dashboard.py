"""
Dashboard aggregation: four counts read in one statement, plus the five most recent
activities, tasks and projects visible to a user. Pure reads; callers own error handling.
"""
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from aev_scheduler.models.activity import Activity
from aev_scheduler.models.project import Project, project_members
from aev_scheduler.models.task import Task
from aev_scheduler.models.user import User

RECENT_LIMIT = 5


def _member_project_ids(user_id: UUID):
    return select(project_members.c.project_id).where(project_members.c.user_id == user_id)


def compute_stats(db: Session, user_id: UUID) -> dict:
    """
    Counts for the dashboard cards. The four scalar subqueries run as a single SELECT,
    so they see one snapshot even under READ COMMITTED.
    """
    member_projects = _member_project_ids(user_id)
    total_projects = (
        select(func.count(Project.id)).where(Project.id.in_(member_projects)).scalar_subquery()
    )
    in_progress = (
        select(func.count(Task.id))
        .where(Task.user_id == user_id, Task.status == "IN_PROGRESS")
        .scalar_subquery()
    )
    completed = (
        select(func.count(Task.id))
        .where(Task.user_id == user_id, Task.status == "COMPLETED")
        .scalar_subquery()
    )
    # Everyone on any of the user's projects, the user included
    team_members = (
        select(func.count(func.distinct(project_members.c.user_id)))
        .where(project_members.c.project_id.in_(member_projects))
        .scalar_subquery()
    )
    row = db.execute(select(total_projects, in_progress, completed, team_members)).one()
    return {
        "total_projects": row[0] or 0,
        "tasks_in_progress": row[1] or 0,
        "completed_tasks": row[2] or 0,
        "team_members": row[3] or 0,
    }


def recent_activities(db: Session, user_id: UUID, limit: int = RECENT_LIMIT) -> list[Activity]:
    """Own activities or activities on projects the user belongs to, newest first."""
    stmt = (
        select(Activity)
        .where(or_(Activity.user_id == user_id, Activity.project_id.in_(_member_project_ids(user_id))))
        .options(selectinload(Activity.user), selectinload(Activity.project), selectinload(Activity.task))
        .order_by(Activity.created_at.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))


def recent_tasks(db: Session, user_id: UUID, limit: int = RECENT_LIMIT) -> list[Task]:
    stmt = select(Task).where(Task.user_id == user_id).order_by(Task.created_at.desc()).limit(limit)
    return list(db.scalars(stmt))


def recent_projects(db: Session, user_id: UUID, limit: int = RECENT_LIMIT) -> list[Project]:
    stmt = (
        select(Project)
        .where(Project.id.in_(_member_project_ids(user_id)))
        .order_by(Project.created_at.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))


def build_dashboard(db: Session, user: User) -> dict:
    """All-or-nothing: any failing query propagates and no partial payload is returned."""
    return {
        "user": user,
        "stats": compute_stats(db, user.id),
        "recent_activities": recent_activities(db, user.id),
        "tasks": recent_tasks(db, user.id),
        "projects": recent_projects(db, user.id),
    }

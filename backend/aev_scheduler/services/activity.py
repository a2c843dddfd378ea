"""
Activity feed writer. Entries are added to the caller's session and committed with the
change they describe, so a rolled-back write leaves no feed entry behind.
"""
from uuid import UUID

from sqlalchemy.orm import Session

from aev_scheduler.models.activity import Activity


def record_activity(
    db: Session,
    content: str,
    user_id: UUID | None = None,
    project_id: UUID | None = None,
    task_id: UUID | None = None,
) -> Activity:
    activity = Activity(content=content, user_id=user_id, project_id=project_id, task_id=task_id)
    db.add(activity)
    return activity

"""
SQLAlchemy models. Import here so Alembic and app can use them.
"""
from aev_scheduler.models.user import User
from aev_scheduler.models.project import Project, project_members
from aev_scheduler.models.task import Task
from aev_scheduler.models.activity import Activity

__all__ = ["User", "Project", "project_members", "Task", "Activity"]

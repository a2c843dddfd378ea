"""
Dashboard aggregate payload.
"""
from datetime import datetime

from pydantic import field_validator

from aev_scheduler.schemas.common import ApiModel
from aev_scheduler.schemas.project import ProjectSummary, TaskSummary
from aev_scheduler.schemas.task import TaskResponse
from aev_scheduler.schemas.user import UserResponse, UserSummary


class DashboardStats(ApiModel):
    total_projects: int
    tasks_in_progress: int
    completed_tasks: int
    team_members: int


class ActivityResponse(ApiModel):
    id: str
    content: str
    created_at: datetime | None = None
    user: UserSummary | None = None
    project: ProjectSummary | None = None
    task: TaskSummary | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class DashboardResponse(ApiModel):
    user: UserResponse
    stats: DashboardStats
    recent_activities: list[ActivityResponse]
    tasks: list[TaskResponse]
    projects: list[ProjectSummary]

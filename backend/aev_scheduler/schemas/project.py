"""
Project request/response schemas.
"""
from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator

from aev_scheduler.schemas.common import ApiModel, RequestModel
from aev_scheduler.schemas.user import UserSummary

ProjectStatus = Literal["pending", "in_progress", "completed"]


class TaskSummary(ApiModel):
    id: str
    title: str
    status: str

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class ProjectResponse(ApiModel):
    id: str
    name: str
    description: str | None = None
    status: str
    deadline: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    users: list[UserSummary] = []
    tasks: list[TaskSummary] = []

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class ProjectSummary(ApiModel):
    id: str
    name: str
    status: str
    deadline: date | None = None
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class ProjectCreateRequest(RequestModel):
    """The projects page sends "title"; "name" is accepted too."""
    title: str | None = None
    name: str | None = None
    description: str | None = None
    deadline: date | None = None

    @model_validator(mode="after")
    def require_name(self):
        chosen = (self.title or self.name or "").strip()
        if not chosen:
            raise ValueError("title or name is required")
        self.name = chosen
        return self


class ProjectUpdateRequest(RequestModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: ProjectStatus | None = None
    deadline: date | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class ProjectMemberRequest(RequestModel):
    user_id: str

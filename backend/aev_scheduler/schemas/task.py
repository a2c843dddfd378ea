"""
Task request/response schemas.
"""
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from aev_scheduler.schemas.common import ApiModel, RequestModel

TaskStatus = Literal["TODO", "IN_PROGRESS", "COMPLETED"]


class TaskResponse(ApiModel):
    id: str
    title: str
    status: str
    user_id: str
    project_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", "user_id", "project_id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class TaskCreateRequest(RequestModel):
    title: str = Field(min_length=1)
    project_id: str
    user_id: str | None = None
    status: TaskStatus = "TODO"


class TaskUpdateRequest(RequestModel):
    title: str | None = Field(default=None, min_length=1)
    status: TaskStatus | None = None

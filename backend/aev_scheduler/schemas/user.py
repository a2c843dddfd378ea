"""
User schemas. Responses never carry the password hash.
"""
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator

from aev_scheduler.schemas.common import ApiModel, RequestModel, check_email_format


class UserSummary(ApiModel):
    id: str
    name: str
    email: str
    role: str

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class UserResponse(UserSummary):
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreateRequest(RequestModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=1, max_length=72)
    role: Literal["student", "staff"] = "student"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return check_email_format(v)


class BulkUserRow(RequestModel):
    """One imported row (CSV columns firstName, lastName, email). role is accepted and ignored."""
    first_name: str = ""
    last_name: str = ""
    email: str
    password: str | None = Field(default=None, max_length=72)
    role: str | None = None

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return check_email_format(v)

    @model_validator(mode="after")
    def require_name(self):
        if not self.full_name:
            raise ValueError("firstName or lastName is required")
        return self

    @property
    def full_name(self) -> str:
        return f"{self.first_name.strip()} {self.last_name.strip()}".strip()


class BulkUserRequest(RequestModel):
    users: list[BulkUserRow] = Field(min_length=1)


class BulkUserResponse(ApiModel):
    message: str
    count: int

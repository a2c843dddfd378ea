"""
Auth request/response schemas.
"""
from typing import Literal

from pydantic import Field, field_validator

from aev_scheduler.schemas.common import ApiModel, RequestModel, check_email_format
from aev_scheduler.schemas.user import UserResponse

MIN_PASSWORD_LENGTH = 8


def _password_within_bcrypt_limit(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes (bcrypt limit)")
    return v


class RegisterRequest(RequestModel):
    """Staff self-registration. Length of the password is checked by the route after the duplicate check."""
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=1)
    role: Literal["staff"]

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

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _password_within_bcrypt_limit(v)


class RegisterResponse(ApiModel):
    message: str
    user_id: str


class SecurityCodeRequest(RequestModel):
    code: str


class SecurityCodeResponse(ApiModel):
    valid: bool


class LoginRequest(RequestModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _password_within_bcrypt_limit(v)


class TokenResponse(ApiModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class SessionResponse(ApiModel):
    user: UserResponse

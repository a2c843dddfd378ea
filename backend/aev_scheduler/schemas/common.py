"""
Base schemas. JSON keys are camelCase on the wire (userId, createdAt) and snake_case in Python.
Request bodies reject unknown fields.
"""
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def check_email_format(v: str) -> str:
    """Reject malformed addresses but return the input as sent; login matches it byte for byte."""
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"invalid email address: {e}")
    return v


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class MessageResponse(ApiModel):
    message: str

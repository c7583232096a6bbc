"""Error response bodies returned by the exception handlers."""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    status: int = Field(description="HTTP status code")
    message: str
    timestamp: datetime


class ValidationErrorResponse(ErrorResponse):
    """Validation failure with one message per offending field."""

    errors: dict[str, str] = Field(default_factory=dict)

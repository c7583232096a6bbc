"""Pydantic request/response schemas."""

from app.schemas.auth import Identity, LoginRequest, LoginResponse
from app.schemas.errors import ErrorResponse, ValidationErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.transaction import (
    Category,
    TransactionFields,
    TransactionResponse,
    TransactionType,
)

__all__ = [
    "Category",
    "ErrorResponse",
    "HealthResponse",
    "Identity",
    "LoginRequest",
    "LoginResponse",
    "TransactionFields",
    "TransactionResponse",
    "TransactionType",
    "ValidationErrorResponse",
]

"""JWT login, liveness probe, and the bearer-token identity dependency."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import MissingToken, TokenError
from app.core.security import TokenService
from app.schemas.auth import Identity, LoginResponse
from app.schemas.errors import ErrorResponse, ValidationErrorResponse
from app.services.auth import authenticate
from app.services.validation import parse_login_payload

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

HEALTH_MESSAGE = "Service is running"


def get_token_service(request: Request) -> TokenService:
    """Dependency: the TokenService created once at startup (see app.main.create_app)."""
    return request.app.state.token_service


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.

    No database lookup is made. Raises MissingToken or a TokenError subclass,
    which the boundary maps to 401 before any ledger code runs.
    """
    if credentials is None:
        raise MissingToken()
    try:
        return tokens.validate(credentials.credentials)
    except TokenError as e:
        logger.info("Rejected bearer token: reason=%s detail=%s", e.reason, e.detail)
        raise


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Missing or invalid field"},
        401: {"model": ErrorResponse, "description": "Invalid username or password"},
    },
)
def login(
    body: Annotated[Any, Body(examples=[{"username": "admin", "password": "admin123"}])],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT valid for 24 hours.
    Include the token in the Authorization header as: Bearer <token>
    """
    credentials = parse_login_payload(body)
    return authenticate(db, tokens, credentials.username, credentials.password)


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    """Unauthenticated liveness probe."""
    return HEALTH_MESSAGE

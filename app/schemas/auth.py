"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login. Built only after validate_login_payload passes."""

    username: str = Field(..., description="Username", examples=["admin"])
    password: str = Field(..., description="Password", examples=["admin123"])


class LoginResponse(BaseModel):
    """JWT returned after successful login, with the authenticated username and roles."""

    token: str = Field(..., description="JWT for the Authorization: Bearer header")
    username: str = Field(..., description="Authenticated username")
    roles: list[str] = Field(default_factory=list, description="Roles assigned to the user")


class Identity(BaseModel):
    """Resolved caller identity taken from a validated token (no password hash)."""

    model_config = ConfigDict(frozen=True)

    username: str
    roles: frozenset[str] = frozenset()

"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.transaction import Transaction
from app.models.user import Role, User, UserRole

__all__ = ["Base", "Role", "Transaction", "User", "UserRole"]

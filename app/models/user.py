"""ORM models for application users and their roles."""

from enum import Enum

from sqlalchemy import Column, ForeignKey, Integer, String

from app.models.base import Base


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """
    User account for JWT authentication.

    Roles live in user_roles and are loaded with an explicit query
    (see app.services.credentials), not through a relationship.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)


class UserRole(Base):
    """One granted role per row; (user_id, role) is the primary key."""

    __tablename__ = "user_roles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role = Column(String(32), primary_key=True)

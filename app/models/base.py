"""SQLAlchemy declarative Base shared by the user and transaction models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models; Base.metadata drives Alembic autogenerate."""

"""Shared test helpers: in-memory SQLite sessions and user provisioning."""

from datetime import date
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Role
from app.schemas.auth import Identity
from app.schemas.transaction import Category, TransactionFields, TransactionType
from app.services.credentials import create_user

# Minimum bcrypt cost keeps hashing fast in tests.
TEST_BCRYPT_ROUNDS = 4


def make_session_factory() -> tuple[Engine, sessionmaker]:
    """Create a fresh in-memory database with all tables; one connection shared by all sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    username: str,
    password: str = "secret123",
    roles: tuple[Role, ...] = (Role.USER,),
) -> int:
    user = create_user(db, username, password, roles=roles, rounds=TEST_BCRYPT_ROUNDS)
    return user.id


def identity(username: str, *roles: str) -> Identity:
    return Identity(username=username, roles=frozenset(roles or ("USER",)))


def fields(
    amount: str = "10.00",
    day: date = date(2025, 1, 15),
    tx_type: TransactionType = TransactionType.EXPENSE,
    category: Category = Category.GROCERIES,
    description: str | None = None,
) -> TransactionFields:
    """Build validated TransactionFields for tests."""
    return TransactionFields(
        type=tx_type,
        category=category,
        amount=Decimal(amount),
        date=day,
        description=description,
    )

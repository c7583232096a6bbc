"""Credential store: user lookup by username and provisioning of new users."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.user import Role, User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredCredential:
    """A user row plus its granted roles, as needed to verify a login."""

    id: int
    username: str
    password_hash: str = field(repr=False)
    roles: frozenset[str] = frozenset()


class UserExistsError(Exception):
    """Raised when provisioning a username that is already taken."""


def load_roles(db: Session, user_id: int) -> frozenset[str]:
    rows = db.query(UserRole.role).filter(UserRole.user_id == user_id).all()
    return frozenset(role for (role,) in rows)


def find_credential(db: Session, username: str) -> StoredCredential | None:
    """Exact (case-sensitive) username lookup. Returns None when no such user exists."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        return None
    return StoredCredential(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        roles=load_roles(db, user.id),
    )


def find_user_id(db: Session, username: str) -> int | None:
    row = db.query(User.id).filter(User.username == username).first()
    return row[0] if row is not None else None


def create_user(
    db: Session,
    username: str,
    password: str,
    roles: Iterable[Role] = (Role.USER,),
    rounds: int | None = None,
) -> User:
    """Insert a user with hashed password and roles, and commit. Raises UserExistsError."""
    granted = sorted({Role(r).value for r in roles})
    if find_user_id(db, username) is not None:
        raise UserExistsError(f"User '{username}' already exists.")
    user = User(username=username, password_hash=hash_password(password, rounds=rounds))
    db.add(user)
    db.flush()
    for role in granted:
        db.add(UserRole(user_id=user.id, role=role))
    db.commit()
    logger.info("Provisioned user '%s' with roles %s", username, granted)
    return user

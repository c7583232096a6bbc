"""Seed the 'admin' account in dev (password from SEED_ADMIN_PASSWORD, default admin123).

Skipped when APP_ENV is prod; create production users with app.scripts.create_user.

Revision ID: 20251019200000
Revises: 20251019100000
Create Date: 2025-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.core.config import settings
from app.core.security import hash_password

revision: str = "20251019200000"
down_revision: Union[str, None] = "20251019100000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ADMIN_USERNAME = "admin"
DEFAULT_DEV_PASSWORD = "admin123"

users = sa.table(
    "users",
    sa.column("id", sa.Integer),
    sa.column("username", sa.String),
    sa.column("password_hash", sa.String),
)
user_roles = sa.table(
    "user_roles",
    sa.column("user_id", sa.Integer),
    sa.column("role", sa.String),
)


def upgrade() -> None:
    if settings.APP_ENV == "prod":
        return
    password = (
        settings.SEED_ADMIN_PASSWORD.get_secret_value()
        if settings.SEED_ADMIN_PASSWORD is not None
        else DEFAULT_DEV_PASSWORD
    )
    conn = op.get_bind()
    existing = conn.execute(
        sa.select(users.c.id).where(users.c.username == ADMIN_USERNAME)
    ).first()
    if existing is not None:
        return
    conn.execute(
        users.insert().values(
            username=ADMIN_USERNAME,
            password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        )
    )
    user_id = conn.execute(
        sa.select(users.c.id).where(users.c.username == ADMIN_USERNAME)
    ).scalar_one()
    op.bulk_insert(
        user_roles,
        [{"user_id": user_id, "role": "ADMIN"}, {"user_id": user_id, "role": "USER"}],
    )


def downgrade() -> None:
    conn = op.get_bind()
    conn.execute(users.delete().where(users.c.username == ADMIN_USERNAME))

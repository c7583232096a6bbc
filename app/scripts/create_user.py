"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--role ADMIN] [--role USER]
Example:
  python -m app.scripts.create_user admin your-secure-password --role ADMIN --role USER
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.models.user import Role
from app.services.credentials import UserExistsError, create_user
from app.services.validation import validate_login_payload

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a SmartLedger user (no registration UI).")
    parser.add_argument("username", help="Username (1-255 chars, case-sensitive)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "--role",
        dest="roles",
        action="append",
        choices=[r.value for r in Role],
        help="Role to grant; repeat for several. Defaults to USER.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    errors = validate_login_payload({"username": args.username, "password": args.password})
    if errors:
        for field, message in errors.items():
            print(f"{field}: {message}", file=sys.stderr)
        return 1

    roles = [Role(r) for r in (args.roles or [Role.USER.value])]
    db = SessionLocal()
    try:
        create_user(
            db,
            args.username,
            args.password,
            roles=roles,
            rounds=get_settings().BCRYPT_ROUNDS,
        )
    except UserExistsError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{args.username}' with roles {sorted(r.value for r in roles)}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

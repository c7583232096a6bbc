"""Password hashing and JWT issuance/validation for authentication."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import get_settings
from app.core.errors import InvalidSignature, MalformedToken, TokenExpired
from app.schemas.auth import Identity

if TYPE_CHECKING:
    from app.core.config import Settings

# Length limits for username and password validation.
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    rounds defaults to the configured BCRYPT_ROUNDS.
    """
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("not-a-real-password", rounds=rounds)


def burn_password_check(plain_password: str) -> None:
    """
    Spend one bcrypt verification so a missing user costs as much as a wrong password.

    The dummy hash uses the same cost as stored user hashes (BCRYPT_ROUNDS).
    """
    verify_password(plain_password, _dummy_hash(get_settings().BCRYPT_ROUNDS))


@dataclass(frozen=True)
class TokenConfig:
    """Signing parameters, fixed at startup and injected into TokenService."""

    secret: str = field(repr=False)
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenConfig":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        )


class TokenService:
    """
    Issue and validate signed bearer tokens.

    Tokens carry sub (username), roles, iat and exp. Validation needs only the
    signing secret; no store lookup is made. Instances hold no mutable state and
    are shared across requests.
    """

    def __init__(
        self,
        config: TokenConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def ttl(self) -> timedelta:
        return self._config.ttl

    def issue(self, username: str, roles: Iterable[str]) -> str:
        """Create a token for username and roles, valid for the configured ttl from now."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": username,
            "roles": sorted(set(roles)),
            "iat": now,
            "exp": now + self._config.ttl,
        }
        return jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm)

    def validate(self, token: str) -> Identity:
        """
        Verify signature and expiry; return the embedded identity.

        Expiry is checked against the service clock, the same one issue() uses.
        Raises InvalidSignature, TokenExpired or MalformedToken.
        """
        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise InvalidSignature(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise MalformedToken(str(e)) from e

        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise MalformedToken("exp claim must be a numeric timestamp")
        if exp <= self._clock().timestamp():
            raise TokenExpired("Signature has expired")

        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise MalformedToken("sub claim must be a non-empty string")
        roles = payload.get("roles", [])
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise MalformedToken("roles claim must be a list of strings")
        return Identity(username=sub, roles=frozenset(roles))

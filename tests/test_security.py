"""Unit tests for app.core.security: bcrypt helpers and the JWT TokenService."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from app.core.config import Settings
from app.core.errors import InvalidSignature, MalformedToken, TokenError, TokenExpired
from app.core.security import (
    TokenConfig,
    TokenService,
    _dummy_hash,
    burn_password_check,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret"


def _service(secret: str = SECRET, ttl: timedelta = timedelta(hours=24), clock=None) -> TokenService:
    return TokenService(TokenConfig(secret=secret, ttl=ttl), clock=clock)


class TestPasswordHashing(unittest.TestCase):
    """hash_password / verify_password use salted bcrypt."""

    def test_verify_accepts_matching_password(self) -> None:
        hashed = hash_password("admin123", rounds=4)
        self.assertTrue(verify_password("admin123", hashed))

    def test_verify_rejects_wrong_password(self) -> None:
        hashed = hash_password("admin123", rounds=4)
        self.assertFalse(verify_password("admin124", hashed))

    def test_hash_is_salted(self) -> None:
        self.assertNotEqual(hash_password("admin123", rounds=4), hash_password("admin123", rounds=4))

    def test_hash_never_contains_plaintext(self) -> None:
        self.assertNotIn("admin123", hash_password("admin123", rounds=4))

    def test_malformed_stored_hash_is_false(self) -> None:
        self.assertFalse(verify_password("admin123", "not-a-bcrypt-hash"))


class TestConfiguredCost(unittest.TestCase):
    """New hashes and the unknown-user dummy hash share the configured bcrypt cost."""

    def setUp(self) -> None:
        patcher = patch("app.core.security.get_settings")
        self.get_settings = patcher.start()
        self.get_settings.return_value.BCRYPT_ROUNDS = 5
        self.addCleanup(patcher.stop)

    def test_hash_defaults_to_configured_rounds(self) -> None:
        self.assertTrue(hash_password("admin123").startswith("$2b$05$"))

    def test_dummy_hash_cost_matches_rounds(self) -> None:
        self.assertTrue(_dummy_hash(4).startswith("$2b$04$"))
        self.assertTrue(_dummy_hash(5).startswith("$2b$05$"))

    def test_burn_check_uses_configured_rounds(self) -> None:
        stored = hash_password("admin123")
        with patch("app.core.security.verify_password") as verify:
            burn_password_check("admin123")
        plain, dummy = verify.call_args.args
        self.assertEqual(plain, "admin123")
        self.assertEqual(dummy[:7], stored[:7])
        self.assertEqual(dummy[:7], "$2b$05$")


class TestTokenRoundTrip(unittest.TestCase):
    """Issue then validate returns the same subject and roles."""

    def test_round_trip_preserves_subject_and_roles(self) -> None:
        service = _service()
        cases = [
            ("admin", {"ADMIN", "USER"}),
            ("bob", {"USER"}),
            ("Case.Sensitive", set()),
        ]
        for username, roles in cases:
            with self.subTest(username=username):
                identity = service.validate(service.issue(username, roles))
                self.assertEqual(identity.username, username)
                self.assertEqual(identity.roles, frozenset(roles))

    def test_token_has_three_dot_delimited_parts(self) -> None:
        token = _service().issue("admin", ["ADMIN"])
        self.assertEqual(len(token.split(".")), 3)
        self.assertTrue(token.startswith("eyJ"))

    def test_expiry_is_ttl_after_issued_at(self) -> None:
        fixed = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
        token = _service(clock=lambda: fixed).issue("admin", [])
        payload = jwt.decode(token, options={"verify_signature": False})
        self.assertEqual(payload["exp"] - payload["iat"], 24 * 3600)
        self.assertEqual(payload["iat"], int(fixed.timestamp()))

    def test_issuances_at_different_times_differ(self) -> None:
        now = datetime.now(UTC)
        first = _service(clock=lambda: now).issue("admin", [])
        second = _service(clock=lambda: now + timedelta(seconds=1)).issue("admin", [])
        self.assertNotEqual(first, second)


class TestTokenExpiry(unittest.TestCase):
    """Tokens past their absolute expiry always fail with TokenExpired."""

    def test_expired_token_raises_expired(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=25)
        token = _service(clock=lambda: issued).issue("admin", ["ADMIN"])
        with self.assertRaises(TokenExpired):
            _service().validate(token)

    def test_token_at_expiry_instant_is_expired(self) -> None:
        ttl = timedelta(minutes=5)
        issued = datetime.now(UTC) - ttl
        token = _service(ttl=ttl, clock=lambda: issued).issue("admin", [])
        with self.assertRaises(TokenExpired):
            _service(ttl=ttl).validate(token)

    def test_token_just_before_expiry_is_valid(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=23, minutes=59)
        token = _service(clock=lambda: issued).issue("admin", [])
        self.assertEqual(_service().validate(token).username, "admin")

    def test_validation_uses_injected_clock(self) -> None:
        issued = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
        ttl = timedelta(hours=24)
        token = _service(clock=lambda: issued).issue("admin", ["ADMIN"])
        before = _service(clock=lambda: issued + ttl - timedelta(seconds=1))
        self.assertEqual(before.validate(token).roles, frozenset({"ADMIN"}))
        for offset in (ttl, ttl + timedelta(days=1)):
            with self.subTest(offset=offset):
                with self.assertRaises(TokenExpired):
                    _service(clock=lambda: issued + offset).validate(token)

    def test_non_numeric_exp_is_malformed(self) -> None:
        token = jwt.encode(
            {"sub": "admin", "iat": 0, "exp": "tomorrow"}, SECRET, algorithm="HS256"
        )
        with self.assertRaises(MalformedToken):
            _service().validate(token)


class TestTokenRejection(unittest.TestCase):
    """Tampered, foreign and malformed tokens are rejected with distinct reasons."""

    def test_foreign_secret_is_invalid_signature(self) -> None:
        token = _service(secret="someone-else").issue("admin", ["ADMIN"])
        with self.assertRaises(InvalidSignature):
            _service().validate(token)

    def test_swapped_payload_is_invalid_signature(self) -> None:
        service = _service()
        header, _, signature = service.issue("bob", ["USER"]).split(".")
        _, admin_payload, _ = service.issue("admin", ["ADMIN"]).split(".")
        with self.assertRaises(InvalidSignature):
            service.validate(f"{header}.{admin_payload}.{signature}")

    def test_garbage_is_malformed(self) -> None:
        with self.assertRaises(MalformedToken):
            _service().validate("not-a-jwt")

    def test_missing_exp_claim_is_malformed(self) -> None:
        token = jwt.encode({"sub": "admin", "iat": datetime.now(UTC)}, SECRET, algorithm="HS256")
        with self.assertRaises(MalformedToken):
            _service().validate(token)

    def test_non_list_roles_is_malformed(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "admin", "roles": "ADMIN", "iat": now, "exp": now + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(MalformedToken):
            _service().validate(token)

    def test_all_failures_share_token_error_base(self) -> None:
        for exc_type in (InvalidSignature, MalformedToken, TokenExpired):
            with self.subTest(exc_type=exc_type.__name__):
                self.assertTrue(issubclass(exc_type, TokenError))
                self.assertEqual(exc_type().message, "Invalid or expired token")


class TestTokenConfig(unittest.TestCase):
    """TokenConfig is built once from settings and hides the secret."""

    def test_from_settings_defaults_to_24_hours(self) -> None:
        config = TokenConfig.from_settings(
            Settings(JWT_SECRET="from-settings", JWT_EXPIRE_MINUTES=1440)
        )
        self.assertEqual(config.ttl, timedelta(hours=24))
        self.assertEqual(config.secret, "from-settings")
        self.assertEqual(config.algorithm, "HS256")

    def test_repr_hides_secret(self) -> None:
        self.assertNotIn(SECRET, repr(TokenConfig(secret=SECRET)))

    def test_config_is_immutable(self) -> None:
        config = TokenConfig(secret=SECRET)
        with self.assertRaises(AttributeError):
            config.secret = "other"  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()

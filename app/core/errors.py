"""Domain error taxonomy. Each error carries a kind that the API boundary maps to a status code."""

from enum import Enum


class ErrorKind(str, Enum):
    """Outcome classes surfaced to clients."""

    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class LedgerError(Exception):
    """Base class for expected failures raised by services and dependencies."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailed(LedgerError):
    """Request input rejected before any business logic ran."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: dict[str, str], message: str = "Validation failed") -> None:
        self.errors = errors
        super().__init__(message)


class Unauthenticated(LedgerError):
    """The caller could not be authenticated."""

    kind = ErrorKind.UNAUTHENTICATED


class AuthenticationFailure(Unauthenticated):
    """Bad credentials at login. Unknown user and wrong password are indistinguishable."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class MissingToken(Unauthenticated):
    def __init__(self) -> None:
        super().__init__("Not authenticated")


class TokenError(Unauthenticated):
    """Bearer token rejected. Subclasses name the reason for logs and tests."""

    reason = "invalid"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid or expired token")


class InvalidSignature(TokenError):
    reason = "invalid_signature"


class TokenExpired(TokenError):
    reason = "expired"


class MalformedToken(TokenError):
    reason = "malformed"


class NotFound(LedgerError):
    """Resource is missing or owned by someone else; the two cases are not distinguished."""

    kind = ErrorKind.NOT_FOUND


class InternalFault(LedgerError):
    kind = ErrorKind.INTERNAL

"""
Explicit request validation.

Each validate_* function returns a map of field name to error message (empty when the
payload is valid). parse_* functions run the same checks and either return the typed
value or raise ValidationFailed, so handlers never see unchecked input.
"""

from collections.abc import Callable
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from app.core.errors import ValidationFailed
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MAX_LEN
from app.schemas.auth import LoginRequest
from app.schemas.transaction import (
    CATEGORIES_BY_TYPE,
    Category,
    TransactionFields,
    TransactionType,
)

MIN_AMOUNT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")
DESCRIPTION_MAX_LEN = 1000

BODY_FIELD = "body"
BODY_NOT_OBJECT = "Request body must be a JSON object"


def _required_str(data: dict[str, Any], name: str, label: str) -> str:
    value = data.get(name)
    if value is None:
        raise ValueError(f"{label} is required")
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    if not value.strip():
        raise ValueError(f"{label} is required")
    return value


def _parse_username(data: dict[str, Any]) -> str:
    username = _required_str(data, "username", "Username")
    if len(username) > USERNAME_MAX_LEN:
        raise ValueError(f"Username must be at most {USERNAME_MAX_LEN} characters")
    return username


def _parse_password(data: dict[str, Any]) -> str:
    password = _required_str(data, "password", "Password")
    if len(password) < PASSWORD_MIN_LEN:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
    if len(password) > PASSWORD_MAX_LEN:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_LEN} characters")
    return password


def _parse_type(data: dict[str, Any]) -> TransactionType:
    raw = _required_str(data, "type", "Type")
    try:
        return TransactionType(raw)
    except ValueError:
        allowed = ", ".join(t.value for t in TransactionType)
        raise ValueError(f"Type must be one of: {allowed}") from None


def _parse_category(data: dict[str, Any]) -> Category:
    raw = _required_str(data, "category", "Category")
    try:
        return Category(raw)
    except ValueError:
        raise ValueError(f"Unknown category {raw!r}") from None


def parse_amount(value: Any) -> Decimal:
    """Parse a currency amount: positive, at most two decimal places, quantized to cents."""
    if value is None:
        raise ValueError("Amount is required")
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError("Amount must be a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("Amount must be a number") from None
    if not amount.is_finite():
        raise ValueError("Amount must be a number")
    if amount <= 0:
        raise ValueError("Amount must be greater than 0")
    if amount > MAX_AMOUNT:
        raise ValueError(f"Amount must not exceed {MAX_AMOUNT}")
    if amount != amount.quantize(MIN_AMOUNT):
        raise ValueError("Amount must have at most 2 decimal places")
    return amount.quantize(MIN_AMOUNT)


def _parse_amount(data: dict[str, Any]) -> Decimal:
    return parse_amount(data.get("amount"))


def _parse_date(data: dict[str, Any]) -> date:
    raw = _required_str(data, "date", "Date")
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise ValueError("Date must be an ISO date (YYYY-MM-DD)") from None


def _parse_description(data: dict[str, Any]) -> str | None:
    value = data.get("description")
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Description must be a string")
    if len(value) > DESCRIPTION_MAX_LEN:
        raise ValueError(f"Description must be at most {DESCRIPTION_MAX_LEN} characters")
    return value or None


LOGIN_FIELDS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "username": _parse_username,
    "password": _parse_password,
}

TRANSACTION_FIELDS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "type": _parse_type,
    "category": _parse_category,
    "amount": _parse_amount,
    "date": _parse_date,
    "description": _parse_description,
}


def _run(
    data: Any,
    parsers: dict[str, Callable[[dict[str, Any]], Any]],
) -> tuple[dict[str, Any], dict[str, str]]:
    """Apply every field parser; collect parsed values and per-field errors."""
    if not isinstance(data, dict):
        return {}, {BODY_FIELD: BODY_NOT_OBJECT}
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    for name, parser in parsers.items():
        try:
            values[name] = parser(data)
        except ValueError as e:
            errors[name] = str(e)
    return values, errors


def _check_transaction(data: Any) -> tuple[dict[str, Any], dict[str, str]]:
    values, errors = _run(data, TRANSACTION_FIELDS)
    tx_type = values.get("type")
    category = values.get("category")
    if tx_type is not None and category is not None:
        if category not in CATEGORIES_BY_TYPE[tx_type]:
            errors["category"] = (
                f"Category {category.value} is not valid for {tx_type.value} transactions"
            )
    return values, errors


def validate_login_payload(data: Any) -> dict[str, str]:
    """Return field errors for a login body; empty when valid."""
    return _run(data, LOGIN_FIELDS)[1]


def validate_transaction_payload(data: Any) -> dict[str, str]:
    """Return field errors for a create/update transaction body; empty when valid."""
    return _check_transaction(data)[1]


def parse_login_payload(data: Any) -> LoginRequest:
    values, errors = _run(data, LOGIN_FIELDS)
    if errors:
        raise ValidationFailed(errors)
    return LoginRequest(**values)


def parse_transaction_payload(data: Any) -> TransactionFields:
    values, errors = _check_transaction(data)
    if errors:
        raise ValidationFailed(errors)
    return TransactionFields(**values)

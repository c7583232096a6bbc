"""Pydantic schemas and enums for ledger transactions."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Category(str, Enum):
    # Income categories
    SALARY = "SALARY"
    FREELANCE = "FREELANCE"
    INVESTMENT = "INVESTMENT"
    GIFT = "GIFT"
    OTHER_INCOME = "OTHER_INCOME"

    # Expense categories
    RENT = "RENT"
    UTILITIES = "UTILITIES"
    GROCERIES = "GROCERIES"
    TRANSPORT = "TRANSPORT"
    HEALTHCARE = "HEALTHCARE"
    ENTERTAINMENT = "ENTERTAINMENT"
    EDUCATION = "EDUCATION"
    SHOPPING = "SHOPPING"
    RESTAURANT = "RESTAURANT"
    TRAVEL = "TRAVEL"
    INSURANCE = "INSURANCE"
    OTHER_EXPENSE = "OTHER_EXPENSE"


INCOME_CATEGORIES: frozenset[Category] = frozenset(
    {
        Category.SALARY,
        Category.FREELANCE,
        Category.INVESTMENT,
        Category.GIFT,
        Category.OTHER_INCOME,
    }
)
EXPENSE_CATEGORIES: frozenset[Category] = frozenset(Category) - INCOME_CATEGORIES

CATEGORIES_BY_TYPE: dict[TransactionType, frozenset[Category]] = {
    TransactionType.INCOME: INCOME_CATEGORIES,
    TransactionType.EXPENSE: EXPENSE_CATEGORIES,
}


class TransactionFields(BaseModel):
    """Validated, client-editable fields of a transaction (never includes the owner)."""

    type: TransactionType
    category: Category
    amount: Decimal
    date: date
    description: str | None = None


class TransactionResponse(BaseModel):
    """Transaction as returned by the API (camelCase keys)."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    user_id: int = Field(description="Owning user ID")
    type: TransactionType
    category: Category
    amount: Decimal = Field(description="Amount with two decimal places", examples=["150.50"])
    date: date
    description: str | None = None
    created_at: datetime
    updated_at: datetime

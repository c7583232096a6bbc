"""Transaction endpoints. Every route requires a bearer token and is scoped to its owner."""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.auth import get_current_identity
from app.core.database import get_db
from app.schemas.auth import Identity
from app.schemas.errors import ErrorResponse, ValidationErrorResponse
from app.schemas.transaction import TransactionResponse, TransactionType
from app.services import ledger
from app.services.validation import parse_transaction_payload

router = APIRouter(
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
)

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Transaction not found"}}
VALIDATION_RESPONSE = {400: {"model": ValidationErrorResponse, "description": "Invalid body"}}

TRANSACTION_EXAMPLE = {
    "type": "EXPENSE",
    "category": "GROCERIES",
    "amount": 150.50,
    "date": "2025-10-30",
    "description": "Weekly grocery shopping",
}

DbSession = Annotated[Session, Depends(get_db)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
TransactionBody = Annotated[Any, Body(examples=[TRANSACTION_EXAMPLE])]


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=VALIDATION_RESPONSE,
)
def create_transaction(
    body: TransactionBody,
    db: DbSession,
    identity: CurrentIdentity,
) -> TransactionResponse:
    """Create an income or expense transaction owned by the authenticated user."""
    fields = parse_transaction_payload(body)
    return ledger.create_transaction(db, identity, fields)


@router.get("", response_model=list[TransactionResponse])
def list_transactions(db: DbSession, identity: CurrentIdentity) -> list[TransactionResponse]:
    """All of the caller's transactions, most recent date first."""
    return ledger.list_transactions(db, identity)


@router.get("/type/{tx_type}", response_model=list[TransactionResponse])
def list_transactions_by_type(
    tx_type: TransactionType,
    db: DbSession,
    identity: CurrentIdentity,
) -> list[TransactionResponse]:
    return ledger.list_transactions_by_type(db, identity, tx_type)


# Declared before /{transaction_id} so the literal path wins.
@router.get("/date-range", response_model=list[TransactionResponse])
def list_transactions_by_date_range(
    db: DbSession,
    identity: CurrentIdentity,
    start_date: Annotated[date, Query(alias="startDate")],
    end_date: Annotated[date, Query(alias="endDate")],
) -> list[TransactionResponse]:
    """Transactions dated between startDate and endDate inclusive (ISO dates)."""
    return ledger.list_transactions_by_date_range(db, identity, start_date, end_date)


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    responses=NOT_FOUND_RESPONSE,
)
def get_transaction(
    transaction_id: int,
    db: DbSession,
    identity: CurrentIdentity,
) -> TransactionResponse:
    return ledger.get_transaction(db, identity, transaction_id)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE},
)
def update_transaction(
    transaction_id: int,
    body: TransactionBody,
    db: DbSession,
    identity: CurrentIdentity,
) -> TransactionResponse:
    """Replace type, category, amount, date and description of an owned transaction."""
    fields = parse_transaction_payload(body)
    return ledger.update_transaction(db, identity, transaction_id, fields)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSE,
)
def delete_transaction(
    transaction_id: int,
    db: DbSession,
    identity: CurrentIdentity,
) -> Response:
    ledger.delete_transaction(db, identity, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

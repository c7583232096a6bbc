"""
Ledger ownership guard: every transaction query is scoped to the caller's user id.

Single-record lookups always filter on (id, user_id) together, so a record owned by
someone else is indistinguishable from one that does not exist; both raise NotFound.
Each public function is one unit of work and commits at most once.
"""

import logging
from datetime import UTC, date, datetime

from sqlalchemy.orm import Query, Session

from app.core.errors import NotFound
from app.models import Transaction
from app.schemas.auth import Identity
from app.schemas.transaction import TransactionFields, TransactionResponse, TransactionType
from app.services.credentials import find_user_id

logger = logging.getLogger(__name__)

TRANSACTION_NOT_FOUND = "Transaction not found"
USER_NOT_FOUND = "User not found"


def _owner_id(db: Session, identity: Identity) -> int:
    """Resolve the identity's username to its user id; a token for a removed user is NotFound."""
    user_id = find_user_id(db, identity.username)
    if user_id is None:
        logger.warning("No backing user for authenticated identity %s", identity.username)
        raise NotFound(USER_NOT_FOUND)
    return user_id


def _owned_query(db: Session, owner_id: int) -> Query:
    return db.query(Transaction).filter(Transaction.user_id == owner_id)


def _ordered(query: Query) -> list[Transaction]:
    # Most recent date first; insertion order (id) breaks ties.
    return query.order_by(Transaction.date.desc(), Transaction.id.asc()).all()


def _get_owned(
    db: Session,
    owner_id: int,
    transaction_id: int,
    for_update: bool = False,
) -> Transaction:
    query = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.user_id == owner_id,
    )
    if for_update:
        query = query.with_for_update()
    row = query.first()
    if row is None:
        raise NotFound(TRANSACTION_NOT_FOUND)
    return row


def _to_response(row: Transaction) -> TransactionResponse:
    return TransactionResponse.model_validate(row)


def _apply_fields(row: Transaction, fields: TransactionFields) -> None:
    row.type = fields.type.value
    row.category = fields.category.value
    row.amount = fields.amount
    row.date = fields.date
    row.description = fields.description


def create_transaction(
    db: Session, identity: Identity, fields: TransactionFields
) -> TransactionResponse:
    """Persist a new transaction owned by identity. The owner never comes from client input."""
    owner_id = _owner_id(db, identity)
    now = datetime.now(UTC)
    row = Transaction(user_id=owner_id, created_at=now, updated_at=now)
    _apply_fields(row, fields)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created transaction id=%s for user_id=%s", row.id, owner_id)
    return _to_response(row)


def list_transactions(db: Session, identity: Identity) -> list[TransactionResponse]:
    owner_id = _owner_id(db, identity)
    return [_to_response(r) for r in _ordered(_owned_query(db, owner_id))]


def list_transactions_by_type(
    db: Session, identity: Identity, tx_type: TransactionType
) -> list[TransactionResponse]:
    owner_id = _owner_id(db, identity)
    query = _owned_query(db, owner_id).filter(Transaction.type == tx_type.value)
    return [_to_response(r) for r in _ordered(query)]


def list_transactions_by_date_range(
    db: Session, identity: Identity, start: date, end: date
) -> list[TransactionResponse]:
    """Transactions dated within [start, end], both inclusive. start > end yields []."""
    owner_id = _owner_id(db, identity)
    if start > end:
        return []
    query = _owned_query(db, owner_id).filter(
        Transaction.date >= start,
        Transaction.date <= end,
    )
    return [_to_response(r) for r in _ordered(query)]


def get_transaction(db: Session, identity: Identity, transaction_id: int) -> TransactionResponse:
    owner_id = _owner_id(db, identity)
    return _to_response(_get_owned(db, owner_id, transaction_id))


def update_transaction(
    db: Session,
    identity: Identity,
    transaction_id: int,
    fields: TransactionFields,
) -> TransactionResponse:
    """
    Overwrite the editable fields of an owned transaction and bump updated_at.

    The row is locked for the ownership check and the write, so concurrent updates
    to the same id serialize (last writer wins). user_id and created_at never change.
    """
    owner_id = _owner_id(db, identity)
    row = _get_owned(db, owner_id, transaction_id, for_update=True)
    _apply_fields(row, fields)
    row.updated_at = datetime.now(UTC)
    db.commit()
    db.refresh(row)
    logger.info("Updated transaction id=%s for user_id=%s", row.id, owner_id)
    return _to_response(row)


def delete_transaction(db: Session, identity: Identity, transaction_id: int) -> None:
    """Delete an owned transaction. Deleting a missing, foreign or already-deleted id is NotFound."""
    owner_id = _owner_id(db, identity)
    row = _get_owned(db, owner_id, transaction_id, for_update=True)
    db.delete(row)
    db.commit()
    logger.info("Deleted transaction id=%s for user_id=%s", transaction_id, owner_id)

"""Transaction Routes - manual income, expense and transfer entries.

Invariants:
    - Posting and deleting move account balances in the same commit
    - Profit distribution transactions answer 409 on delete
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.domain_types import TransactionType
from shopledger.infrastructure.database import get_db
from shopledger.models.account import Account
from shopledger.models.transaction import Transaction
from shopledger.schemas.transaction import TransactionCreate, TransactionResponse
from shopledger.services.ledger import LedgerService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


async def _account_names(db: AsyncSession) -> dict:
    result = await db.execute(select(Account.id, Account.account_name))
    return {row.id: row.account_name for row in result.all()}


def _with_names(txn: Transaction, names: dict) -> TransactionResponse:
    resp = TransactionResponse.model_validate(txn)
    resp.from_account_name = names.get(txn.from_account_id)
    resp.to_account_name = names.get(txn.to_account_id)
    return resp


@router.get("", response_model=list[TransactionResponse])
async def list_transactions(
    transaction_type: TransactionType | None = Query(None, alias="type"),
    account_id: UUID | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    query = select(Transaction).order_by(
        Transaction.transaction_date.desc(), Transaction.created_at.desc(),
    )
    if transaction_type:
        query = query.where(Transaction.transaction_type == transaction_type.value)
    if account_id:
        query = query.where(
            (Transaction.from_account_id == account_id)
            | (Transaction.to_account_id == account_id)
        )
    txns = (await db.execute(query.limit(limit).offset(offset))).scalars().all()
    names = await _account_names(db)
    return [_with_names(t, names) for t in txns]


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    body: TransactionCreate, db: AsyncSession = Depends(get_db),
):
    txn = await LedgerService(db).post_transaction(**body.model_dump())
    await db.commit()
    return _with_names(txn, await _account_names(db))


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Delete a manual transaction and reverse its balance effects."""
    await LedgerService(db).delete_transaction(transaction_id)
    await db.commit()

"""Account Routes - list, create, edit and reconcile accounts.

Invariants:
    - New accounts start with balance == opening balance
    - Balances are never edited directly; reconcile(apply=true) is the only repair path
    - profit_role stays unique across accounts (409 on conflict)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.dashboard import sort_accounts_for_display
from shopledger.core.errors import ConflictError, ResourceNotFoundError
from shopledger.infrastructure.database import get_db
from shopledger.models.account import Account
from shopledger.schemas.account import (
    AccountCreate, AccountResponse, AccountUpdate, BalanceDriftResponse,
    ReconcileResponse,
)
from shopledger.services.ledger import LedgerService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/accounts", tags=["accounts"])


async def _ensure_role_free(db: AsyncSession, role, exclude_id: UUID | None = None):
    if role is None:
        return
    query = select(Account).where(Account.profit_role == role.value)
    if exclude_id:
        query = query.where(Account.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none():
        raise ConflictError(f"Another account already receives the '{role.value}' share")


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Accounts for display: loan accounts last."""
    query = select(Account)
    if not include_inactive:
        query = query.where(Account.is_active.is_(True))
    accounts = (await db.execute(query)).scalars().all()
    return sort_accounts_for_display(accounts)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(body: AccountCreate, db: AsyncSession = Depends(get_db)):
    await _ensure_role_free(db, body.profit_role)
    account = Account(
        account_name=body.account_name,
        account_type=body.account_type.value,
        owner_name=body.owner_name,
        opening_balance_minor=body.opening_balance_minor,
        balance_minor=body.opening_balance_minor,
        profit_role=body.profit_role.value if body.profit_role else None,
        is_active=True,
    )
    db.add(account)
    await db.commit()
    await db.refresh(account)
    logger.info(f"Created account '{account.account_name}'", extra={"account_id": account.id})
    return account


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: UUID, body: AccountUpdate, db: AsyncSession = Depends(get_db),
):
    account = await db.get(Account, account_id)
    if account is None:
        raise ResourceNotFoundError("Account", str(account_id))
    changes = body.model_dump(exclude_unset=True)
    if "profit_role" in changes:
        await _ensure_role_free(db, body.profit_role, exclude_id=account.id)
        account.profit_role = body.profit_role.value if body.profit_role else None
    if changes.get("account_name"):
        account.account_name = changes["account_name"].strip()
    if "owner_name" in changes and changes["owner_name"] is not None:
        account.owner_name = changes["owner_name"]
    if changes.get("account_type"):
        account.account_type = body.account_type.value
    if changes.get("is_active") is not None:
        account.is_active = changes["is_active"]
    if not account.is_active and account.profit_role:
        # profit_role is unique across all accounts; a closed account gives it up
        logger.info(
            f"Released profit role '{account.profit_role}' from closed account",
            extra={"account_id": account.id},
        )
        account.profit_role = None
    await db.commit()
    await db.refresh(account)
    return account


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_accounts(
    apply: bool = Query(False), db: AsyncSession = Depends(get_db),
):
    """Recompute balances from transactions; with apply=true, repair drift."""
    drift = await LedgerService(db).reconcile(apply=apply)
    accounts = (await db.execute(select(Account))).scalars().all()
    names = {a.id: a.account_name for a in accounts}
    if apply:
        await db.commit()
    return ReconcileResponse(
        applied=apply,
        accounts_checked=len(accounts),
        drift=[
            BalanceDriftResponse(
                account_id=d.account_id,
                account_name=names.get(d.account_id),
                stored_minor=d.stored,
                expected_minor=d.expected,
                difference_minor=d.difference,
            )
            for d in drift
        ],
    )

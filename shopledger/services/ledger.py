"""Ledger Service - posts, reverses and reconciles transactions against account balances.

Invariants:
    - Balances change only via relative UPDATE (balance = balance + delta), never read-modify-write
    - Deleting a transaction applies exactly its reversal_effects before removing the row
    - Profit-share transactions are only deletable with force=True (the order cascade)
    - reconcile() never changes transactions, only account balances, and only when apply=True

Design Decisions:
    - Per-transaction reversal is the operational path; reconcile() is the audit that
      proves reversal kept every balance equal to opening balance + Σ effects
    - Effects computed by core.ledger so posting, reversal and recompute share one definition
"""

import logging
import uuid
from datetime import date
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.domain_types import (
    AccountId, OrderId, PaymentMethod, ReferenceType, TransactionType,
)
from shopledger.core.errors import (
    BusinessValidationError, ProtectedTransactionError, ResourceNotFoundError,
)
from shopledger.core.ledger import (
    BalanceDrift, effects_of, find_balance_drift, is_protected_transaction,
    merge_effects, recompute_balances, reversal_effects, validate_transaction_accounts,
)
from shopledger.models.account import Account
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.models.transaction import Transaction
from shopledger.services.numbering import SequenceAllocator

logger = logging.getLogger(__name__)


class LedgerService:
    """Transaction posting and balance maintenance for one request session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.numbers = SequenceAllocator(db)

    async def post_transaction(
        self,
        *,
        transaction_type: TransactionType,
        amount_minor: int,
        from_account_id: AccountId | None = None,
        to_account_id: AccountId | None = None,
        transaction_date: date | None = None,
        description: str | None = None,
        category: str | None = None,
        reference_type: str | None = None,
        reference_id: uuid.UUID | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        transaction_number: str | None = None,
    ) -> Transaction:
        """Insert a transaction and move the balances it touches."""
        transaction_type = TransactionType(transaction_type)
        validate_transaction_accounts(
            transaction_type, from_account_id, to_account_id, amount_minor,
        )
        # Only the accounts this type actually moves are kept on the row
        if transaction_type == TransactionType.INCOME:
            from_account_id = None
        elif transaction_type == TransactionType.EXPENSE:
            to_account_id = None
        await self._require_active_accounts(
            [a for a in (from_account_id, to_account_id) if a],
        )

        txn_date = transaction_date or date.today()
        txn = Transaction(
            transaction_number=(
                transaction_number
                or await self.numbers.next_transaction_number(txn_date.year)
            ),
            transaction_date=txn_date,
            transaction_type=transaction_type.value,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount_minor=amount_minor,
            description=description,
            category=category,
            reference_type=reference_type,
            reference_id=reference_id,
            payment_method=PaymentMethod(payment_method).value,
        )
        self.db.add(txn)
        await self.db.flush()
        await self.apply_effects(effects_of(txn))
        logger.info(
            f"Posted {txn.transaction_type} {txn.transaction_number}",
            extra={"transaction_id": txn.id},
        )
        return txn

    async def apply_effects(self, effects: dict[uuid.UUID, int]) -> None:
        """Apply signed deltas as relative updates."""
        for account_id, delta in effects.items():
            if not delta:
                continue
            await self.db.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(balance_minor=Account.balance_minor + delta)
            )

    async def get_transaction(self, transaction_id: uuid.UUID) -> Transaction:
        txn = await self.db.get(Transaction, transaction_id)
        if txn is None:
            raise ResourceNotFoundError("Transaction", str(transaction_id))
        return txn

    async def delete_transaction(
        self, transaction_id: uuid.UUID, force: bool = False,
    ) -> Transaction:
        """Reverse a transaction's balance effects and delete it."""
        txn = await self.get_transaction(transaction_id)
        if not force and is_protected_transaction(txn.category, txn.reference_type):
            raise ProtectedTransactionError(str(transaction_id))
        await self.apply_effects(reversal_effects(txn))
        await self.db.delete(txn)
        await self.db.flush()
        logger.info(
            f"Deleted transaction {txn.transaction_number}",
            extra={"transaction_id": txn.id},
        )
        return txn

    async def reverse_and_delete(self, transactions: Iterable[Transaction]) -> int:
        """Bulk reversal used by cascades; protection is not checked here."""
        transactions = list(transactions)
        await self.apply_effects(
            merge_effects(reversal_effects(t) for t in transactions),
        )
        for txn in transactions:
            await self.db.delete(txn)
        await self.db.flush()
        return len(transactions)

    async def find_order_transactions(self, order_id: OrderId) -> list[Transaction]:
        """Transactions referencing the order directly or via its profit distribution."""
        dist_ids = (
            await self.db.execute(
                select(ProfitDistribution.id).where(
                    ProfitDistribution.order_id == order_id,
                )
            )
        ).scalars().all()

        found: dict[uuid.UUID, Transaction] = {}
        direct = await self.db.execute(
            select(Transaction)
            .where(Transaction.reference_type == ReferenceType.ORDER.value)
            .where(Transaction.reference_id == order_id)
        )
        for txn in direct.scalars():
            found[txn.id] = txn
        if dist_ids:
            shares = await self.db.execute(
                select(Transaction)
                .where(Transaction.reference_type == ReferenceType.PROFIT_SHARE.value)
                .where(Transaction.reference_id.in_(dist_ids))
            )
            for txn in shares.scalars():
                found[txn.id] = txn
        return list(found.values())

    async def reconcile(self, apply: bool = False) -> list[BalanceDrift]:
        """Recompute every balance from opening balance + transactions.

        Returns the accounts whose stored balance disagrees. With apply=True
        the stored balances are overwritten with the recomputed ones.
        """
        accounts = (
            await self.db.execute(
                select(Account).execution_options(populate_existing=True),
            )
        ).scalars().all()
        transactions = (await self.db.execute(select(Transaction))).scalars().all()
        expected = recompute_balances(
            {a.id: a.opening_balance_minor for a in accounts}, transactions,
        )
        drift = find_balance_drift({a.id: a.balance_minor for a in accounts}, expected)
        for item in drift:
            logger.warning(
                f"Balance drift of {item.difference} minor units",
                extra={"account_id": item.account_id},
            )
        if apply and drift:
            for item in drift:
                await self.db.execute(
                    update(Account)
                    .where(Account.id == item.account_id)
                    .values(balance_minor=item.expected)
                )
            await self.db.flush()
            logger.info(f"Repaired {len(drift)} account balances")
        return drift

    async def _require_active_accounts(self, account_ids: list[AccountId]) -> None:
        for account_id in account_ids:
            account = await self.db.get(Account, account_id)
            if account is None:
                raise ResourceNotFoundError("Account", str(account_id))
            if not account.is_active:
                raise BusinessValidationError(
                    f"Account '{account.account_name}' is inactive",
                    field="account_id",
                )

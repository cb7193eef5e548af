"""Data Reset Service - monthly close and full wipe of operational data.

Invariants:
    - Nothing runs unless the exact confirmation phrase is given
    - Master data (customers, workers, products, inventory, settings) is kept
    - Monthly reset carries each account's current balance forward as its new opening
      balance, so balance == opening + Σ effects still holds with no transactions left
    - Full reset zeroes balances and opening balances alike
    - Both resets delete every order (active or not) and restart numbering at 0001

Design Decisions:
    - One transaction for the whole reset: a failure midway leaves the data untouched
"""

import logging

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import ResetNotConfirmedError
from shopledger.core.numbering import ORDER_SEQUENCE_KEY
from shopledger.models.account import Account
from shopledger.models.customer import Customer
from shopledger.models.order import Order
from shopledger.models.order_item import OrderItem
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.models.standalone_payment import StandalonePayment
from shopledger.models.stock_movement import StockMovement
from shopledger.models.transaction import Transaction
from shopledger.models.worker import Worker
from shopledger.models.worker_daily_work import WorkerDailyWork
from shopledger.models.worker_payment_record import WorkerPaymentRecord
from shopledger.services.numbering import SequenceAllocator

logger = logging.getLogger(__name__)

MONTHLY_RESET_PHRASE = "RESET"
FULL_RESET_PHRASE = "RESET ALL"


class DataResetService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.numbers = SequenceAllocator(db)

    async def monthly_reset(self, confirm_text: str) -> dict[str, int]:
        """Clear the month's orders, ledger and payroll activity."""
        if confirm_text != MONTHLY_RESET_PHRASE:
            raise ResetNotConfirmedError(MONTHLY_RESET_PHRASE)

        await self.db.execute(
            update(Account)
            .values(opening_balance_minor=Account.balance_minor)
            .execution_options(synchronize_session=False)
        )
        counts = await self._clear_activity()
        logger.warning(f"Monthly reset completed: {counts}")
        return counts

    async def full_reset(self, confirm_text: str) -> dict[str, int]:
        """Monthly reset plus balances, stock movements and customer totals."""
        if confirm_text != FULL_RESET_PHRASE:
            raise ResetNotConfirmedError(FULL_RESET_PHRASE)

        await self.db.execute(
            update(Account)
            .values(balance_minor=0, opening_balance_minor=0)
            .execution_options(synchronize_session=False)
        )
        counts = await self._clear_activity()
        movements = await self.db.execute(delete(StockMovement))
        counts["stock_movements"] = movements.rowcount
        await self.db.execute(
            update(Customer)
            .values(total_spent_minor=0, is_repeat_customer=False)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        logger.warning(f"Full reset completed: {counts}")
        return counts

    async def _clear_activity(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        # children before parents: payment records point at items and orders
        for name, model in (
            ("transactions", Transaction),
            ("profit_distributions", ProfitDistribution),
            ("worker_payment_records", WorkerPaymentRecord),
            ("worker_daily_work", WorkerDailyWork),
            ("standalone_payments", StandalonePayment),
            ("order_items", OrderItem),
            ("orders", Order),
        ):
            result = await self.db.execute(
                delete(model).execution_options(synchronize_session=False),
            )
            counts[name] = result.rowcount
        await self.db.execute(
            update(Worker)
            .values(total_earned_minor=0, total_advances_minor=0, current_balance_minor=0)
            .execution_options(synchronize_session=False)
        )
        await self.numbers.reset_sequence(ORDER_SEQUENCE_KEY)
        await self.db.flush()
        return counts

"""Profit Distributor - splits a completed order's net profit into stakeholder accounts.

Invariants:
    - At most one ProfitDistribution per order (checked here, enforced by a unique key)
    - The three shares sum exactly to the distributed total and none is negative;
      a negative share aborts the whole cascade instead of being skipped
    - Each share is posted as an income transaction with reference_type="profit_share"
      pointing at the distribution, category="profit_distribution"
    - Non-positive profit records nothing

Design Decisions:
    - Stakeholders resolved through Account.profit_role; a share whose role has no
      active account is still recorded in the distribution but posts no transaction
    - Runs inside the order cascade's transaction, never on its own
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.config import get_settings
from shopledger.core.domain_types import (
    PROFIT_DISTRIBUTION_CATEGORY, PaymentMethod, ProfitRole, ReferenceType, TransactionType,
)
from shopledger.core.errors import ProfitShareConfigError
from shopledger.core.money import format_currency
from shopledger.core.profit_sharing import split_profit
from shopledger.models.account import Account
from shopledger.models.order import Order
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.services.ledger import LedgerService
from shopledger.services.settings import SettingsService

logger = logging.getLogger(__name__)


class ProfitDistributor:

    def __init__(self, db: AsyncSession, ledger: LedgerService | None = None):
        self.db = db
        self.ledger = ledger or LedgerService(db)
        self.settings = SettingsService(db)
        self.currency = get_settings().currency_code

    async def is_distributed(self, order_id) -> bool:
        result = await self.db.execute(
            select(ProfitDistribution.id).where(ProfitDistribution.order_id == order_id)
        )
        return result.first() is not None

    async def distribute_order_profit(
        self, order: Order, on_date: date | None = None,
    ) -> ProfitDistribution | None:
        """Record and post the order's profit split. Idempotent per order."""
        if await self.is_distributed(order.id):
            logger.info(
                f"Profit for {order.order_number} already distributed",
                extra={"order_id": order.id},
            )
            return None

        net_profit = order.net_profit_minor
        if net_profit <= 0:
            logger.warning(
                f"Order {order.order_number} completed with net profit "
                f"{net_profit}, nothing to distribute",
                extra={"order_id": order.id},
            )
            return None

        split = split_profit(net_profit, await self.settings.get_profit_shares())
        if min(split.shares()) < 0:
            raise ProfitShareConfigError(
                f"Profit split for {order.order_number} has a negative share: {split}",
            )
        distribution = ProfitDistribution(
            order_id=order.id,
            total_profit_minor=split.total,
            partner_one_share_minor=split.partner_one,
            partner_two_share_minor=split.partner_two,
            business_share_minor=split.business,
            distribution_date=on_date or date.today(),
            is_distributed=True,
            notes=f"Profit from order {order.order_number}",
        )
        self.db.add(distribution)
        await self.db.flush()

        accounts = await self._stakeholder_accounts()
        for role, amount in (
            (ProfitRole.PARTNER_ONE, split.partner_one),
            (ProfitRole.PARTNER_TWO, split.partner_two),
            (ProfitRole.BUSINESS, split.business),
        ):
            account = accounts.get(role.value)
            if account is None:
                logger.warning(
                    f"No active account for profit role '{role.value}', "
                    f"{format_currency(amount, self.currency)} not posted",
                    extra={"order_id": order.id},
                )
                continue
            if amount == 0:
                continue
            await self.ledger.post_transaction(
                transaction_type=TransactionType.INCOME,
                amount_minor=amount,
                to_account_id=account.id,
                transaction_date=distribution.distribution_date,
                description=(
                    f"Profit share ({role.value}) from order {order.order_number}"
                ),
                category=PROFIT_DISTRIBUTION_CATEGORY,
                reference_type=ReferenceType.PROFIT_SHARE.value,
                reference_id=distribution.id,
                payment_method=PaymentMethod.OTHER,
            )

        logger.info(
            f"Distributed {format_currency(split.total, self.currency)} from {order.order_number}",
            extra={"order_id": order.id},
        )
        return distribution

    async def _stakeholder_accounts(self) -> dict[str, Account]:
        result = await self.db.execute(
            select(Account)
            .where(Account.profit_role.is_not(None))
            .where(Account.is_active.is_(True))
        )
        return {a.profit_role: a for a in result.scalars()}

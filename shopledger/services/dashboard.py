"""Dashboard Service - loads the rows behind the dashboard and hands them to core.dashboard.

Invariants:
    - Read-only: never flushes or commits
    - Month-to-date figures start on the first day of today's month
    - Recent lists hold at most RECENT_LIMIT rows, newest first
"""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.dashboard import compute_dashboard_kpis, sort_accounts_for_display
from shopledger.models.account import Account
from shopledger.models.customer import Customer
from shopledger.models.order import Order
from shopledger.models.product import Product
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.models.transaction import Transaction

RECENT_LIMIT = 5


class DashboardService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_dashboard(self, today: date | None = None) -> dict:
        today = today or date.today()
        month_start = today.replace(day=1)

        accounts = (
            await self.db.execute(select(Account).where(Account.is_active.is_(True)))
        ).scalars().all()
        account_names = {a.id: a.account_name for a in accounts}

        monthly_orders = (
            await self.db.execute(
                select(Order)
                .where(Order.is_active.is_(True))
                .where(Order.order_date >= month_start)
            )
        ).scalars().all()
        monthly_distributions = (
            await self.db.execute(
                select(ProfitDistribution)
                .where(ProfitDistribution.is_distributed.is_(True))
                .where(ProfitDistribution.distribution_date >= month_start)
            )
        ).scalars().all()
        monthly_transactions = (
            await self.db.execute(
                select(Transaction).where(Transaction.transaction_date >= month_start)
            )
        ).scalars().all()
        kpis = compute_dashboard_kpis(
            monthly_orders, monthly_distributions, monthly_transactions, month_start,
        )

        recent_orders = (
            await self.db.execute(
                select(Order, Customer.name)
                .outerjoin(Customer, Customer.id == Order.customer_id)
                .where(Order.is_active.is_(True))
                .order_by(Order.created_at.desc())
                .limit(RECENT_LIMIT)
            )
        ).all()
        recent_transactions = (
            await self.db.execute(
                select(Transaction)
                .order_by(Transaction.created_at.desc())
                .limit(RECENT_LIMIT)
            )
        ).scalars().all()
        recent_distributions = (
            await self.db.execute(
                select(ProfitDistribution, Order.order_number)
                .outerjoin(Order, Order.id == ProfitDistribution.order_id)
                .where(ProfitDistribution.is_distributed.is_(True))
                .order_by(ProfitDistribution.created_at.desc())
                .limit(RECENT_LIMIT)
            )
        ).all()

        return {
            "accounts": sort_accounts_for_display(accounts),
            "recent_orders": [
                {"order": order, "customer_name": name or "Unknown"}
                for order, name in recent_orders
            ],
            "recent_transactions": [
                {
                    "transaction": txn,
                    "from_account_name": account_names.get(txn.from_account_id),
                    "to_account_name": account_names.get(txn.to_account_id),
                }
                for txn in recent_transactions
            ],
            "recent_profit_distributions": [
                {"distribution": dist, "order_number": number}
                for dist, number in recent_distributions
            ],
            "kpis": kpis,
            "total_customers": await self._count_active(Customer),
            "total_products": await self._count_active(Product),
        }

    async def _count_active(self, model) -> int:
        result = await self.db.execute(
            select(func.count(model.id)).where(model.is_active.is_(True))
        )
        return result.scalar_one()

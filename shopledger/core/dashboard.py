"""Dashboard KPIs - monthly figures derived from orders, distributions and transactions.

Invariants:
    - Only rows dated on or after month_start are counted
    - business expenses = labor + shipping + other costs of the month's orders
    - net profit = Σ distributed profit since month_start (not a recomputation)
    - pending orders = draft, confirmed, in_progress
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Protocol, Sequence, TypeVar

from shopledger.core.domain_types import AccountType, OrderStatus, TransactionType
from shopledger.core.order_lifecycle import is_pending


class OrderRowLike(Protocol):
    order_date: date
    status: str
    total_amount_minor: int
    total_labor_cost_minor: int
    shipping_cost_minor: int
    other_cost_minor: int


class DistributionLike(Protocol):
    distribution_date: date
    total_profit_minor: int
    is_distributed: bool


class TransactionRowLike(Protocol):
    transaction_date: date
    transaction_type: str
    amount_minor: int


class AccountLike(Protocol):
    account_name: str
    account_type: str


@dataclass(frozen=True)
class DashboardKpis:
    monthly_revenue_minor: int = 0
    monthly_labor_cost_minor: int = 0
    monthly_shipping_cost_minor: int = 0
    total_business_expenses_minor: int = 0
    monthly_net_profit_minor: int = 0
    monthly_expenses_minor: int = 0
    orders_completed: int = 0
    orders_pending: int = 0


def compute_dashboard_kpis(
    orders: Iterable[OrderRowLike],
    profit_distributions: Iterable[DistributionLike],
    transactions: Iterable[TransactionRowLike],
    month_start: date,
) -> DashboardKpis:
    """Aggregate the month-to-date figures shown on the dashboard. Pure."""
    monthly = [o for o in orders if o.order_date >= month_start]
    labor = sum(o.total_labor_cost_minor for o in monthly)
    shipping = sum(o.shipping_cost_minor for o in monthly)
    other = sum(o.other_cost_minor for o in monthly)
    statuses = [OrderStatus(o.status) for o in monthly]

    net_profit = sum(
        d.total_profit_minor for d in profit_distributions
        if d.is_distributed and d.distribution_date >= month_start
    )
    expenses = sum(
        t.amount_minor for t in transactions
        if t.transaction_date >= month_start
        and TransactionType(t.transaction_type) == TransactionType.EXPENSE
    )

    return DashboardKpis(
        monthly_revenue_minor=sum(o.total_amount_minor for o in monthly),
        monthly_labor_cost_minor=labor,
        monthly_shipping_cost_minor=shipping,
        total_business_expenses_minor=labor + shipping + other,
        monthly_net_profit_minor=net_profit,
        monthly_expenses_minor=expenses,
        orders_completed=sum(1 for s in statuses if s == OrderStatus.COMPLETED),
        orders_pending=sum(1 for s in statuses if is_pending(s)),
    )


A = TypeVar("A", bound=AccountLike)


def sort_accounts_for_display(accounts: Sequence[A]) -> list[A]:
    """Loan accounts last, otherwise alphabetical by name."""
    return sorted(
        accounts,
        key=lambda a: (a.account_type == AccountType.LOAN.value, a.account_name.lower()),
    )

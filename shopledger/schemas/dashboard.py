"""Dashboard Schemas - response shape of GET /dashboard."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel

from shopledger.schemas.account import AccountResponse
from shopledger.schemas.transaction import TransactionResponse


class RecentOrder(BaseModel):
    id: UUID
    order_number: str
    customer_name: str
    status: str
    total_amount_minor: int
    order_date: date
    created_at: datetime


class RecentDistribution(BaseModel):
    id: UUID
    order_id: UUID
    order_number: str | None
    total_profit_minor: int
    partner_one_share_minor: int
    partner_two_share_minor: int
    business_share_minor: int
    distribution_date: date


class DashboardKpisResponse(BaseModel):
    monthly_revenue_minor: int
    monthly_labor_cost_minor: int
    monthly_shipping_cost_minor: int
    total_business_expenses_minor: int
    monthly_net_profit_minor: int
    monthly_expenses_minor: int
    orders_completed: int
    orders_pending: int


class DashboardResponse(BaseModel):
    accounts: list[AccountResponse]
    recent_orders: list[RecentOrder]
    recent_transactions: list[TransactionResponse]
    recent_profit_distributions: list[RecentDistribution]
    kpis: DashboardKpisResponse
    total_customers: int
    total_products: int

"""Dashboard Route - month-to-date KPIs and recent activity in one response."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.infrastructure.database import get_db
from shopledger.schemas.account import AccountResponse
from shopledger.schemas.dashboard import (
    DashboardKpisResponse, DashboardResponse, RecentDistribution, RecentOrder,
)
from shopledger.schemas.transaction import TransactionResponse
from shopledger.services.dashboard import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    data = await DashboardService(db).load_dashboard()

    transactions = []
    for entry in data["recent_transactions"]:
        resp = TransactionResponse.model_validate(entry["transaction"])
        resp.from_account_name = entry["from_account_name"]
        resp.to_account_name = entry["to_account_name"]
        transactions.append(resp)

    return DashboardResponse(
        accounts=[AccountResponse.model_validate(a) for a in data["accounts"]],
        recent_orders=[
            RecentOrder(
                id=e["order"].id,
                order_number=e["order"].order_number,
                customer_name=e["customer_name"],
                status=e["order"].status,
                total_amount_minor=e["order"].total_amount_minor,
                order_date=e["order"].order_date,
                created_at=e["order"].created_at,
            )
            for e in data["recent_orders"]
        ],
        recent_transactions=transactions,
        recent_profit_distributions=[
            RecentDistribution(
                id=e["distribution"].id,
                order_id=e["distribution"].order_id,
                order_number=e["order_number"],
                total_profit_minor=e["distribution"].total_profit_minor,
                partner_one_share_minor=e["distribution"].partner_one_share_minor,
                partner_two_share_minor=e["distribution"].partner_two_share_minor,
                business_share_minor=e["distribution"].business_share_minor,
                distribution_date=e["distribution"].distribution_date,
            )
            for e in data["recent_profit_distributions"]
        ],
        kpis=DashboardKpisResponse.model_validate(data["kpis"], from_attributes=True),
        total_customers=data["total_customers"],
        total_products=data["total_products"],
    )

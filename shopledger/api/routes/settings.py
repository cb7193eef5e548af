"""Settings Routes - settings map, profit sharing, business info and data resets.

Invariants:
    - Profit shares are validated before they are stored (400 otherwise)
    - Resets require the exact confirmation phrase (400 otherwise)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.profit_sharing import ProfitShares
from shopledger.infrastructure.database import get_db
from shopledger.schemas.settings import (
    BusinessInfo, ProfitSharesIn, ProfitSharesResponse, ResetRequest,
)
from shopledger.services.data_reset import DataResetService
from shopledger.services.settings import SettingsService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("")
async def get_settings_map(db: AsyncSession = Depends(get_db)):
    return await SettingsService(db).get_settings_map()


@router.get("/profit-sharing", response_model=ProfitSharesResponse)
async def get_profit_sharing(db: AsyncSession = Depends(get_db)):
    return (await SettingsService(db).get_profit_shares()).to_setting()


@router.put("/profit-sharing", response_model=ProfitSharesResponse)
async def save_profit_sharing(body: ProfitSharesIn, db: AsyncSession = Depends(get_db)):
    shares = await SettingsService(db).save_profit_shares(ProfitShares(
        partner_one=body.partner_one_share,
        partner_two=body.partner_two_share,
        business=body.business_share,
    ))
    await db.commit()
    return shares.to_setting()


@router.get("/business-info", response_model=BusinessInfo)
async def get_business_info(db: AsyncSession = Depends(get_db)):
    return await SettingsService(db).get_business_info()


@router.put("/business-info", response_model=BusinessInfo)
async def save_business_info(body: BusinessInfo, db: AsyncSession = Depends(get_db)):
    info = await SettingsService(db).save_business_info(body.model_dump())
    await db.commit()
    return info


@router.post("/reset/monthly")
async def monthly_reset(body: ResetRequest, db: AsyncSession = Depends(get_db)):
    """Clear orders, transactions and payroll activity; keep master data."""
    counts = await DataResetService(db).monthly_reset(body.confirm_text)
    await db.commit()
    return {"status": "reset", "scope": "monthly", "deleted": counts}


@router.post("/reset/all")
async def full_reset(body: ResetRequest, db: AsyncSession = Depends(get_db)):
    """Monthly reset plus balances, stock movements and customer totals."""
    counts = await DataResetService(db).full_reset(body.confirm_text)
    await db.commit()
    return {"status": "reset", "scope": "all", "deleted": counts}

"""Settings Service - runtime-editable business settings stored as JSON rows.

Invariants:
    - setting_key is unique; save_setting upserts
    - Stored profit shares always satisfy validate_profit_shares
    - Reads fall back to defaults per key when a setting or a field is missing
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.profit_sharing import ProfitShares, validate_profit_shares
from shopledger.models.system_setting import SystemSetting

logger = logging.getLogger(__name__)

PROFIT_SHARING_KEY = "profit_sharing"
BUSINESS_INFO_KEY = "business_info"

DEFAULT_BUSINESS_INFO = {
    "company_name": "Wood Ceylon",
    "address": "",
    "phone": "",
    "email": "",
    "website": "",
}


class SettingsService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_settings_map(self) -> dict[str, dict]:
        result = await self.db.execute(
            select(SystemSetting).where(SystemSetting.is_active.is_(True))
        )
        return {s.setting_key: s.setting_value for s in result.scalars()}

    async def get_setting(self, key: str) -> dict | None:
        result = await self.db.execute(
            select(SystemSetting)
            .where(SystemSetting.setting_key == key)
            .where(SystemSetting.is_active.is_(True))
        )
        setting = result.scalar_one_or_none()
        return setting.setting_value if setting else None

    async def save_setting(
        self, key: str, value: dict, description: str | None = None,
    ) -> SystemSetting:
        """Insert or replace the value stored under key."""
        result = await self.db.execute(
            select(SystemSetting).where(SystemSetting.setting_key == key)
        )
        setting = result.scalar_one_or_none()
        if setting is None:
            setting = SystemSetting(
                setting_key=key, setting_value=value, description=description,
            )
            self.db.add(setting)
        else:
            setting.setting_value = value
            setting.is_active = True
            if description is not None:
                setting.description = description
        await self.db.flush()
        logger.info(f"Saved setting '{key}'")
        return setting

    async def get_profit_shares(self) -> ProfitShares:
        return ProfitShares.from_setting(await self.get_setting(PROFIT_SHARING_KEY))

    async def save_profit_shares(self, shares: ProfitShares) -> ProfitShares:
        validate_profit_shares(shares)
        await self.save_setting(PROFIT_SHARING_KEY, shares.to_setting())
        return shares

    async def get_business_info(self) -> dict:
        stored = await self.get_setting(BUSINESS_INFO_KEY) or {}
        return {
            key: stored.get(key) or default
            for key, default in DEFAULT_BUSINESS_INFO.items()
        }

    async def save_business_info(self, info: dict) -> dict:
        merged = {**DEFAULT_BUSINESS_INFO, **{k: v for k, v in info.items() if v is not None}}
        await self.save_setting(BUSINESS_INFO_KEY, merged)
        return merged

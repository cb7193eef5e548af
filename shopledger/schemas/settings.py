"""Settings Schemas - profit sharing, business info and data reset requests."""

from pydantic import BaseModel, Field, model_validator

from shopledger.core.profit_sharing import (
    DEFAULT_BUSINESS_SHARE, DEFAULT_PARTNER_ONE_SHARE, DEFAULT_PARTNER_TWO_SHARE,
    SHARE_TOLERANCE,
)


class ProfitSharesIn(BaseModel):
    """Percentages; each 0-100 and together 100 (within 0.01)."""
    partner_one_share: float = Field(DEFAULT_PARTNER_ONE_SHARE, ge=0, le=100)
    partner_two_share: float = Field(DEFAULT_PARTNER_TWO_SHARE, ge=0, le=100)
    business_share: float = Field(DEFAULT_BUSINESS_SHARE, ge=0, le=100)

    @model_validator(mode="after")
    def validate_total(self):
        total = self.partner_one_share + self.partner_two_share + self.business_share
        if abs(total - 100) >= SHARE_TOLERANCE:
            raise ValueError(f"Total profit share must equal 100% (got {total:.2f}%)")
        return self


class ProfitSharesResponse(BaseModel):
    partner_one_share: float
    partner_two_share: float
    business_share: float


class BusinessInfo(BaseModel):
    company_name: str = Field("Wood Ceylon", max_length=200)
    address: str = Field("", max_length=1000)
    phone: str = Field("", max_length=40)
    email: str = Field("", max_length=200)
    website: str = Field("", max_length=200)


class ResetRequest(BaseModel):
    confirm_text: str = Field(max_length=20)

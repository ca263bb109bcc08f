"""Agency settings schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class UpdateAgencySettingsRequest(BaseModel):
    agency_name: Optional[str] = Field(None, max_length=255)
    advance_payment_amount: Optional[int] = Field(None, ge=0, description="Advance per person in minor units")
    payment_mode: Optional[Literal["test", "production"]] = None


class AgencySettings(BaseModel):
    agency_name: str
    advance_payment_amount: int
    payment_mode: str
    currency: str

    class Config:
        from_attributes = True

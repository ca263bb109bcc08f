"""Provider schemas."""

from uuid import UUID

from pydantic import BaseModel, Field


class CreateProviderRequest(BaseModel):
    """Request schema for registering an add-on service."""

    name: str = Field(..., min_length=1, max_length=255)
    service_type: str = Field(..., min_length=1, max_length=100)
    unit_type: str = Field("person", max_length=50)
    cost_per_unit: int = Field(0, ge=0)
    selling_price_per_unit: int = Field(0, ge=0)
    is_active: bool = True


class ListProvidersRequest(BaseModel):
    active_only: bool = True


class Provider(BaseModel):
    """Provider response schema."""

    id: UUID
    name: str
    service_type: str
    unit_type: str
    cost_per_unit: int
    selling_price_per_unit: int
    is_active: bool

    class Config:
        from_attributes = True


class ListProvidersResponse(BaseModel):
    items: list[Provider]

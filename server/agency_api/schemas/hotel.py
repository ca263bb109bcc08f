"""Hotel quote schemas."""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class CreateHotelRequest(BaseModel):
    """Request schema for recording a hotel quote."""

    name: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    quoted_date: Optional[date] = None
    num_nights_quoted: int = Field(1, gt=0)

    cost_per_night_double: int = Field(0, ge=0)
    cost_per_night_triple: int = Field(0, ge=0)
    cost_per_night_quad: int = Field(0, ge=0)

    capacity_double: int = Field(2, ge=0)
    capacity_triple: int = Field(3, ge=0)
    capacity_quad: int = Field(4, ge=0)

    num_double_rooms: int = Field(0, ge=0)
    num_triple_rooms: int = Field(0, ge=0)
    num_quad_rooms: int = Field(0, ge=0)

    advance_payment: int = Field(0, ge=0)
    total_paid: int = Field(0, ge=0)
    is_active: bool = True

    @model_validator(mode="after")
    def check_paid_covers_advance(self):
        if self.total_paid < self.advance_payment:
            raise ValueError("total_paid must be at least the advance payment")
        return self


class Hotel(BaseModel):
    """Hotel quote response with computed totals."""

    id: UUID
    name: str
    location: Optional[str]
    quoted_date: Optional[date]
    num_nights_quoted: int
    cost_per_night_double: int
    cost_per_night_triple: int
    cost_per_night_quad: int
    capacity_double: int
    capacity_triple: int
    capacity_quad: int
    num_double_rooms: int
    num_triple_rooms: int
    num_quad_rooms: int
    advance_payment: int
    total_paid: int
    total_quote_cost: int = Field(..., description="Rooms x nightly cost x nights")
    remaining_payment: int
    is_active: bool


class CheapestHotelRequest(BaseModel):
    """Request schema for the cheapest quote covering a stay."""

    departure_date: date
    return_date: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.return_date <= self.departure_date:
            raise ValueError("return_date must be after departure_date")
        return self


class CheapestHotelResponse(BaseModel):
    hotel: Hotel
    nights: int
    estimated_cost_double: int = Field(..., description="Double room scaled to the requested nights")

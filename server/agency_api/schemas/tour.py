"""Tour-related Pydantic schemas."""

from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .common import PageRequest, PaginatedResponse

RoomType = Literal["double", "triple", "quad"]


class TourHotelDetail(BaseModel):
    """A hotel quote used by the tour and the room type it is costed at."""

    hotel_quote_id: UUID
    room_type: RoomType = "double"


class TourProviderDetail(BaseModel):
    """A fixed provider cost folded into the tour's base cost."""

    name: str = Field(..., min_length=1, max_length=255)
    service: str = Field("", max_length=255)
    cost: int = Field(..., ge=0, description="Cost in minor units")


class CreateTourRequest(BaseModel):
    """Request schema for creating a tour."""

    title: str = Field(..., min_length=1, max_length=255, description="Tour title")
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9-]+$", description="URL-friendly slug")
    description: Optional[str] = Field(None, max_length=5000)
    departure_date: Optional[date] = None
    return_date: Optional[date] = None

    bus_id: Optional[UUID] = Field(None, description="Bus assigned to the tour")
    bus_capacity: Optional[int] = Field(None, gt=0, description="Defaults to the bus's capacity")
    bus_cost: int = Field(0, ge=0)
    courtesies: int = Field(0, ge=0, description="Seats given away free")
    hotel_details: list[TourHotelDetail] = Field(default_factory=list)
    provider_details: list[TourProviderDetail] = Field(default_factory=list)

    selling_price_double: int = Field(..., gt=0, description="Per person, double occupancy")
    selling_price_triple: int = Field(..., gt=0, description="Per person, triple occupancy")
    selling_price_quad: int = Field(..., gt=0, description="Per person, quad occupancy")
    selling_price_child: int = Field(0, ge=0, description="Per child under 12")
    advance_payment_per_person: Optional[int] = Field(None, ge=0, description="Defaults to the agency setting")

    @model_validator(mode="after")
    def check_dates_and_courtesies(self):
        if self.departure_date and self.return_date and self.return_date < self.departure_date:
            raise ValueError("return_date must not be before departure_date")
        if self.bus_capacity is not None and self.courtesies >= self.bus_capacity:
            raise ValueError("courtesies must be fewer than the bus capacity")
        return self


class GetTourRequest(BaseModel):
    """Request schema for fetching a tour by id or slug."""

    tour_id: Optional[UUID] = None
    slug: Optional[str] = None

    @model_validator(mode="after")
    def check_lookup(self):
        if not self.tour_id and not self.slug:
            raise ValueError("tour_id or slug is required")
        return self


class ListToursRequest(PageRequest):
    active_only: bool = True


class Tour(BaseModel):
    """Tour response schema."""

    id: UUID
    title: str
    slug: str
    description: Optional[str]
    departure_date: Optional[date]
    return_date: Optional[date]
    bus_id: Optional[UUID]
    bus_capacity: int
    bus_cost: int
    courtesies: int
    hotel_details: list[dict]
    provider_details: list[dict]
    total_base_cost: int
    paying_clients_count: int
    cost_per_paying_person: int
    selling_price_double: int
    selling_price_triple: int
    selling_price_quad: int
    selling_price_child: int
    advance_payment_per_person: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ListToursResponse(PaginatedResponse):
    items: list[Tour]

"""Bus-related Pydantic schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .seat import SeatLayoutItem


class CreateBusRequest(BaseModel):
    """Request schema for creating a bus."""

    name: str = Field(..., min_length=1, max_length=255)
    license_plate: Optional[str] = Field(None, max_length=32)
    rental_cost: int = Field(0, ge=0, description="Rental cost in minor units")
    total_capacity: Optional[int] = Field(None, ge=1, description="Required when no layout is given")
    seat_layout: Optional[list[list[SeatLayoutItem]]] = Field(None, description="Seat grid; seats are renumbered on save")


class UpdateBusLayoutRequest(BaseModel):
    """Request schema for replacing a bus's seat grid."""

    bus_id: UUID
    seat_layout: list[list[SeatLayoutItem]]


class GetBusRequest(BaseModel):
    bus_id: UUID


class Bus(BaseModel):
    """Bus response schema."""

    id: UUID
    name: str
    license_plate: Optional[str]
    rental_cost: int
    total_capacity: int
    seat_layout: Optional[list[list[SeatLayoutItem]]]
    created_at: datetime

    class Config:
        from_attributes = True

"""Boarding ticket validation schemas."""

from datetime import time
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ValidateTicketRequest(BaseModel):
    """Scanned QR payload: ``<passenger_id>_<schedule_id>_<seat>``."""

    ticket_code: str = Field(..., min_length=5, max_length=200)


class TicketDetails(BaseModel):
    passenger_id: UUID
    full_name: str
    age: Optional[int]
    identification_number: Optional[str]
    contract_number: str
    client_status: str
    route_name: str
    origin_name: str
    destination_name: str
    schedule_id: UUID
    departure_time: time
    seat_number: int
    boarding_status: str


class UpdateBoardingRequest(BaseModel):
    passenger_id: UUID
    boarding_status: Literal["pending", "boarded", "no_show"]

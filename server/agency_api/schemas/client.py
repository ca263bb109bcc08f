"""Back-office client and passenger schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from ..domain.occupancy import MAX_AGE
from .booking import Companion, ExtraServiceRequest, RoomDetailsOut
from .common import PageRequest, PaginatedResponse

ClientStatusLiteral = Literal["pending", "confirmed", "cancelled", "completed"]


class SaveClientRequest(BaseModel):
    """
    Create or update a client from the admin form.

    People, rooms and total are always recomputed from the tour's rates.
    """

    client_id: Optional[UUID] = Field(None, description="Existing client to update")
    tour_id: UUID
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    identification_number: Optional[str] = Field(None, max_length=50)
    contractor_age: Optional[int] = Field(None, ge=0, le=MAX_AGE)
    companions: list[Companion] = Field(default_factory=list)
    extra_services: list[ExtraServiceRequest] = Field(default_factory=list)
    selected_seats: Optional[list[int]] = Field(None, description="Replace the client's tour seats")
    advance_payment: int = Field(0, ge=0)
    total_paid: int = Field(0, ge=0)
    status: ClientStatusLiteral = "pending"

    @model_validator(mode="after")
    def check_paid_covers_advance(self):
        if self.total_paid < self.advance_payment:
            raise ValueError("total_paid must be at least the advance payment")
        return self


class GetClientRequest(BaseModel):
    client_id: UUID


class CancelClientRequest(BaseModel):
    client_id: UUID
    reason: Optional[str] = Field(None, max_length=500)


class ListClientsRequest(PageRequest):
    tour_id: Optional[UUID] = None
    status: Optional[ClientStatusLiteral] = None


class Client(BaseModel):
    """Client response schema."""

    id: UUID
    contract_number: str
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    identification_number: Optional[str]
    contractor_age: Optional[int]
    tour_id: Optional[UUID]
    bus_route_id: Optional[UUID]
    number_of_people: int
    companions: list[dict]
    extra_services: list[dict]
    room_details: RoomDetailsOut
    total_amount: int
    advance_payment: int
    total_paid: int
    remaining_balance: int
    payment_method: Optional[str]
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ListClientsResponse(PaginatedResponse):
    items: list[Client]


class PaxListRequest(BaseModel):
    tour_id: UUID


class PaxEntry(BaseModel):
    """One reservation on a tour's passenger list."""

    client_id: UUID
    contract_number: str
    contractor_name: str
    phone: Optional[str]
    number_of_people: int
    companions: list[str]
    seats: list[int]
    status: str
    remaining_balance: int


class PaxListResponse(BaseModel):
    tour_id: UUID
    tour_title: str
    total_passengers: int
    items: list[PaxEntry]


class UpdatePassengerRequest(BaseModel):
    """Edit a bus passenger, optionally moving them to another departure or seat."""

    passenger_id: UUID
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=MAX_AGE)
    identification_number: Optional[str] = Field(None, max_length=50)
    is_contractor: bool = False
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    schedule_id: UUID
    selected_seats: list[int] = Field(..., description="Exactly one seat")

    @model_validator(mode="after")
    def check_contractor_contact(self):
        if self.is_contractor and (not self.email or not self.phone):
            raise ValueError("the contractor needs an email and phone")
        return self


class Passenger(BaseModel):
    id: UUID
    client_id: UUID
    schedule_id: UUID
    seat_number: int
    first_name: str
    last_name: str
    age: Optional[int]
    identification_number: Optional[str]
    is_contractor: bool
    email: Optional[str]
    phone: Optional[str]
    origin_destination_id: UUID
    destination_id: UUID
    fare_amount: int
    boarding_status: str
    ticket_code: str

    class Config:
        from_attributes = True


class UpdatePassengerResponse(BaseModel):
    passenger: Passenger
    client_total_amount: int
    fare_difference: int

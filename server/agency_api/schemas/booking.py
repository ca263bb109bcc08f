"""Public booking schemas for tour reservations and bus tickets."""

from datetime import date, time
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from ..domain.occupancy import MAX_AGE
from .common import Money


class PaymentMethod(str, Enum):
    """Payment method enumeration."""
    MERCADOPAGO = "mercadopago"
    STRIPE = "stripe"
    TRANSFER = "transferencia"
    MANUAL = "manual"


class Contractor(BaseModel):
    """The person signing the reservation."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    identification_number: Optional[str] = Field(None, max_length=50)
    age: Optional[int] = Field(None, ge=0, le=MAX_AGE)


class Companion(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    age: Optional[int] = Field(None, ge=0, le=MAX_AGE)


class ExtraServiceRequest(BaseModel):
    provider_id: UUID
    quantity: int = Field(1, ge=1, le=100)


class TourQuoteRequest(BaseModel):
    """Price a party for a tour without booking it."""

    tour_id: UUID
    contractor_age: Optional[int] = Field(None, ge=0, le=MAX_AGE)
    companions: list[Companion] = Field(default_factory=list, max_length=60)
    extra_services: list[ExtraServiceRequest] = Field(default_factory=list)


class CreateTourBookingRequest(BaseModel):
    """Request schema for booking seats on a tour."""

    tour_id: UUID
    contractor: Contractor
    companions: list[Companion] = Field(default_factory=list, max_length=60)
    selected_seats: list[int] = Field(..., min_length=1, description="Seat numbers, one per traveller")
    extra_services: list[ExtraServiceRequest] = Field(default_factory=list)
    payment_method: PaymentMethod = PaymentMethod.TRANSFER


class RoomDetailsOut(BaseModel):
    double_rooms: int
    triple_rooms: int
    quad_rooms: int


class ExtraServiceLine(BaseModel):
    """An extra as priced at booking time."""

    provider_id: UUID
    name: str
    service_type: str
    quantity: int
    selling_price_per_unit_snapshot: int
    subtotal: int


class TourQuote(BaseModel):
    """Computed price of a party for a tour."""

    tour_id: UUID
    number_of_people: int
    adults: int
    children: int
    room_details: RoomDetailsOut
    rooms_summary: str
    extras: list[ExtraServiceLine]
    total: Money
    advance: Money


class TourBookingResponse(BaseModel):
    """Confirmation of a tour reservation."""

    client_id: UUID
    contract_number: str
    status: str
    seats: list[int]
    quote: TourQuote


class TicketPassenger(BaseModel):
    """A bus traveller. The first passenger is the contractor."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=MAX_AGE)
    identification_number: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    seat_number: int = Field(..., ge=1)


class CreateBusTicketRequest(BaseModel):
    """Request schema for buying bus tickets on one scheduled departure."""

    schedule_id: UUID
    origin_id: UUID
    destination_id: UUID
    travel_date: date
    passengers: list[TicketPassenger] = Field(..., min_length=1, max_length=60)
    payment_method: PaymentMethod = PaymentMethod.TRANSFER

    @model_validator(mode="after")
    def check_contractor_contact(self):
        contractor = self.passengers[0]
        if not contractor.email or not contractor.phone:
            raise ValueError("the first passenger is the contractor and needs an email and phone")
        return self


class IssuedTicket(BaseModel):
    passenger_id: UUID
    full_name: str
    seat_number: int
    fare: int
    ticket_code: str = Field(..., description="Payload for the boarding QR code")


class BusTicketResponse(BaseModel):
    client_id: UUID
    contract_number: str
    status: str
    schedule_id: UUID
    travel_date: date
    departure_time: time
    tickets: list[IssuedTicket]
    total: Money
    advance: Money


class GetReservationRequest(BaseModel):
    """Look a reservation up by its contract number."""

    contract_number: str = Field(..., min_length=1, max_length=16)

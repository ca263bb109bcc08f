"""Service layer package."""

from .agency_service import AgencyService
from .bus_service import BusService
from .bus_ticket_service import BusTicketService
from .client_service import ClientService
from .hotel_service import HotelService
from .idempotency_service import IdempotencyService
from .passenger_service import PassengerService
from .payment_service import PaymentService
from .provider_service import ProviderService
from .route_service import RouteService
from .seat_service import SeatService
from .ticket_service import TicketService
from .tour_booking_service import TourBookingService
from .tour_service import TourService

__all__ = [
    "AgencyService",
    "BusService",
    "BusTicketService",
    "ClientService",
    "HotelService",
    "IdempotencyService",
    "PassengerService",
    "PaymentService",
    "ProviderService",
    "RouteService",
    "SeatService",
    "TicketService",
    "TourBookingService",
    "TourService",
]

"""Models module exporting all database models."""

from .agency import AgencySettings
from .bus import Bus
from .client import Client, ClientPayment, ClientStatus
from .hotel import Hotel
from .idempotency import IdempotencyRecord
from .passenger import BoardingStatus, BusPassenger
from .provider import Provider
from .route import BusDestination, BusRoute, BusSchedule, RouteSegment
from .seat import BusSeatAssignment, SeatStatus, TourSeatAssignment
from .tour import Tour

__all__ = [
    # Catalog
    "Tour",
    "Bus",
    "Hotel",
    "Provider",
    "AgencySettings",

    # Bus network
    "BusDestination",
    "BusRoute",
    "RouteSegment",
    "BusSchedule",

    # Reservations
    "Client",
    "ClientPayment",
    "ClientStatus",
    "BusPassenger",
    "BoardingStatus",

    # Seat inventory
    "TourSeatAssignment",
    "BusSeatAssignment",
    "SeatStatus",

    # Idempotency
    "IdempotencyRecord",
]

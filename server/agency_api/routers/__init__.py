"""FastAPI routers package."""

from .agency import router as agency_router
from .booking import router as booking_router
from .bus import router as bus_router
from .client import router as client_router
from .health import router as health_router
from .hotel import router as hotel_router
from .metrics import router as metrics_router
from .passenger import router as passenger_router
from .payment import router as payment_router
from .provider import router as provider_router
from .route import router as route_router
from .ticket import router as ticket_router
from .tour import router as tour_router

__all__ = [
    "agency_router",
    "booking_router",
    "bus_router",
    "client_router",
    "health_router",
    "hotel_router",
    "metrics_router",
    "passenger_router",
    "payment_router",
    "provider_router",
    "route_router",
    "ticket_router",
    "tour_router",
]

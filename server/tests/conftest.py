"""Test configuration and fixtures."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, time, timedelta

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agency_api.core.config import settings
from agency_api.core.database import Base, get_db
from agency_api.models import *  # noqa: F403 - Import all models
from agency_api.schemas.booking import (
    Companion,
    Contractor,
    CreateBusTicketRequest,
    CreateTourBookingRequest,
    TicketPassenger,
)
from agency_api.schemas.bus import CreateBusRequest
from agency_api.schemas.route import (
    CreateDestinationRequest,
    CreateScheduleRequest,
    SaveRouteRequest,
    SegmentPrice,
)
from agency_api.schemas.tour import CreateTourRequest
from agency_api.services.bus_service import BusService
from agency_api.services.bus_ticket_service import BusTicketService
from agency_api.services.route_service import RouteService
from agency_api.services.tour_booking_service import TourBookingService
from agency_api.services.tour_service import TourService

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Runs every day of the week
ALL_DAYS = [0, 1, 2, 3, 4, 5, 6]

# A Monday
MONDAY = date(2026, 11, 2)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory configured like the application's."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def test_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(session_factory):
    """Create the application with the database pointed at the test engine."""
    from agency_api.main import create_app

    app = create_app()

    # One session per request, as in production
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_token(roles: list[str], sub: str = "staff-1") -> str:
    return jwt.encode({"sub": sub, "roles": roles}, settings.bearer_token_secret, algorithm="HS256")


@pytest.fixture
def admin_headers():
    """Authorization header for an agency admin."""
    return {"Authorization": f"Bearer {make_token([settings.admin_role])}"}


@pytest.fixture
def staff_headers():
    """Authorization header for a signed-in user without the admin role."""
    return {"Authorization": f"Bearer {make_token(['driver'], sub='driver-7')}"}


# Catalog fixtures

@pytest.fixture
def sample_tour_data():
    """Sample tour data for testing. Amounts are in cents."""
    return {
        "title": "Barrancas del Cobre",
        "slug": "barrancas-del-cobre",
        "description": "Five days through the Copper Canyon",
        "bus_cost": 120000,
        "courtesies": 2,
        "selling_price_double": 100000,
        "selling_price_triple": 90000,
        "selling_price_quad": 80000,
        "selling_price_child": 50000,
        "advance_payment_per_person": 20000,
    }


@pytest_asyncio.fixture
async def bus(test_session):
    """A 12-seat bus without a drawn layout."""
    return await BusService(test_session).create_bus(
        CreateBusRequest(name="Sprinter 12", total_capacity=12)
    )


@pytest_asyncio.fixture
async def tour(test_session, bus, sample_tour_data):
    return await TourService(test_session).create_tour(
        CreateTourRequest(bus_id=bus.id, **sample_tour_data)
    )


@pytest.fixture
def contractor():
    return Contractor(
        first_name="Maria",
        last_name="Lopez",
        email="maria@example.com",
        phone="6141234567",
        age=40,
    )


@pytest_asyncio.fixture
async def tour_booking(test_session, tour, contractor):
    """A pending reservation for two adults and a child on seats 1-3."""
    return await TourBookingService(test_session).create_booking(
        CreateTourBookingRequest(
            tour_id=tour.id,
            contractor=contractor,
            companions=[Companion(name="Jorge Lopez", age=42), Companion(name="Sofia Lopez", age=8)],
            selected_seats=[1, 2, 3],
        )
    )


# Bus network fixtures

class Network:
    """Destinations, routes and schedules built for a test."""

    def __init__(self):
        self.stops = {}
        self.route = None
        self.schedule = None
        self.express_route = None
        self.express_schedule = None

    def stop(self, name: str):
        return self.stops[name].id


@pytest_asyncio.fixture
async def network(test_session, bus):
    """
    Chihuahua -> Cuauhtemoc -> Creel on a daily schedule, plus a daily
    express Chihuahua -> Creel on its own route.
    """
    service = RouteService(test_session)
    net = Network()
    for name in ("Chihuahua", "Cuauhtemoc", "Creel"):
        net.stops[name] = await service.create_destination(
            CreateDestinationRequest(name=name, state="CHIH")
        )

    chihuahua, cuauhtemoc, creel = (net.stop(n) for n in ("Chihuahua", "Cuauhtemoc", "Creel"))
    net.route = await service.save_route(SaveRouteRequest(
        name="Chihuahua - Creel",
        bus_id=bus.id,
        all_stops=[chihuahua, cuauhtemoc, creel],
        segments=[
            SegmentPrice(start_destination_id=chihuahua, end_destination_id=cuauhtemoc,
                         adult_price=30000, child_price=15000, duration_minutes=90),
            SegmentPrice(start_destination_id=chihuahua, end_destination_id=creel,
                         adult_price=50000, child_price=25000, duration_minutes=240),
            SegmentPrice(start_destination_id=cuauhtemoc, end_destination_id=creel,
                         adult_price=25000, child_price=12500, duration_minutes=150),
        ],
    ))
    net.schedule = await service.create_schedule(CreateScheduleRequest(
        route_id=net.route.id,
        departure_time=time(7, 30),
        day_of_week=ALL_DAYS,
    ))

    net.express_route = await service.save_route(SaveRouteRequest(
        name="Chihuahua - Creel Express",
        bus_id=bus.id,
        all_stops=[chihuahua, creel],
        segments=[
            SegmentPrice(start_destination_id=chihuahua, end_destination_id=creel,
                         adult_price=55000, child_price=27500, duration_minutes=200),
        ],
    ))
    net.express_schedule = await service.create_schedule(CreateScheduleRequest(
        route_id=net.express_route.id,
        departure_time=time(14, 0),
        day_of_week=ALL_DAYS,
    ))

    # Later reads must load schedules with their routes
    test_session.expunge_all()
    return net


@pytest.fixture
def travel_date():
    return MONDAY + timedelta(days=7)


@pytest.fixture
def ticket_request(network, travel_date):
    """An adult and a child from Chihuahua to Creel on the 07:30 departure."""
    return CreateBusTicketRequest(
        schedule_id=network.schedule.id,
        origin_id=network.stop("Chihuahua"),
        destination_id=network.stop("Creel"),
        travel_date=travel_date,
        passengers=[
            TicketPassenger(first_name="Ana", last_name="Ruiz", age=35,
                            email="ana@example.com", phone="6145550101", seat_number=1),
            TicketPassenger(first_name="Leo", last_name="Ruiz", age=8, seat_number=2),
        ],
    )


@pytest_asyncio.fixture
async def bus_tickets(test_session, ticket_request):
    return await BusTicketService(test_session).create_tickets(ticket_request)

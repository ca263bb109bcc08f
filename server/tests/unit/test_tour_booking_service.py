"""Unit tests for public tour bookings."""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from agency_api.core.exceptions import (
    NotFoundError,
    SeatCountMismatchError,
    SeatUnavailableError,
    ValidationError,
)
from agency_api.models.client import Client
from agency_api.schemas.booking import (
    Companion,
    Contractor,
    CreateTourBookingRequest,
    ExtraServiceRequest,
    TourQuoteRequest,
)
from agency_api.schemas.provider import CreateProviderRequest
from agency_api.services.client_service import ClientService
from agency_api.services.provider_service import ProviderService
from agency_api.services.tour_booking_service import TourBookingService


async def count_clients(session) -> int:
    result = await session.execute(select(func.count()).select_from(Client))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_quote_family(test_session, tour):
    """Two adults and a child share a double; the child pays the child rate."""
    quote = await TourBookingService(test_session).quote(TourQuoteRequest(
        tour_id=tour.id,
        contractor_age=40,
        companions=[Companion(name="Jorge", age=42), Companion(name="Sofia", age=8)],
    ))

    assert quote.adults == 2
    assert quote.children == 1
    assert quote.room_details.double_rooms == 1
    assert quote.rooms_summary == "1 Double"
    assert quote.total.amount == 250000
    assert quote.advance.amount == 60000
    assert quote.total.currency == "MXN"


@pytest.mark.asyncio
async def test_quote_with_extras(test_session, tour):
    provider = await ProviderService(test_session).create_provider(CreateProviderRequest(
        name="Chepe Express", service_type="train", selling_price_per_unit=30000,
    ))

    quote = await TourBookingService(test_session).quote(TourQuoteRequest(
        tour_id=tour.id,
        companions=[Companion(name="Ana")],
        extra_services=[ExtraServiceRequest(provider_id=provider.id, quantity=2)],
    ))

    assert quote.total.amount == 2 * 100000 + 60000
    assert quote.extras[0].subtotal == 60000


@pytest.mark.asyncio
async def test_create_booking(test_session, tour_booking):
    client = await ClientService(test_session).get_client_by_id_or_raise(tour_booking.client_id)

    assert tour_booking.status == "pending"
    assert tour_booking.seats == [1, 2, 3]
    assert len(tour_booking.contract_number) == 8
    assert client.total_amount == 250000
    assert client.advance_payment == 60000
    assert client.total_paid == 0
    assert client.number_of_people == 3
    assert client.room_details == {"double_rooms": 1, "triple_rooms": 0, "quad_rooms": 0}


@pytest.mark.asyncio
async def test_seat_count_must_match_party(test_session, tour, contractor):
    with pytest.raises(SeatCountMismatchError):
        await TourBookingService(test_session).create_booking(CreateTourBookingRequest(
            tour_id=tour.id,
            contractor=contractor,
            companions=[Companion(name="Jorge Lopez", age=42)],
            selected_seats=[5],
        ))


@pytest.mark.asyncio
async def test_taken_seat_books_nothing(test_session, tour, tour_booking):
    service = TourBookingService(test_session)
    other = Contractor(
        first_name="Luis", last_name="Perez", email="luis@example.com", phone="6149876543",
    )

    with pytest.raises(SeatUnavailableError) as exc_info:
        await service.create_booking(CreateTourBookingRequest(
            tour_id=tour.id,
            contractor=other,
            companions=[Companion(name="Rosa Perez")],
            selected_seats=[3, 4],
        ))
    await test_session.rollback()

    assert exc_info.value.problem_details["seats"] == [3]
    assert await count_clients(test_session) == 1


@pytest.mark.asyncio
async def test_inactive_tour_is_not_bookable(test_session, tour, contractor):
    tour.is_active = False
    await test_session.commit()

    with pytest.raises(ValidationError):
        await TourBookingService(test_session).create_booking(CreateTourBookingRequest(
            tour_id=tour.id,
            contractor=contractor,
            selected_seats=[1],
        ))


@pytest.mark.asyncio
async def test_unknown_extra_provider(test_session, tour, contractor):
    with pytest.raises(NotFoundError):
        await TourBookingService(test_session).create_booking(CreateTourBookingRequest(
            tour_id=tour.id,
            contractor=contractor,
            selected_seats=[1],
            extra_services=[ExtraServiceRequest(provider_id=uuid4())],
        ))

"""Unit tests for tour service."""

from uuid import uuid4

import pytest

from agency_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from agency_api.schemas.hotel import CreateHotelRequest
from agency_api.schemas.tour import (
    CreateTourRequest,
    GetTourRequest,
    ListToursRequest,
    TourHotelDetail,
    TourProviderDetail,
)
from agency_api.services.hotel_service import HotelService
from agency_api.services.tour_service import TourService


@pytest.mark.asyncio
async def test_create_tour(test_session, bus, sample_tour_data):
    """Test creating a tour with a bus."""
    service = TourService(test_session)

    tour = await service.create_tour(CreateTourRequest(bus_id=bus.id, **sample_tour_data))

    assert tour.id is not None
    assert tour.slug == sample_tour_data["slug"]
    assert tour.bus_capacity == 12
    assert tour.total_base_cost == 120000
    assert tour.paying_clients_count == 10
    assert tour.cost_per_paying_person == 12000
    assert tour.advance_payment_per_person == 20000


@pytest.mark.asyncio
async def test_create_tour_includes_hotels_and_providers(test_session, bus, sample_tour_data):
    """Hotel costs per person and provider costs join the bus in the base cost."""
    hotel = await HotelService(test_session).create_hotel(CreateHotelRequest(
        name="Hotel Mansion Tarahumara",
        num_nights_quoted=2,
        cost_per_night_double=60000,
    ))
    service = TourService(test_session)

    tour = await service.create_tour(CreateTourRequest(
        bus_id=bus.id,
        hotel_details=[TourHotelDetail(hotel_quote_id=hotel.id, room_type="double")],
        provider_details=[TourProviderDetail(name="Guia", service="Tour guide", cost=20000)],
        **sample_tour_data,
    ))

    assert tour.total_base_cost == 120000 + 60000 + 20000
    assert tour.cost_per_paying_person == 20000
    assert tour.hotel_details == [{"hotel_quote_id": str(hotel.id), "room_type": "double"}]


@pytest.mark.asyncio
async def test_create_tour_unknown_hotel(test_session, bus, sample_tour_data):
    service = TourService(test_session)

    with pytest.raises(NotFoundError):
        await service.create_tour(CreateTourRequest(
            bus_id=bus.id,
            hotel_details=[TourHotelDetail(hotel_quote_id=uuid4())],
            **sample_tour_data,
        ))


@pytest.mark.asyncio
async def test_create_tour_duplicate_slug(test_session, bus, sample_tour_data):
    """Test creating a tour with duplicate slug raises error."""
    service = TourService(test_session)

    # Create first tour
    await service.create_tour(CreateTourRequest(bus_id=bus.id, **sample_tour_data))

    # Try to create second tour with same slug
    with pytest.raises(ConflictError):
        await service.create_tour(CreateTourRequest(
            bus_id=bus.id,
            **{**sample_tour_data, "title": "Different Tour"}
        ))


@pytest.mark.asyncio
async def test_create_tour_needs_capacity(test_session, sample_tour_data):
    """Without a bus the capacity must be given."""
    service = TourService(test_session)

    with pytest.raises(ValidationError):
        await service.create_tour(CreateTourRequest(**sample_tour_data))


@pytest.mark.asyncio
async def test_create_tour_courtesies_below_bus_capacity(test_session, bus, sample_tour_data):
    service = TourService(test_session)

    with pytest.raises(ValidationError):
        await service.create_tour(CreateTourRequest(
            bus_id=bus.id,
            **{**sample_tour_data, "courtesies": 12}
        ))


@pytest.mark.asyncio
async def test_create_tour_defaults_advance_from_agency_settings(test_session, sample_tour_data):
    service = TourService(test_session)
    data = {**sample_tour_data, "advance_payment_per_person": None}

    tour = await service.create_tour(CreateTourRequest(bus_capacity=20, **data))

    assert tour.advance_payment_per_person == 50000


@pytest.mark.asyncio
async def test_get_tour_by_id_or_slug(test_session, tour):
    service = TourService(test_session)

    by_id = await service.get_tour(GetTourRequest(tour_id=tour.id))
    by_slug = await service.get_tour(GetTourRequest(slug=tour.slug))

    assert by_id.id == by_slug.id == tour.id


@pytest.mark.asyncio
async def test_get_tour_not_found(test_session):
    """Test getting a non-existent tour."""
    service = TourService(test_session)

    assert await service.get_tour_by_id(uuid4()) is None
    with pytest.raises(NotFoundError):
        await service.get_tour(GetTourRequest(slug="nowhere"))


@pytest.mark.asyncio
async def test_list_tours_pages_with_cursor(test_session, sample_tour_data):
    service = TourService(test_session)
    for i in range(3):
        await service.create_tour(CreateTourRequest(
            bus_capacity=20,
            **{**sample_tour_data, "slug": f"tour-{i}"}
        ))

    first, cursor = await service.list_tours(ListToursRequest(limit=2))
    second, last_cursor = await service.list_tours(ListToursRequest(limit=2, cursor=cursor))

    assert len(first) == 2
    assert cursor is not None
    assert len(second) == 1
    assert last_cursor is None
    assert {t.id for t in first}.isdisjoint({t.id for t in second})

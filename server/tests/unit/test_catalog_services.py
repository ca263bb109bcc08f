"""Unit tests for buses, hotel quotes, providers and agency settings."""

from datetime import date
from uuid import uuid4

import pytest

from agency_api.core.exceptions import NotFoundError, ValidationError
from agency_api.schemas.agency import UpdateAgencySettingsRequest
from agency_api.schemas.booking import ExtraServiceRequest
from agency_api.schemas.bus import CreateBusRequest, UpdateBusLayoutRequest
from agency_api.schemas.hotel import CheapestHotelRequest, CreateHotelRequest
from agency_api.schemas.provider import CreateProviderRequest
from agency_api.schemas.seat import CellEdit, LayoutPreviewRequest
from agency_api.services.agency_service import AgencyService
from agency_api.services.bus_service import BusService
from agency_api.services.hotel_service import HotelService, to_schema
from agency_api.services.provider_service import ProviderService

SEAT = {"type": "seat"}
AISLE = {"type": "aisle"}


class TestBuses:
    @pytest.mark.asyncio
    async def test_layout_sets_capacity(self, test_session):
        service = BusService(test_session)

        bus = await service.create_bus(CreateBusRequest(
            name="Irizar i6",
            total_capacity=40,
            seat_layout=[[{"type": "driver"}, AISLE, SEAT], [SEAT, AISLE, SEAT]],
        ))

        assert bus.total_capacity == 3
        assert bus.seat_layout[1][0] == {"type": "seat", "number": 1}
        assert bus.seat_layout[0][2] == {"type": "seat", "number": 2}

    @pytest.mark.asyncio
    async def test_bus_needs_seats(self, test_session):
        service = BusService(test_session)

        with pytest.raises(ValidationError):
            await service.create_bus(CreateBusRequest(name="Empty", seat_layout=[[AISLE]]))

    @pytest.mark.asyncio
    async def test_update_layout(self, test_session, bus):
        service = BusService(test_session)

        updated = await service.update_layout(UpdateBusLayoutRequest(
            bus_id=bus.id,
            seat_layout=[[SEAT, SEAT, AISLE, SEAT, SEAT]],
        ))

        assert updated.total_capacity == 4

    @pytest.mark.asyncio
    async def test_update_layout_without_seats(self, test_session, bus):
        service = BusService(test_session)

        with pytest.raises(ValidationError):
            await service.update_layout(UpdateBusLayoutRequest(bus_id=bus.id, seat_layout=[[AISLE]]))

    @pytest.mark.asyncio
    async def test_unknown_bus(self, test_session):
        with pytest.raises(NotFoundError):
            await BusService(test_session).get_bus_by_id_or_raise(uuid4())

    def test_preview_resizes_and_paints(self):
        layout, seat_count = BusService.preview_layout(LayoutPreviewRequest(
            layout=[[SEAT, AISLE]],
            rows=2,
            cols=2,
            edits=[CellEdit(row=1, col=1, type="seat")],
        ))

        assert seat_count == 2
        assert layout[1][1]["number"] == 2

    def test_preview_edit_outside_grid(self):
        with pytest.raises(ValidationError):
            BusService.preview_layout(LayoutPreviewRequest(
                layout=[[SEAT]],
                edits=[CellEdit(row=3, col=0, type="seat")],
            ))


class TestHotels:
    @pytest.mark.asyncio
    async def test_quote_totals(self, test_session):
        hotel = await HotelService(test_session).create_hotel(CreateHotelRequest(
            name="Hotel Plaza",
            num_nights_quoted=2,
            cost_per_night_double=100000,
            num_double_rooms=2,
            advance_payment=50000,
            total_paid=100000,
        ))

        quote = to_schema(hotel)

        assert quote.total_quote_cost == 400000
        assert quote.remaining_payment == 300000

    @pytest.mark.asyncio
    async def test_find_cheapest_scales_to_stay(self, test_session):
        service = HotelService(test_session)
        two_nights = await service.create_hotel(CreateHotelRequest(
            name="Two Nights", num_nights_quoted=2, cost_per_night_double=100000,
        ))
        await service.create_hotel(CreateHotelRequest(
            name="One Night", num_nights_quoted=1, cost_per_night_double=60000,
        ))
        await service.create_hotel(CreateHotelRequest(
            name="Closed", num_nights_quoted=1, cost_per_night_double=1000, is_active=False,
        ))

        hotel, nights, estimate = await service.find_cheapest(CheapestHotelRequest(
            departure_date=date(2026, 12, 1),
            return_date=date(2026, 12, 4),
        ))

        assert hotel.id == two_nights.id
        assert nights == 3
        assert estimate == 150000

    @pytest.mark.asyncio
    async def test_find_cheapest_without_quotes(self, test_session):
        with pytest.raises(NotFoundError):
            await HotelService(test_session).find_cheapest(CheapestHotelRequest(
                departure_date=date(2026, 12, 1),
                return_date=date(2026, 12, 2),
            ))


class TestProviders:
    @pytest.mark.asyncio
    async def test_price_extras_snapshots_selling_price(self, test_session):
        service = ProviderService(test_session)
        provider = await service.create_provider(CreateProviderRequest(
            name="Chepe Express",
            service_type="train",
            cost_per_unit=90000,
            selling_price_per_unit=120000,
        ))

        snapshots, lines = await service.price_extras([
            ExtraServiceRequest(provider_id=provider.id, quantity=2)
        ])

        assert lines[0].subtotal == 240000
        assert snapshots[0]["selling_price_per_unit_snapshot"] == 120000
        assert snapshots[0]["provider_id"] == str(provider.id)

    @pytest.mark.asyncio
    async def test_inactive_provider_cannot_be_sold(self, test_session):
        service = ProviderService(test_session)
        provider = await service.create_provider(CreateProviderRequest(
            name="Old Tour", service_type="excursion", is_active=False,
        ))

        with pytest.raises(ValidationError):
            await service.price_extras([ExtraServiceRequest(provider_id=provider.id)])
        with pytest.raises(NotFoundError):
            await service.price_extras([ExtraServiceRequest(provider_id=uuid4())])

    @pytest.mark.asyncio
    async def test_list_providers(self, test_session):
        service = ProviderService(test_session)
        await service.create_provider(CreateProviderRequest(name="Guia", service_type="guide"))
        await service.create_provider(CreateProviderRequest(
            name="Retired", service_type="guide", is_active=False,
        ))

        active = await service.list_providers()
        everything = await service.list_providers(active_only=False)

        assert [p.name for p in active] == ["Guia"]
        assert len(everything) == 2


@pytest.mark.asyncio
async def test_agency_settings_defaults_and_update(test_session):
    service = AgencyService(test_session)

    defaults = await service.get_settings()
    assert defaults.advance_payment_amount == 50000
    assert defaults.currency == "MXN"

    updated = await service.update_settings(UpdateAgencySettingsRequest(
        agency_name="Viajes Sierra",
        advance_payment_amount=30000,
    ))

    assert updated.id == defaults.id
    assert updated.agency_name == "Viajes Sierra"
    assert updated.advance_payment_amount == 30000
    assert updated.payment_mode == "test"

"""Unit tests for bus tickets, routes and trip search."""

from datetime import date, time
from uuid import uuid4

import pytest

from agency_api.core.exceptions import NotFoundError, SeatUnavailableError, ValidationError
from agency_api.models.route import BusSchedule
from agency_api.schemas.route import (
    CreateScheduleRequest,
    SaveRouteRequest,
    SearchTripsRequest,
    SegmentPrice,
)
from agency_api.services.bus_ticket_service import BusTicketService
from agency_api.services.client_service import ClientService
from agency_api.services.route_service import RouteService
from agency_api.services.seat_service import SeatService

SUNDAY = 0


@pytest.mark.asyncio
async def test_tickets_price_each_passenger_by_age(test_session, bus_tickets):
    adult, child = bus_tickets.tickets

    assert adult.fare == 50000
    assert child.fare == 25000
    assert bus_tickets.total.amount == 75000
    assert bus_tickets.advance.amount == 75000
    assert bus_tickets.status == "pending"
    assert bus_tickets.departure_time == time(7, 30)
    assert adult.ticket_code == f"{adult.passenger_id}_{bus_tickets.schedule_id}_1"


@pytest.mark.asyncio
async def test_first_passenger_signs_the_contract(test_session, bus_tickets):
    client = await ClientService(test_session).get_client_by_id_or_raise(bus_tickets.client_id)

    assert client.full_name == "Ana Ruiz"
    assert client.number_of_people == 2
    assert client.companions == [{"name": "Leo Ruiz", "age": 8}]
    assert client.tour_id is None


@pytest.mark.asyncio
async def test_tickets_book_schedule_seats(test_session, network, bus_tickets):
    service = SeatService(test_session)
    schedule = await service.get_schedule_or_raise(network.schedule.id)

    seat_map = await service.get_schedule_seat_map(schedule)

    assert seat_map.available_seats == 10


@pytest.mark.asyncio
async def test_seats_are_per_departure(test_session, network, bus_tickets, ticket_request):
    """The same seat on another departure of the same bus is still free."""
    express = ticket_request.model_copy(update={"schedule_id": network.express_schedule.id})

    response = await BusTicketService(test_session).create_tickets(express)

    assert [t.seat_number for t in response.tickets] == [1, 2]
    assert response.total.amount == 55000 + 27500


@pytest.mark.asyncio
async def test_taken_seat(test_session, bus_tickets, ticket_request):
    with pytest.raises(SeatUnavailableError):
        await BusTicketService(test_session).create_tickets(ticket_request)


@pytest.mark.asyncio
async def test_reversed_trip_is_not_sold(test_session, network, ticket_request):
    reversed_trip = ticket_request.model_copy(update={
        "origin_id": network.stop("Creel"),
        "destination_id": network.stop("Chihuahua"),
    })

    with pytest.raises(ValidationError):
        await BusTicketService(test_session).create_tickets(reversed_trip)


@pytest.mark.asyncio
async def test_departure_not_running_that_day(test_session, network, ticket_request):
    sunday_only = await RouteService(test_session).create_schedule(CreateScheduleRequest(
        route_id=network.route.id,
        departure_time=time(9, 0),
        day_of_week=[SUNDAY],
    ))
    test_session.expunge_all()

    with pytest.raises(ValidationError):
        await BusTicketService(test_session).create_tickets(
            ticket_request.model_copy(update={"schedule_id": sunday_only.id})
        )


@pytest.mark.asyncio
async def test_unknown_schedule(test_session, network, ticket_request):
    with pytest.raises(NotFoundError):
        await BusTicketService(test_session).create_tickets(
            ticket_request.model_copy(update={"schedule_id": uuid4()})
        )


def test_schedule_runs_on():
    schedule = BusSchedule(
        day_of_week=[1, 3, 5],
        is_active=True,
        effective_date_start=date(2026, 11, 1),
        effective_date_end=date(2026, 11, 30),
    )

    assert schedule.runs_on(date(2026, 11, 2))  # Monday
    assert not schedule.runs_on(date(2026, 11, 3))  # Tuesday
    assert not schedule.runs_on(date(2026, 12, 7))  # Monday, after the window
    schedule.is_active = False
    assert not schedule.runs_on(date(2026, 11, 2))


class TestRoutes:
    @pytest.mark.asyncio
    async def test_every_forward_pair_needs_a_fare(self, test_session, bus, network):
        chihuahua, cuauhtemoc, creel = (network.stop(n) for n in ("Chihuahua", "Cuauhtemoc", "Creel"))

        with pytest.raises(ValidationError) as exc_info:
            await RouteService(test_session).save_route(SaveRouteRequest(
                name="Incomplete",
                bus_id=bus.id,
                all_stops=[chihuahua, cuauhtemoc, creel],
                segments=[
                    SegmentPrice(start_destination_id=chihuahua, end_destination_id=creel,
                                 adult_price=50000),
                ],
            ))
        assert "Chihuahua -> Cuauhtemoc" in exc_info.value.problem_details["errors"]["unpriced"]

    @pytest.mark.asyncio
    async def test_new_route_is_saved_with_its_fares(self, test_session, bus, network):
        cuauhtemoc, creel = network.stop("Cuauhtemoc"), network.stop("Creel")

        route = await RouteService(test_session).save_route(SaveRouteRequest(
            name="Cuauhtemoc - Creel",
            bus_id=bus.id,
            all_stops=[cuauhtemoc, creel],
            segments=[
                SegmentPrice(start_destination_id=cuauhtemoc, end_destination_id=creel,
                             adult_price=22000, child_price=11000),
            ],
        ))

        assert route.bus.id == bus.id
        assert [s.adult_price for s in route.segments] == [22000]
        assert route.segment_for(cuauhtemoc, creel).route_id == route.id

    @pytest.mark.asyncio
    async def test_update_replaces_fares(self, test_session, bus, network):
        chihuahua, creel = network.stop("Chihuahua"), network.stop("Creel")

        route = await RouteService(test_session).save_route(SaveRouteRequest(
            route_id=network.express_route.id,
            name="Chihuahua - Creel Express",
            bus_id=bus.id,
            all_stops=[chihuahua, creel],
            segments=[
                SegmentPrice(start_destination_id=chihuahua, end_destination_id=creel,
                             adult_price=60000, child_price=30000),
            ],
        ))

        assert len(route.segments) == 1
        assert route.segment_for(chihuahua, creel).adult_price == 60000

    @pytest.mark.asyncio
    async def test_search_orders_by_departure(self, test_session, network, travel_date):
        options = await RouteService(test_session).search_trips(SearchTripsRequest(
            origin_id=network.stop("Chihuahua"),
            destination_id=network.stop("Creel"),
            travel_date=travel_date,
        ))

        assert [o.schedule_id for o in options] == [network.schedule.id, network.express_schedule.id]
        assert [o.adult_price for o in options] == [50000, 55000]
        assert options[0].origin_name == "Chihuahua"
        assert options[0].available_seats == 12

    @pytest.mark.asyncio
    async def test_search_intermediate_segment(self, test_session, network, travel_date):
        options = await RouteService(test_session).search_trips(SearchTripsRequest(
            origin_id=network.stop("Cuauhtemoc"),
            destination_id=network.stop("Creel"),
            travel_date=travel_date,
        ))

        assert len(options) == 1
        assert options[0].adult_price == 25000

    @pytest.mark.asyncio
    async def test_search_does_not_run_backwards(self, test_session, network, travel_date):
        options = await RouteService(test_session).search_trips(SearchTripsRequest(
            origin_id=network.stop("Creel"),
            destination_id=network.stop("Chihuahua"),
            travel_date=travel_date,
        ))

        assert options == []

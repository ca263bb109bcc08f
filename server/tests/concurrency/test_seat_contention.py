"""Contention tests: many customers competing for the same seats."""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from agency_api.core.exceptions import SeatUnavailableError
from agency_api.models.client import Client
from agency_api.models.seat import TourSeatAssignment
from agency_api.schemas.booking import Contractor, CreateTourBookingRequest
from agency_api.schemas.seat import ToggleTourSeatRequest
from agency_api.services.seat_service import SeatService
from agency_api.services.tour_booking_service import TourBookingService

pytestmark = pytest.mark.concurrency


def customer(i: int) -> Contractor:
    return Contractor(
        first_name=f"Customer{i}",
        last_name="Test",
        email=f"customer{i}@example.com",
        phone=f"61400000{i:02d}",
    )


@pytest.mark.asyncio
async def test_each_seat_is_sold_once(session_factory, tour):
    """Thirty customers, each in their own session, try for six seats."""
    outcomes = []
    for i in range(30):
        async with session_factory() as session:
            try:
                booking = await TourBookingService(session).create_booking(CreateTourBookingRequest(
                    tour_id=tour.id,
                    contractor=customer(i),
                    selected_seats=[i % 6 + 1],
                ))
                outcomes.append(booking.seats[0])
            except SeatUnavailableError:
                await session.rollback()

    assert sorted(outcomes) == [1, 2, 3, 4, 5, 6]

    async with session_factory() as session:
        seats = await session.execute(
            select(TourSeatAssignment.seat_number, func.count())
            .where(TourSeatAssignment.tour_id == tour.id)
            .group_by(TourSeatAssignment.seat_number)
        )
        assert all(count == 1 for _, count in seats.all())

        clients = await session.execute(select(func.count()).select_from(Client))
        assert clients.scalar_one() == 6


@pytest.mark.asyncio
async def test_unique_constraint_rejects_a_lost_race(session_factory, tour, tour_booking):
    """A writer that skipped the seat map check still cannot double-book."""
    async with session_factory() as session:
        session.add(TourSeatAssignment(
            tour_id=tour.id,
            seat_number=1,
            status="booked",
            client_id=uuid4(),
        ))

        with pytest.raises(SeatUnavailableError) as exc_info:
            await SeatService(session)._flush_or_conflict([1], kind="tour")

    assert exc_info.value.problem_details["reason"] == "taken by a concurrent booking"


@pytest.mark.asyncio
async def test_seat_toggle_losing_a_race_is_a_conflict(session_factory, tour):
    """A booking written between the toggle's read and its insert wins the seat."""
    async with session_factory() as session:
        session.add(TourSeatAssignment(
            tour_id=tour.id,
            seat_number=6,
            status="booked",
            client_id=uuid4(),
        ))

        with pytest.raises(SeatUnavailableError) as exc_info:
            await SeatService(session).toggle_tour_seat(
                tour, ToggleTourSeatRequest(tour_id=tour.id, seat_number=6)
            )

    assert exc_info.value.problem_details["seats"] == [6]

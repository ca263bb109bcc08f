"""Seat inventory service for tours and scheduled bus departures."""

import logging
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import acquire_inventory_lock
from ..core.exceptions import NotFoundError, SeatUnavailableError, ValidationError
from ..core.observability import metrics_collector
from ..domain import seating
from ..domain.seating import SeatStatus
from ..models.bus import Bus
from ..models.common import utcnow
from ..models.route import BusSchedule
from ..models.seat import BusSeatAssignment, TourSeatAssignment
from ..models.tour import Tour
from ..schemas.seat import SeatMapResponse, SeatState as SeatStateSchema, ToggleTourSeatRequest

logger = logging.getLogger(__name__)


class SeatMap:
    """Seats of one tour or schedule with the grid to draw them on."""

    def __init__(self, scope: str, scope_id: UUID, layout: Optional[seating.SeatLayout],
                 seats: list[seating.SeatState]):
        self.scope = scope
        self.scope_id = scope_id
        self.layout = layout
        self.seats = seats

    @property
    def available_seats(self) -> int:
        return seating.available_count(self.seats)

    def to_schema(self) -> SeatMapResponse:
        return SeatMapResponse(
            scope=self.scope,
            scope_id=self.scope_id,
            layout=self.layout,
            seats=[
                SeatStateSchema(seat_number=s.seat_number, status=s.status, client_id=s.client_id)
                for s in self.seats
            ],
            available_seats=self.available_seats,
        )


class SeatService:
    """
    Reads seat maps and writes seat assignments.

    Writers take the inventory lock for the tour or schedule, re-read the map,
    validate the selection against it and then write. The unique constraint on
    (tour_id|schedule_id, seat_number) rejects any race the lock misses.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # Tours

    async def _tour_seat_numbers(self, tour: Tour) -> tuple[Optional[seating.SeatLayout], list[int]]:
        layout = None
        if tour.bus_id:
            bus = await self.db.get(Bus, tour.bus_id)
            layout = bus.seat_layout if bus else None
        return layout, seating.layout_seat_numbers(layout, tour.bus_capacity)

    async def get_tour_seat_map(self, tour: Tour) -> SeatMap:
        layout, numbers = await self._tour_seat_numbers(tour)
        result = await self.db.execute(
            select(TourSeatAssignment).where(TourSeatAssignment.tour_id == tour.id)
        )
        return SeatMap("tour", tour.id, layout, seating.build_seat_map(numbers, result.scalars()))

    async def assign_tour_seats(self, tour: Tour, client_id: UUID, seats: list[int]) -> list[int]:
        """
        Book ``seats`` on ``tour`` for ``client_id`` inside the caller's transaction.

        Seats the client already holds may be selected again.

        Raises:
            SeatUnavailableError: If any seat is missing, taken or not for sale
        """
        await acquire_inventory_lock(self.db, f"tour:{tour.id}")
        seat_map = await self.get_tour_seat_map(tour)
        selection = self._validate(seat_map, seats, client_id, kind="tour")

        result = await self.db.execute(
            select(TourSeatAssignment).where(
                TourSeatAssignment.tour_id == tour.id,
                TourSeatAssignment.seat_number.in_(selection),
            )
        )
        existing = {row.seat_number: row for row in result.scalars()}
        now = utcnow()
        for seat_number in selection:
            row = existing.get(seat_number)
            if row is None:
                self.db.add(TourSeatAssignment(
                    tour_id=tour.id,
                    seat_number=seat_number,
                    status=SeatStatus.BOOKED.value,
                    client_id=client_id,
                    booked_at=now,
                ))
            else:
                row.status = SeatStatus.BOOKED.value
                row.client_id = client_id
                row.booked_at = now

        await self._flush_or_conflict(selection, kind="tour")
        return selection

    async def release_tour_seats(self, client_id: UUID, tour_id: Optional[UUID] = None,
                                 keep: Iterable[int] = ()) -> int:
        """Free the client's tour seats, except those in ``keep``."""
        stmt = (
            update(TourSeatAssignment)
            .where(
                TourSeatAssignment.client_id == client_id,
                TourSeatAssignment.status == SeatStatus.BOOKED.value,
            )
            .values(status=SeatStatus.AVAILABLE.value, client_id=None, booked_at=None, updated_at=utcnow())
        )
        if tour_id is not None:
            stmt = stmt.where(TourSeatAssignment.tour_id == tour_id)
        keep = list(keep)
        if keep:
            stmt = stmt.where(TourSeatAssignment.seat_number.not_in(keep))
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def client_tour_seats(self, client_ids: list[UUID]) -> dict[UUID, list[int]]:
        if not client_ids:
            return {}
        result = await self.db.execute(
            select(TourSeatAssignment.client_id, TourSeatAssignment.seat_number)
            .where(
                TourSeatAssignment.client_id.in_(client_ids),
                TourSeatAssignment.status == SeatStatus.BOOKED.value,
            )
            .order_by(TourSeatAssignment.seat_number)
        )
        seats: dict[UUID, list[int]] = {}
        for client_id, seat_number in result.all():
            seats.setdefault(client_id, []).append(seat_number)
        return seats

    async def toggle_tour_seat(self, tour: Tour, request: ToggleTourSeatRequest) -> TourSeatAssignment:
        """
        Block a free seat, or free a blocked or courtesy one.

        Raises:
            SeatUnavailableError: If the seat is booked by a client
            NotFoundError: If the seat is not on the tour's bus
        """
        await acquire_inventory_lock(self.db, f"tour:{tour.id}")
        _, numbers = await self._tour_seat_numbers(tour)
        if request.seat_number not in numbers:
            raise NotFoundError(resource_type="seat", resource_id=str(request.seat_number))

        result = await self.db.execute(
            select(TourSeatAssignment).where(
                TourSeatAssignment.tour_id == tour.id,
                TourSeatAssignment.seat_number == request.seat_number,
            )
        )
        row = result.scalar_one_or_none()
        current = SeatStatus(row.status) if row else SeatStatus.AVAILABLE

        try:
            new_status = seating.toggle_block(current, request.block_as)
        except seating.SeatSelectionError as e:
            raise SeatUnavailableError(
                seats=[request.seat_number],
                reason="reserved by a client",
            ) from e
        except ValueError as e:
            raise ValidationError(detail=str(e), errors={"block_as": request.block_as.value}) from e

        if row is None:
            row = TourSeatAssignment(tour_id=tour.id, seat_number=request.seat_number)
            self.db.add(row)
        row.status = new_status.value
        row.client_id = None
        await self._flush_or_conflict([request.seat_number], kind="tour")
        await self.db.commit()

        logger.info(
            "Tour seat toggled",
            extra={
                "tour_id": str(tour.id),
                "seat_number": request.seat_number,
                "from_status": current.value,
                "to_status": new_status.value
            }
        )
        return row

    # Scheduled departures

    async def get_schedule_or_raise(self, schedule_id: UUID) -> BusSchedule:
        result = await self.db.execute(select(BusSchedule).where(BusSchedule.id == schedule_id))
        schedule = result.scalar_one_or_none()
        if not schedule:
            logger.warning("Schedule not found", extra={"schedule_id": str(schedule_id)})
            raise NotFoundError(resource_type="bus schedule", resource_id=str(schedule_id))
        return schedule

    @staticmethod
    def _schedule_seat_numbers(schedule: BusSchedule) -> tuple[Optional[seating.SeatLayout], list[int]]:
        bus = schedule.route.bus
        if bus is None:
            raise ValidationError(detail=f"Route '{schedule.route.name}' has no bus assigned")
        return bus.seat_layout, seating.layout_seat_numbers(bus.seat_layout, bus.total_capacity)

    async def get_schedule_seat_map(self, schedule: BusSchedule) -> SeatMap:
        layout, numbers = self._schedule_seat_numbers(schedule)
        result = await self.db.execute(
            select(BusSeatAssignment).where(BusSeatAssignment.schedule_id == schedule.id)
        )
        return SeatMap("schedule", schedule.id, layout, seating.build_seat_map(numbers, result.scalars()))

    async def assign_bus_seats(self, schedule: BusSchedule, client_id: UUID, seats: list[int]) -> list[int]:
        """
        Book ``seats`` on a scheduled departure inside the caller's transaction.

        Raises:
            SeatUnavailableError: If any seat is missing, taken or not for sale
        """
        await acquire_inventory_lock(self.db, f"schedule:{schedule.id}")
        seat_map = await self.get_schedule_seat_map(schedule)
        selection = self._validate(seat_map, seats, client_id, kind="bus")

        result = await self.db.execute(
            select(BusSeatAssignment).where(
                BusSeatAssignment.schedule_id == schedule.id,
                BusSeatAssignment.seat_number.in_(selection),
            )
        )
        existing = {row.seat_number: row for row in result.scalars()}
        now = utcnow()
        for seat_number in selection:
            row = existing.get(seat_number)
            if row is None:
                self.db.add(BusSeatAssignment(
                    schedule_id=schedule.id,
                    seat_number=seat_number,
                    status=SeatStatus.BOOKED.value,
                    client_id=client_id,
                    booked_at=now,
                ))
            else:
                row.status = SeatStatus.BOOKED.value
                row.client_id = client_id
                row.booked_at = now

        await self._flush_or_conflict(selection, kind="bus")
        return selection

    async def release_bus_seat(self, schedule_id: UUID, seat_number: int) -> None:
        await self.db.execute(
            update(BusSeatAssignment)
            .where(
                BusSeatAssignment.schedule_id == schedule_id,
                BusSeatAssignment.seat_number == seat_number,
            )
            .values(status=SeatStatus.AVAILABLE.value, client_id=None, booked_at=None, updated_at=utcnow())
        )

    async def release_client_bus_seats(self, client_id: UUID) -> int:
        result = await self.db.execute(
            update(BusSeatAssignment)
            .where(
                BusSeatAssignment.client_id == client_id,
                BusSeatAssignment.status == SeatStatus.BOOKED.value,
            )
            .values(status=SeatStatus.AVAILABLE.value, client_id=None, booked_at=None, updated_at=utcnow())
        )
        return result.rowcount or 0

    # Helpers

    def _validate(self, seat_map: SeatMap, seats: list[int], client_id: UUID, kind: str) -> list[int]:
        try:
            return seating.validate_selection(seat_map.seats, seats, client_id)
        except seating.SeatSelectionError as e:
            metrics_collector.record_seat_conflict(kind)
            logger.warning(
                "Seat selection rejected",
                extra={
                    "scope": seat_map.scope,
                    "scope_id": str(seat_map.scope_id),
                    "seats": e.seats,
                    "reason": e.reason
                }
            )
            raise SeatUnavailableError(seats=e.seats, reason=e.reason) from e

    async def _flush_or_conflict(self, selection: list[int], kind: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            metrics_collector.record_seat_conflict(kind)
            logger.warning(
                "Seat assignment lost a race",
                extra={"seats": selection, "error": str(e.orig)}
            )
            raise SeatUnavailableError(seats=selection, reason="taken by a concurrent booking") from e

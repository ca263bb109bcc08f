"""Bus passenger edits: personal data, seat and departure changes."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, SeatUnavailableError, ValidationError
from ..domain import pricing
from ..models.client import Client, ClientStatus
from ..models.passenger import BusPassenger
from ..schemas.client import UpdatePassengerRequest
from .seat_service import SeatService

logger = logging.getLogger(__name__)


class PassengerService:
    """Service for bus passengers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.seat_service = SeatService(db)

    async def get_passenger_by_id_or_raise(self, passenger_id: UUID) -> BusPassenger:
        result = await self.db.execute(select(BusPassenger).where(BusPassenger.id == passenger_id))
        passenger = result.scalar_one_or_none()
        if not passenger:
            logger.warning("Passenger not found", extra={"passenger_id": str(passenger_id)})
            raise NotFoundError(resource_type="passenger", resource_id=str(passenger_id))
        return passenger

    async def update_passenger(self, request: UpdatePassengerRequest) -> tuple[BusPassenger, Client, int]:
        """
        Update a passenger and move them when the departure or seat changes.

        Returns the passenger, its client and the fare difference applied to
        the client's total.

        Raises:
            NotFoundError: If the passenger or schedule does not exist
            ValidationError: If not exactly one seat is selected, or the new
                route does not serve the passenger's trip
            SeatUnavailableError: If the new seat is held by someone else
        """
        if len(request.selected_seats) != 1:
            raise ValidationError(
                detail="A passenger holds exactly one seat",
                errors={"selected_seats": request.selected_seats}
            )
        new_seat = request.selected_seats[0]

        passenger = await self.get_passenger_by_id_or_raise(request.passenger_id)
        client = await self.db.get(Client, passenger.client_id)
        schedule = await self.seat_service.get_schedule_or_raise(request.schedule_id)

        schedule_changed = schedule.id != passenger.schedule_id
        fare_difference = 0
        new_fare = passenger.fare_amount
        if schedule_changed:
            segment = schedule.route.segment_for(passenger.origin_destination_id, passenger.destination_id)
            if segment is None:
                raise ValidationError(
                    detail=f"Route '{schedule.route.name}' does not serve this passenger's trip",
                    errors={"schedule_id": str(schedule.id)}
                )
            new_fare = pricing.fare_for_age(request.age, segment.adult_price, segment.child_price)
            fare_difference = new_fare - passenger.fare_amount

        if schedule_changed or new_seat != passenger.seat_number:
            await self._ensure_not_shared(passenger, schedule.id, new_seat)
            await self.seat_service.release_bus_seat(passenger.schedule_id, passenger.seat_number)
            await self.seat_service.assign_bus_seats(schedule, client.id, [new_seat])

        passenger.first_name = request.first_name
        passenger.last_name = request.last_name
        passenger.age = request.age
        passenger.identification_number = request.identification_number
        passenger.is_contractor = request.is_contractor
        passenger.email = str(request.email) if request.email else None
        passenger.phone = request.phone
        passenger.schedule_id = schedule.id
        passenger.seat_number = new_seat
        passenger.fare_amount = new_fare

        if fare_difference:
            client.total_amount = max(client.total_amount + fare_difference, 0)
            if client.total_paid == 0:
                client.advance_payment = client.total_amount
        if request.is_contractor:
            client.bus_route_id = schedule.route_id
            client.first_name = request.first_name
            client.last_name = request.last_name
            client.email = passenger.email
            client.phone = request.phone
        await self.db.commit()

        logger.info(
            "Passenger updated",
            extra={
                "passenger_id": str(passenger.id),
                "client_id": str(client.id),
                "schedule_id": str(schedule.id),
                "seat_number": new_seat,
                "fare_difference": fare_difference
            }
        )
        return passenger, client, fare_difference

    async def _ensure_not_shared(self, passenger: BusPassenger, schedule_id: UUID, seat_number: int) -> None:
        # Seats of the same client pass seat validation, so check fellow passengers here
        result = await self.db.execute(
            select(BusPassenger.id)
            .join(Client, Client.id == BusPassenger.client_id)
            .where(
                BusPassenger.schedule_id == schedule_id,
                BusPassenger.seat_number == seat_number,
                BusPassenger.id != passenger.id,
                Client.status != ClientStatus.CANCELLED.value,
            )
        )
        if result.first() is not None:
            raise SeatUnavailableError(seats=[seat_number], reason="held by another passenger")

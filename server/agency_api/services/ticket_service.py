"""Boarding ticket validation."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..core.observability import metrics_collector
from ..models.client import Client
from ..models.passenger import BusPassenger
from ..schemas.ticket import TicketDetails, UpdateBoardingRequest
from .passenger_service import PassengerService
from .route_service import RouteService
from .seat_service import SeatService

logger = logging.getLogger(__name__)


def parse_ticket_code(code: str) -> tuple[UUID, UUID, int]:
    """
    Split a QR payload ``<passenger_id>_<schedule_id>_<seat>``.

    Raises:
        ValueError: If the payload is malformed
    """
    parts = code.strip().split("_")
    if len(parts) != 3:
        raise ValueError("ticket code must have three parts")
    passenger_id, schedule_id, seat = parts
    seat_number = int(seat)
    if seat_number <= 0:
        raise ValueError("seat number must be positive")
    return UUID(passenger_id), UUID(schedule_id), seat_number


class TicketService:
    """Service used by drivers and staff at boarding."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.passenger_service = PassengerService(db)

    async def validate_ticket(self, ticket_code: str) -> TicketDetails:
        """
        Resolve a scanned ticket to the passenger's trip.

        Raises:
            ValidationError: If the code is malformed or outdated
            NotFoundError: If the passenger no longer exists
        """
        try:
            passenger_id, schedule_id, seat_number = parse_ticket_code(ticket_code)
        except ValueError as e:
            raise ValidationError(detail="Invalid ticket code", errors={"ticket_code": str(e)}) from e

        passenger = await self.passenger_service.get_passenger_by_id_or_raise(passenger_id)
        if passenger.schedule_id != schedule_id or passenger.seat_number != seat_number:
            logger.warning(
                "Outdated ticket scanned",
                extra={"passenger_id": str(passenger_id), "ticket_code": ticket_code}
            )
            raise ValidationError(
                detail="This ticket no longer matches the passenger's departure or seat",
                errors={"ticket_code": ticket_code}
            )
        return await self._details(passenger)

    async def update_boarding(self, request: UpdateBoardingRequest) -> TicketDetails:
        passenger = await self.passenger_service.get_passenger_by_id_or_raise(request.passenger_id)
        previous = passenger.boarding_status
        passenger.boarding_status = request.boarding_status
        await self.db.commit()

        metrics_collector.record_boarding(request.boarding_status)
        logger.info(
            "Boarding status updated",
            extra={
                "passenger_id": str(passenger.id),
                "from_status": previous,
                "to_status": request.boarding_status
            }
        )
        return await self._details(passenger)

    async def _details(self, passenger: BusPassenger) -> TicketDetails:
        client = await self.db.get(Client, passenger.client_id)
        schedule = await SeatService(self.db).get_schedule_or_raise(passenger.schedule_id)
        names = await RouteService(self.db).destination_names(
            [passenger.origin_destination_id, passenger.destination_id]
        )
        return TicketDetails(
            passenger_id=passenger.id,
            full_name=passenger.full_name,
            age=passenger.age,
            identification_number=passenger.identification_number,
            contract_number=client.contract_number,
            client_status=client.status,
            route_name=schedule.route.name,
            origin_name=names.get(passenger.origin_destination_id, "N/A"),
            destination_name=names.get(passenger.destination_id, "N/A"),
            schedule_id=schedule.id,
            departure_time=schedule.departure_time,
            seat_number=passenger.seat_number,
            boarding_status=passenger.boarding_status,
        )

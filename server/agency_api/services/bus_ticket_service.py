"""Public bus ticket purchase on a scheduled departure."""

import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import ValidationError
from ..core.observability import metrics_collector
from ..domain import occupancy, pricing
from ..models.client import Client, ClientStatus
from ..models.passenger import BusPassenger
from ..schemas.booking import BusTicketResponse, CreateBusTicketRequest, IssuedTicket
from ..schemas.common import Money
from .seat_service import SeatService
from .tour_booking_service import generate_contract_number

logger = logging.getLogger(__name__)


class BusTicketService:
    """Service for selling seats on scheduled bus departures."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.seat_service = SeatService(db)

    async def create_tickets(self, request: CreateBusTicketRequest) -> BusTicketResponse:
        """
        Issue one ticket per passenger in a single transaction.

        The first passenger signs the contract. Each passenger pays the
        segment's adult or child fare according to their age.

        Raises:
            NotFoundError: If the schedule does not exist
            ValidationError: If the trip is not sold on that date or a seat repeats
            SeatUnavailableError: If a seat cannot be booked
        """
        schedule = await self.seat_service.get_schedule_or_raise(request.schedule_id)
        route = schedule.route

        if not route.is_active or not schedule.runs_on(request.travel_date):
            raise ValidationError(
                detail="The selected departure does not run on that date",
                errors={"travel_date": request.travel_date.isoformat()}
            )
        segment = route.segment_for(request.origin_id, request.destination_id)
        if segment is None:
            raise ValidationError(
                detail=f"Route '{route.name}' does not sell that origin and destination",
                errors={
                    "origin_id": str(request.origin_id),
                    "destination_id": str(request.destination_id)
                }
            )

        seats = [p.seat_number for p in request.passengers]
        fares = [
            pricing.fare_for_age(p.age, segment.adult_price, segment.child_price)
            for p in request.passengers
        ]
        adults, children = occupancy.count_party(p.age for p in request.passengers)
        total = pricing.bus_ticket_total(adults, children, segment.adult_price, segment.child_price)
        # The first confirmation settles a ticket in full
        advance = total

        contractor = request.passengers[0]
        client = Client(
            id=uuid4(),
            contract_number=await generate_contract_number(self.db),
            first_name=contractor.first_name,
            last_name=contractor.last_name,
            email=str(contractor.email),
            phone=contractor.phone,
            identification_number=contractor.identification_number,
            contractor_age=contractor.age,
            bus_route_id=route.id,
            number_of_people=len(request.passengers),
            companions=[
                {"name": f"{p.first_name} {p.last_name}", "age": p.age}
                for p in request.passengers[1:]
            ],
            extra_services=[],
            room_details=occupancy.RoomDetails().as_dict(),
            total_amount=total,
            advance_payment=advance,
            total_paid=0,
            payment_method=request.payment_method.value,
            status=ClientStatus.PENDING.value,
        )
        self.db.add(client)
        await self.db.flush()

        await self.seat_service.assign_bus_seats(schedule, client.id, seats)

        passengers = []
        for index, (item, fare) in enumerate(zip(request.passengers, fares)):
            passenger = BusPassenger(
                id=uuid4(),
                client_id=client.id,
                schedule_id=schedule.id,
                seat_number=item.seat_number,
                first_name=item.first_name,
                last_name=item.last_name,
                age=item.age,
                identification_number=item.identification_number,
                is_contractor=index == 0,
                email=str(item.email) if item.email else None,
                phone=item.phone,
                origin_destination_id=request.origin_id,
                destination_id=request.destination_id,
                fare_amount=fare,
            )
            self.db.add(passenger)
            passengers.append(passenger)
        await self.db.commit()

        metrics_collector.record_booking_created("bus", len(seats))
        logger.info(
            "Bus tickets issued",
            extra={
                "client_id": str(client.id),
                "contract_number": client.contract_number,
                "schedule_id": str(schedule.id),
                "seats": seats,
                "adults": adults,
                "total_amount": total
            }
        )

        return BusTicketResponse(
            client_id=client.id,
            contract_number=client.contract_number,
            status=client.status,
            schedule_id=schedule.id,
            travel_date=request.travel_date,
            departure_time=schedule.departure_time,
            tickets=[
                IssuedTicket(
                    passenger_id=p.id,
                    full_name=p.full_name,
                    seat_number=p.seat_number,
                    fare=p.fare_amount,
                    ticket_code=p.ticket_code,
                )
                for p in passengers
            ],
            total=Money(amount=total, currency=settings.currency),
            advance=Money(amount=advance, currency=settings.currency),
        )


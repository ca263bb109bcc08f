"""Public tour booking: quote a party, then reserve seats and create the contract."""

import logging
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import SeatCountMismatchError, ValidationError
from ..core.observability import metrics_collector
from ..domain import occupancy, pricing
from ..models.client import Client, ClientStatus
from ..models.tour import Tour
from ..schemas.booking import (
    CreateTourBookingRequest,
    ExtraServiceLine,
    ExtraServiceRequest,
    RoomDetailsOut,
    TourBookingResponse,
    TourQuote,
    TourQuoteRequest,
)
from ..schemas.common import Money
from .provider_service import ProviderService
from .seat_service import SeatService
from .tour_service import TourService, tour_rates

logger = logging.getLogger(__name__)

CONTRACT_NUMBER_ATTEMPTS = 5


async def generate_contract_number(db: AsyncSession) -> str:
    """Eight upper-case hex characters, unique among clients."""
    for _ in range(CONTRACT_NUMBER_ATTEMPTS):
        candidate = uuid4().hex[:8].upper()
        result = await db.execute(
            select(func.count()).select_from(Client).where(Client.contract_number == candidate)
        )
        if result.scalar_one() == 0:
            return candidate
    raise RuntimeError("could not generate a unique contract number")


class PartyQuote:
    """Intermediate pricing of a party, before it is turned into a response."""

    def __init__(self, tour: Tour, ages: list[int | None], extras: list[dict],
                 extra_lines: list[pricing.ExtraLine]):
        self.tour = tour
        self.people = len(ages)
        self.rooms, self.adults, self.children = occupancy.allocate_party_rooms(ages)
        self.extras = extras
        self.total = pricing.tour_booking_total(
            self.rooms, self.children, tour_rates(tour), extra_lines
        )
        self.advance = min(
            pricing.advance_due(self.people, tour.advance_payment_per_person),
            self.total,
        )

    def to_schema(self) -> TourQuote:
        return TourQuote(
            tour_id=self.tour.id,
            number_of_people=self.people,
            adults=self.adults,
            children=self.children,
            room_details=RoomDetailsOut(**self.rooms.as_dict()),
            rooms_summary=occupancy.describe_rooms(self.rooms),
            extras=[ExtraServiceLine(**line) for line in self.extras],
            total=Money(amount=self.total, currency=settings.currency),
            advance=Money(amount=self.advance, currency=settings.currency),
        )


class TourBookingService:
    """Service for public tour reservations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tour_service = TourService(db)
        self.seat_service = SeatService(db)
        self.provider_service = ProviderService(db)

    async def price_party(self, tour: Tour, ages: list[int | None],
                          extra_services: list[ExtraServiceRequest]) -> PartyQuote:
        for age in ages:
            try:
                occupancy.validate_age(age)
            except ValueError as e:
                raise ValidationError(detail=str(e), errors={"age": age}) from e
        extras, lines = await self.provider_service.price_extras(extra_services)
        return PartyQuote(tour, ages, extras, lines)

    async def quote(self, request: TourQuoteRequest) -> TourQuote:
        tour = await self._bookable_tour(request.tour_id)
        ages = [request.contractor_age] + [c.age for c in request.companions]
        party = await self.price_party(tour, ages, request.extra_services)
        return party.to_schema()

    async def create_booking(self, request: CreateTourBookingRequest) -> TourBookingResponse:
        """
        Reserve seats and create a pending client in one transaction.

        Raises:
            NotFoundError: If the tour or an extra's provider does not exist
            ValidationError: If the tour is closed or a field is invalid
            SeatCountMismatchError: If seats differ from the number of travellers
            SeatUnavailableError: If a selected seat cannot be booked
        """
        tour = await self._bookable_tour(request.tour_id)

        people = 1 + len(request.companions)
        if len(request.selected_seats) != people:
            raise SeatCountMismatchError(selected_seats=len(request.selected_seats), people=people)

        ages = [request.contractor.age] + [c.age for c in request.companions]
        party = await self.price_party(tour, ages, request.extra_services)

        contractor = request.contractor
        client = Client(
            id=uuid4(),
            contract_number=await generate_contract_number(self.db),
            first_name=contractor.first_name,
            last_name=contractor.last_name,
            email=str(contractor.email),
            phone=contractor.phone,
            address=contractor.address,
            identification_number=contractor.identification_number,
            contractor_age=contractor.age,
            tour_id=tour.id,
            number_of_people=people,
            companions=[c.model_dump() for c in request.companions],
            extra_services=party.extras,
            room_details=party.rooms.as_dict(),
            total_amount=party.total,
            advance_payment=party.advance,
            total_paid=0,
            payment_method=request.payment_method.value,
            status=ClientStatus.PENDING.value,
        )
        self.db.add(client)
        await self.db.flush()

        seats = await self.seat_service.assign_tour_seats(tour, client.id, request.selected_seats)
        await self.db.commit()

        metrics_collector.record_booking_created("tour", len(seats))
        logger.info(
            "Tour booking created",
            extra={
                "client_id": str(client.id),
                "contract_number": client.contract_number,
                "tour_id": str(tour.id),
                "seats": seats,
                "total_amount": party.total,
                "rooms": party.rooms.as_dict()
            }
        )

        return TourBookingResponse(
            client_id=client.id,
            contract_number=client.contract_number,
            status=client.status,
            seats=seats,
            quote=party.to_schema(),
        )

    async def _bookable_tour(self, tour_id: UUID) -> Tour:
        tour = await self.tour_service.get_tour_by_id_or_raise(tour_id)
        if not tour.is_active:
            raise ValidationError(detail=f"Tour '{tour.title}' is not open for booking")
        return tour

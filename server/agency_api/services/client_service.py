"""Back-office client management: save, list, cancel and passenger lists."""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, SeatCountMismatchError, ValidationError
from ..core.observability import metrics_collector
from ..models.client import Client, ClientStatus
from ..schemas.client import (
    ListClientsRequest,
    PaxEntry,
    PaxListResponse,
    SaveClientRequest,
)
from .seat_service import SeatService
from .tour_booking_service import TourBookingService, generate_contract_number
from .tour_service import TourService

logger = logging.getLogger(__name__)


class ClientService:
    """Service for client records edited by agency staff."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.seat_service = SeatService(db)
        self.tour_service = TourService(db)

    async def save_client(self, request: SaveClientRequest) -> Client:
        """
        Create or update a tour client.

        Party size, rooms and total are recomputed from the tour's current
        rates; amounts typed into the form are never trusted.

        Raises:
            NotFoundError: If the client, tour or a provider does not exist
            ValidationError: If the amounts paid do not fit the new total, or a
                cancelled client is given seats
            SeatCountMismatchError: If the given or currently held seats do not
                match the party size
            SeatUnavailableError: If a new seat is held by another client
        """
        tour = await self.tour_service.get_tour_by_id_or_raise(request.tour_id)
        ages = [request.contractor_age] + [c.age for c in request.companions]
        party = await TourBookingService(self.db).price_party(tour, ages, request.extra_services)

        if request.total_paid > party.total:
            raise ValidationError(
                detail="Total paid cannot exceed the total amount",
                errors={"total_paid": request.total_paid, "total_amount": party.total}
            )
        if request.selected_seats is not None and len(request.selected_seats) != party.people:
            raise SeatCountMismatchError(selected_seats=len(request.selected_seats), people=party.people)
        cancelled = request.status == ClientStatus.CANCELLED.value
        if cancelled and request.selected_seats:
            raise ValidationError(
                detail="A cancelled client cannot hold seats",
                errors={"status": request.status, "selected_seats": request.selected_seats}
            )

        if request.client_id:
            client = await self.get_client_by_id_or_raise(request.client_id)
            tour_changed = client.tour_id is not None and client.tour_id != tour.id
            if request.selected_seats is None and not cancelled:
                held = (await self.seat_service.client_tour_seats([client.id])).get(client.id, [])
                # Seats held on the old tour cannot carry over
                if held and (tour_changed or len(held) != party.people):
                    raise SeatCountMismatchError(
                        selected_seats=0 if tour_changed else len(held), people=party.people
                    )
            if tour_changed:
                await self.seat_service.release_tour_seats(client.id, tour_id=client.tour_id)
            created = False
        else:
            client = Client(id=uuid4(), contract_number=await generate_contract_number(self.db))
            self.db.add(client)
            created = True

        client.first_name = request.first_name
        client.last_name = request.last_name
        client.email = str(request.email) if request.email else None
        client.phone = request.phone
        client.address = request.address
        client.identification_number = request.identification_number
        client.contractor_age = request.contractor_age
        client.tour_id = tour.id
        client.number_of_people = party.people
        client.companions = [c.model_dump() for c in request.companions]
        client.extra_services = party.extras
        client.room_details = party.rooms.as_dict()
        client.total_amount = party.total
        client.advance_payment = request.advance_payment
        client.total_paid = request.total_paid
        client.status = request.status
        await self.db.flush()

        if cancelled:
            await self.seat_service.release_tour_seats(client.id)
            await self.seat_service.release_client_bus_seats(client.id)
        elif request.selected_seats is not None:
            await self.seat_service.release_tour_seats(
                client.id, tour_id=tour.id, keep=request.selected_seats
            )
            await self.seat_service.assign_tour_seats(tour, client.id, request.selected_seats)
        await self.db.commit()

        if created:
            metrics_collector.record_booking_created("tour", len(request.selected_seats or []))
        logger.info(
            "Client saved",
            extra={
                "client_id": str(client.id),
                "contract_number": client.contract_number,
                "created": created,
                "total_amount": client.total_amount,
                "total_paid": client.total_paid
            }
        )
        return client

    async def get_client_by_id(self, client_id: UUID) -> Optional[Client]:
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def get_client_by_id_or_raise(self, client_id: UUID) -> Client:
        """
        Get client by ID or raise NotFoundError.

        Raises:
            NotFoundError: If client not found
        """
        client = await self.get_client_by_id(client_id)
        if not client:
            logger.warning("Client not found", extra={"client_id": str(client_id)})
            raise NotFoundError(resource_type="client", resource_id=str(client_id))
        return client

    async def list_clients(self, request: ListClientsRequest) -> tuple[list[Client], Optional[str]]:
        """List clients ordered by id, one page at a time."""
        stmt = select(Client)
        if request.tour_id:
            stmt = stmt.where(Client.tour_id == request.tour_id)
        if request.status:
            stmt = stmt.where(Client.status == request.status)
        if request.cursor:
            try:
                stmt = stmt.where(Client.id > UUID(request.cursor))
            except ValueError:
                logger.warning("Invalid cursor in client listing", extra={"cursor": request.cursor})
        stmt = stmt.order_by(Client.id).limit(request.limit + 1)

        result = await self.db.execute(stmt)
        clients = list(result.scalars())
        next_cursor = None
        if len(clients) > request.limit:
            clients = clients[:request.limit]
            next_cursor = str(clients[-1].id)
        return clients, next_cursor

    async def cancel_client(self, client_id: UUID, reason: Optional[str] = None) -> Client:
        """
        Cancel a client and give back every seat it holds.

        Raises:
            NotFoundError: If client not found
            ValidationError: If the client is already cancelled or completed
        """
        client = await self.get_client_by_id_or_raise(client_id)
        if client.status in (ClientStatus.CANCELLED.value, ClientStatus.COMPLETED.value):
            raise ValidationError(
                detail=f"Client cannot be cancelled in status '{client.status}'",
                errors={"status": client.status}
            )

        tour_seats = await self.seat_service.release_tour_seats(client.id)
        bus_seats = await self.seat_service.release_client_bus_seats(client.id)
        client.status = ClientStatus.CANCELLED.value
        await self.db.commit()

        metrics_collector.record_booking_cancelled()
        logger.info(
            "Client cancelled",
            extra={
                "client_id": str(client.id),
                "contract_number": client.contract_number,
                "released_tour_seats": tour_seats,
                "released_bus_seats": bus_seats,
                "reason": reason
            }
        )
        return client

    async def pax_list(self, tour_id: UUID) -> PaxListResponse:
        """Everyone travelling on a tour, with their seats."""
        tour = await self.tour_service.get_tour_by_id_or_raise(tour_id)
        result = await self.db.execute(
            select(Client)
            .where(Client.tour_id == tour.id, Client.status != ClientStatus.CANCELLED.value)
            .order_by(Client.last_name, Client.first_name)
        )
        clients = list(result.scalars())
        seats = await self.seat_service.client_tour_seats([c.id for c in clients])

        items = [
            PaxEntry(
                client_id=client.id,
                contract_number=client.contract_number,
                contractor_name=client.full_name,
                phone=client.phone,
                number_of_people=client.number_of_people,
                companions=[c.get("name", "") for c in client.companions],
                seats=seats.get(client.id, []),
                status=client.status,
                remaining_balance=client.remaining_balance,
            )
            for client in clients
        ]
        return PaxListResponse(
            tour_id=tour.id,
            tour_title=tour.title,
            total_passengers=sum(item.number_of_people for item in items),
            items=items,
        )

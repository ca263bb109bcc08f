"""Hotel quote service."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..domain import pricing
from ..models.hotel import Hotel
from ..schemas.hotel import CheapestHotelRequest, CreateHotelRequest
from ..schemas.hotel import Hotel as HotelSchema

logger = logging.getLogger(__name__)


def quote_total(hotel: Hotel) -> int:
    return pricing.hotel_quote_total(
        {room_type: hotel.rooms(room_type) for room_type in pricing.ROOM_TYPES},
        {room_type: hotel.cost_per_night(room_type) for room_type in pricing.ROOM_TYPES},
        hotel.num_nights_quoted,
    )


def to_schema(hotel: Hotel) -> HotelSchema:
    total = quote_total(hotel)
    return HotelSchema(
        id=hotel.id,
        name=hotel.name,
        location=hotel.location,
        quoted_date=hotel.quoted_date,
        num_nights_quoted=hotel.num_nights_quoted,
        cost_per_night_double=hotel.cost_per_night_double,
        cost_per_night_triple=hotel.cost_per_night_triple,
        cost_per_night_quad=hotel.cost_per_night_quad,
        capacity_double=hotel.capacity_double,
        capacity_triple=hotel.capacity_triple,
        capacity_quad=hotel.capacity_quad,
        num_double_rooms=hotel.num_double_rooms,
        num_triple_rooms=hotel.num_triple_rooms,
        num_quad_rooms=hotel.num_quad_rooms,
        advance_payment=hotel.advance_payment,
        total_paid=hotel.total_paid,
        total_quote_cost=total,
        remaining_payment=pricing.remaining_balance(total, hotel.total_paid),
        is_active=hotel.is_active,
    )


class HotelService:
    """Service for hotel quote operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_hotel(self, request: CreateHotelRequest) -> Hotel:
        hotel = Hotel(**request.model_dump())
        self.db.add(hotel)
        await self.db.commit()

        logger.info(
            "Hotel quote created",
            extra={"hotel_id": str(hotel.id), "total_quote_cost": quote_total(hotel)}
        )
        return hotel

    async def get_hotels_by_ids(self, hotel_ids: list[UUID]) -> dict[UUID, Hotel]:
        if not hotel_ids:
            return {}
        result = await self.db.execute(select(Hotel).where(Hotel.id.in_(hotel_ids)))
        return {hotel.id: hotel for hotel in result.scalars()}

    async def find_cheapest(self, request: CheapestHotelRequest) -> tuple[Hotel, int, int]:
        """
        Pick the active quote with the lowest double-room cost for the stay.

        Returns:
            (hotel, nights, estimated double-room cost)

        Raises:
            NotFoundError: If there are no active quotes
        """
        nights = (request.return_date - request.departure_date).days

        result = await self.db.execute(select(Hotel).where(Hotel.is_active.is_(True)))
        hotels = list(result.scalars())
        if not hotels:
            raise NotFoundError(
                resource_type="hotel quote",
                detail="There are no active hotel quotes to compare"
            )

        cheapest = min(
            hotels,
            key=lambda h: (
                pricing.estimate_stay_cost(h.cost_per_night_double, h.num_nights_quoted, nights),
                h.name,
            ),
        )
        estimate = pricing.estimate_stay_cost(
            cheapest.cost_per_night_double, cheapest.num_nights_quoted, nights
        )

        logger.info(
            "Cheapest hotel quote selected",
            extra={
                "hotel_id": str(cheapest.id),
                "nights": nights,
                "estimated_cost": estimate,
                "candidates": len(hotels)
            }
        )
        return cheapest, nights, estimate

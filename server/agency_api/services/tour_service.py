"""Tour service for business logic operations."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..domain import pricing
from ..models.tour import Tour
from ..schemas.tour import CreateTourRequest, GetTourRequest, ListToursRequest
from .agency_service import AgencyService
from .bus_service import BusService
from .hotel_service import HotelService

logger = logging.getLogger(__name__)


def tour_rates(tour: Tour) -> pricing.TourRates:
    return pricing.TourRates(
        double=tour.selling_price_double,
        triple=tour.selling_price_triple,
        quad=tour.selling_price_quad,
        child=tour.selling_price_child,
    )


class TourService:
    """Service for tour-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_tour(self, request: CreateTourRequest) -> Tour:
        """
        Create a new tour and compute its cost breakdown.

        Args:
            request: Tour creation request

        Returns:
            Created tour entity

        Raises:
            ConflictError: If a tour with the same slug already exists
            NotFoundError: If the bus or a hotel quote does not exist
            ValidationError: If capacity cannot be determined or courtesies exceed it
        """
        existing_tour = await self.get_tour_by_slug(request.slug)
        if existing_tour:
            logger.warning(
                "Tour creation failed - slug already exists",
                extra={"slug": request.slug, "existing_tour_id": str(existing_tour.id)}
            )
            raise ConflictError(
                detail=f"Tour with slug '{request.slug}' already exists",
                conflicting_resource={"id": str(existing_tour.id), "slug": existing_tour.slug}
            )

        bus_capacity = request.bus_capacity
        if request.bus_id:
            bus = await BusService(self.db).get_bus_by_id_or_raise(request.bus_id)
            bus_capacity = bus_capacity or bus.total_capacity
        if not bus_capacity:
            raise ValidationError(
                detail="Bus capacity is required when no bus is assigned",
                errors={"bus_capacity": "must be greater than 0"}
            )
        if request.courtesies >= bus_capacity:
            raise ValidationError(
                detail="Courtesies must be fewer than the bus capacity",
                errors={"courtesies": f"must be below {bus_capacity}"}
            )

        breakdown = await self._cost_breakdown(request, bus_capacity)

        advance = request.advance_payment_per_person
        if advance is None:
            advance = (await AgencyService(self.db).get_settings()).advance_payment_amount

        tour = Tour(
            title=request.title,
            slug=request.slug,
            description=request.description,
            departure_date=request.departure_date,
            return_date=request.return_date,
            bus_id=request.bus_id,
            bus_capacity=bus_capacity,
            bus_cost=request.bus_cost,
            courtesies=request.courtesies,
            hotel_details=[d.model_dump(mode="json") for d in request.hotel_details],
            provider_details=[d.model_dump(mode="json") for d in request.provider_details],
            total_base_cost=breakdown.total_base_cost,
            paying_clients_count=breakdown.paying_clients_count,
            cost_per_paying_person=breakdown.cost_per_paying_person,
            selling_price_double=request.selling_price_double,
            selling_price_triple=request.selling_price_triple,
            selling_price_quad=request.selling_price_quad,
            selling_price_child=request.selling_price_child,
            advance_payment_per_person=advance,
        )

        try:
            self.db.add(tour)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Tour creation failed due to integrity constraint",
                extra={"slug": request.slug, "error": str(e)}
            )
            raise ConflictError(detail=f"Tour with slug '{request.slug}' could not be created") from e

        logger.info(
            "Tour created successfully",
            extra={
                "tour_id": str(tour.id),
                "slug": tour.slug,
                "total_base_cost": tour.total_base_cost,
                "cost_per_paying_person": tour.cost_per_paying_person
            }
        )
        return tour

    async def _cost_breakdown(self, request: CreateTourRequest, bus_capacity: int) -> pricing.CostBreakdown:
        hotels = await HotelService(self.db).get_hotels_by_ids(
            [detail.hotel_quote_id for detail in request.hotel_details]
        )
        hotel_lines = []
        for detail in request.hotel_details:
            hotel = hotels.get(detail.hotel_quote_id)
            if hotel is None:
                raise NotFoundError(resource_type="hotel quote", resource_id=str(detail.hotel_quote_id))
            hotel_lines.append(pricing.HotelLine(
                cost_per_night=hotel.cost_per_night(detail.room_type),
                nights=hotel.num_nights_quoted,
                room_capacity=hotel.capacity(detail.room_type),
            ))

        return pricing.tour_cost_breakdown(
            bus_cost=request.bus_cost,
            bus_capacity=bus_capacity,
            courtesies=request.courtesies,
            provider_costs=[p.cost for p in request.provider_details],
            hotel_lines=hotel_lines,
        )

    async def get_tour(self, request: GetTourRequest) -> Tour:
        if request.tour_id:
            return await self.get_tour_by_id_or_raise(request.tour_id)
        tour = await self.get_tour_by_slug(request.slug)
        if not tour:
            raise NotFoundError(resource_type="tour", resource_id=request.slug)
        return tour

    async def list_tours(self, request: ListToursRequest) -> tuple[list[Tour], Optional[str]]:
        """List tours ordered by id, one page at a time."""
        stmt = select(Tour)
        if request.active_only:
            stmt = stmt.where(Tour.is_active.is_(True))
        if request.cursor:
            try:
                stmt = stmt.where(Tour.id > UUID(request.cursor))
            except ValueError:
                logger.warning("Invalid cursor in tour listing", extra={"cursor": request.cursor})
        stmt = stmt.order_by(Tour.id).limit(request.limit + 1)

        result = await self.db.execute(stmt)
        tours = list(result.scalars())
        next_cursor = None
        if len(tours) > request.limit:
            tours = tours[:request.limit]
            next_cursor = str(tours[-1].id)
        return tours, next_cursor

    async def get_tour_by_id(self, tour_id: UUID) -> Optional[Tour]:
        """
        Get tour by ID.

        Args:
            tour_id: Tour ID to search for

        Returns:
            Tour if found, None otherwise
        """
        stmt = select(Tour).where(Tour.id == tour_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_tour_by_slug(self, slug: str) -> Optional[Tour]:
        stmt = select(Tour).where(Tour.slug == slug)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_tour_by_id_or_raise(self, tour_id: UUID) -> Tour:
        """
        Get tour by ID or raise NotFoundError.

        Raises:
            NotFoundError: If tour not found
        """
        tour = await self.get_tour_by_id(tour_id)
        if not tour:
            logger.warning("Tour not found", extra={"tour_id": str(tour_id)})
            raise NotFoundError(resource_type="tour", resource_id=str(tour_id))
        return tour

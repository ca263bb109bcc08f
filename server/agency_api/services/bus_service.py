"""Bus service: buses and their seat layouts."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..domain import seating
from ..models.bus import Bus
from ..schemas.bus import CreateBusRequest, UpdateBusLayoutRequest
from ..schemas.seat import LayoutPreviewRequest

logger = logging.getLogger(__name__)


def _plain_layout(layout) -> seating.SeatLayout:
    return [[cell.model_dump(mode="json", exclude_none=True) for cell in row] for row in layout]


class BusService:
    """Service for bus and seat layout operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def preview_layout(request: LayoutPreviewRequest) -> tuple[seating.SeatLayout, int]:
        """
        Apply grid edits and return the renumbered layout with its seat count.

        Raises:
            ValidationError: If an edit falls outside the grid
        """
        layout = _plain_layout(request.layout)
        try:
            if request.rows or request.cols:
                rows = request.rows or len(layout)
                cols = request.cols or max((len(r) for r in layout), default=0)
                layout = seating.resize_layout(layout, rows, cols)
            else:
                layout = seating.renumber_seats(layout)
            for edit in request.edits:
                layout = seating.set_cell(layout, edit.row, edit.col, edit.type)
        except seating.LayoutError as e:
            raise ValidationError(detail=str(e)) from e
        return layout, seating.count_seats(layout)

    async def create_bus(self, request: CreateBusRequest) -> Bus:
        """
        Create a bus. With a layout, capacity is the layout's seat count.

        Raises:
            ValidationError: If neither a layout with seats nor a capacity is given
        """
        layout = None
        capacity = request.total_capacity
        if request.seat_layout:
            layout = seating.renumber_seats(_plain_layout(request.seat_layout))
            capacity = seating.count_seats(layout)

        if not capacity:
            raise ValidationError(
                detail="A bus needs a seat layout with seats or a total capacity",
                errors={"total_capacity": "required when the layout has no seats"}
            )

        bus = Bus(
            name=request.name,
            license_plate=request.license_plate,
            rental_cost=request.rental_cost,
            total_capacity=capacity,
            seat_layout=layout,
        )
        self.db.add(bus)
        await self.db.commit()

        logger.info(
            "Bus created",
            extra={"bus_id": str(bus.id), "capacity": capacity, "has_layout": layout is not None}
        )
        return bus

    async def update_layout(self, request: UpdateBusLayoutRequest) -> Bus:
        bus = await self.get_bus_by_id_or_raise(request.bus_id)
        layout = seating.renumber_seats(_plain_layout(request.seat_layout))
        seat_count = seating.count_seats(layout)
        if seat_count == 0:
            raise ValidationError(detail="The layout must contain at least one seat")

        bus.seat_layout = layout
        bus.total_capacity = seat_count
        await self.db.commit()

        logger.info("Bus layout updated", extra={"bus_id": str(bus.id), "capacity": seat_count})
        return bus

    async def get_bus_by_id(self, bus_id: UUID) -> Optional[Bus]:
        result = await self.db.execute(select(Bus).where(Bus.id == bus_id))
        return result.scalar_one_or_none()

    async def get_bus_by_id_or_raise(self, bus_id: UUID) -> Bus:
        bus = await self.get_bus_by_id(bus_id)
        if not bus:
            logger.warning("Bus not found", extra={"bus_id": str(bus_id)})
            raise NotFoundError(resource_type="bus", resource_id=str(bus_id))
        return bus

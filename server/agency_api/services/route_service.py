"""Bus network service: destinations, routes, schedules and trip search."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.route import BusDestination, BusRoute, BusSchedule, RouteSegment
from ..schemas.route import (
    CreateDestinationRequest,
    CreateScheduleRequest,
    SaveRouteRequest,
    SearchTripsRequest,
    TripOption,
)
from .bus_service import BusService
from .seat_service import SeatService

logger = logging.getLogger(__name__)


class RouteService:
    """Service for the bus route network."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_destination(self, request: CreateDestinationRequest) -> BusDestination:
        destination = BusDestination(name=request.name, state=request.state)
        try:
            self.db.add(destination)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(detail=f"Destination '{request.name}' already exists") from e

        logger.info("Destination created", extra={"destination_id": str(destination.id)})
        return destination

    async def list_destinations(self) -> list[BusDestination]:
        result = await self.db.execute(
            select(BusDestination)
            .where(BusDestination.is_active.is_(True))
            .order_by(BusDestination.name)
        )
        return list(result.scalars())

    async def destination_names(self, ids: list[UUID]) -> dict[UUID, str]:
        if not ids:
            return {}
        result = await self.db.execute(
            select(BusDestination.id, BusDestination.name).where(BusDestination.id.in_(ids))
        )
        return {row.id: row.name for row in result.all()}

    async def save_route(self, request: SaveRouteRequest) -> BusRoute:
        """
        Create or update a route together with its segment fares.

        Every ordered pair of stops (earlier stop to later stop) needs a
        segment with an adult price above zero; no other pairs are accepted.

        Raises:
            NotFoundError: If the route, the bus or a stop does not exist
            ValidationError: If segments do not match the stops
        """
        await BusService(self.db).get_bus_by_id_or_raise(request.bus_id)

        names = await self.destination_names(request.all_stops)
        missing = [str(stop) for stop in request.all_stops if stop not in names]
        if missing:
            raise NotFoundError(resource_type="destination", resource_id=", ".join(missing))

        expected = {
            (request.all_stops[i], request.all_stops[j])
            for i in range(len(request.all_stops))
            for j in range(i + 1, len(request.all_stops))
        }
        given = {(s.start_destination_id, s.end_destination_id): s for s in request.segments}
        if set(given) != expected:
            unpriced = sorted(f"{names[a]} -> {names[b]}" for a, b in expected - set(given))
            unknown = sorted(f"{a} -> {b}" for a, b in set(given) - expected)
            raise ValidationError(
                detail="Every pair of stops in travel order needs exactly one priced segment",
                errors={"unpriced": unpriced, "not_on_route": unknown}
            )

        if request.route_id:
            route = await self.get_route_or_raise(request.route_id)
            # Old fares must be gone before the replacements are inserted
            route.segments.clear()
            await self.db.flush()
            route.name = request.name
            route.bus_id = request.bus_id
            route.all_stops = [str(stop) for stop in request.all_stops]
            route.is_active = request.is_active
            for segment in given.values():
                route.segments.append(RouteSegment(**segment.model_dump()))
        else:
            route = BusRoute(
                name=request.name,
                bus_id=request.bus_id,
                all_stops=[str(stop) for stop in request.all_stops],
                is_active=request.is_active,
                segments=[RouteSegment(**segment.model_dump()) for segment in given.values()],
            )
            self.db.add(route)
        await self.db.commit()

        route = await self.get_route_or_raise(route.id, refresh=True)

        logger.info(
            "Route saved",
            extra={"route_id": str(route.id), "stops": len(route.all_stops), "segments": len(route.segments)}
        )
        return route

    async def get_route_or_raise(self, route_id: UUID, refresh: bool = False) -> BusRoute:
        stmt = select(BusRoute).where(BusRoute.id == route_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        route = result.scalar_one_or_none()
        if not route:
            raise NotFoundError(resource_type="bus route", resource_id=str(route_id))
        return route

    async def create_schedule(self, request: CreateScheduleRequest) -> BusSchedule:
        route = await self.get_route_or_raise(request.route_id)
        schedule = BusSchedule(**request.model_dump())
        self.db.add(schedule)
        await self.db.commit()

        logger.info(
            "Schedule created",
            extra={"schedule_id": str(schedule.id), "route_id": str(route.id), "days": schedule.day_of_week}
        )
        return schedule

    async def search_trips(self, request: SearchTripsRequest) -> list[TripOption]:
        """
        Find departures serving origin -> destination on the travel date.

        A route qualifies when it is active, lists the origin before the
        destination and prices that exact pair. Its schedules qualify when
        active, running on the date's weekday and inside their effective
        window. Results are ordered by departure time.
        """
        if request.origin_id == request.destination_id:
            raise ValidationError(detail="Origin and destination must differ")

        origin_key, destination_key = str(request.origin_id), str(request.destination_id)
        names = await self.destination_names([request.origin_id, request.destination_id])

        result = await self.db.execute(select(BusRoute).where(BusRoute.is_active.is_(True)))
        seat_service = SeatService(self.db)
        options: list[TripOption] = []

        for route in result.scalars().all():
            stops = route.all_stops
            if origin_key not in stops or destination_key not in stops:
                continue
            if stops.index(origin_key) >= stops.index(destination_key):
                continue
            segment = route.segment_for(request.origin_id, request.destination_id)
            if segment is None or route.bus is None:
                continue

            schedules = await self.db.execute(
                select(BusSchedule).where(BusSchedule.route_id == route.id)
            )
            for schedule in schedules.scalars().all():
                if not schedule.runs_on(request.travel_date):
                    continue
                seat_map = await seat_service.get_schedule_seat_map(schedule)
                options.append(TripOption(
                    route_id=route.id,
                    route_name=route.name,
                    schedule_id=schedule.id,
                    bus_id=route.bus_id,
                    departure_time=schedule.departure_time,
                    origin_name=names.get(request.origin_id, "N/A"),
                    destination_name=names.get(request.destination_id, "N/A"),
                    adult_price=segment.adult_price,
                    child_price=segment.child_price,
                    duration_minutes=segment.duration_minutes,
                    distance_km=segment.distance_km,
                    available_seats=seat_map.available_seats,
                ))

        options.sort(key=lambda option: option.departure_time)
        logger.info(
            "Trip search completed",
            extra={
                "origin_id": origin_key,
                "destination_id": destination_key,
                "travel_date": request.travel_date.isoformat(),
                "results": len(options)
            }
        )
        return options

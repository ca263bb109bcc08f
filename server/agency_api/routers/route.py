"""Bus network router: destinations, routes, schedules and trip search."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.route import (
    CreateDestinationRequest,
    CreateScheduleRequest,
    Destination,
    ListDestinationsResponse,
    Route,
    SaveRouteRequest,
    Schedule,
    SearchTripsRequest,
    SearchTripsResponse,
)
from ..schemas.seat import GetScheduleSeatMapRequest, SeatMapResponse
from ..services.route_service import RouteService
from ..services.seat_service import SeatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/bus-network", tags=["bus-network"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/destination/create", response_model=Destination, dependencies=[AdminAuth])
async def create_destination(
    request: CreateDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        destination = await RouteService(db).create_destination(request)
        return JSONResponse(
            status_code=200,
            content=Destination.model_validate(destination).model_dump(mode="json")
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in destination creation",
            extra={"name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/destination/list", response_model=ListDestinationsResponse)
async def list_destinations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    try:
        destinations = await RouteService(db).list_destinations()
        response_data = ListDestinationsResponse(
            items=[Destination.model_validate(d) for d in destinations]
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in destination listing", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/route/save", response_model=Route, dependencies=[AdminAuth])
async def save_route(
    request: SaveRouteRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Create or update a route.

    Every pair of stops in travel order must carry an adult fare.
    """
    try:
        route = await RouteService(db).save_route(request)
        return JSONResponse(status_code=200, content=Route.model_validate(route).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error saving route",
            extra={"route_id": str(request.route_id), "name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/schedule/create", response_model=Schedule, dependencies=[AdminAuth])
async def create_schedule(
    request: CreateScheduleRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        schedule = await RouteService(db).create_schedule(request)
        return JSONResponse(status_code=200, content=Schedule.model_validate(schedule).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in schedule creation",
            extra={"route_id": str(request.route_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/search", response_model=SearchTripsResponse)
async def search_trips(
    request: SearchTripsRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Departures from origin to destination on a date, earliest first."""
    try:
        options = await RouteService(db).search_trips(request)
        response_data = SearchTripsResponse(travel_date=request.travel_date, items=options)
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in trip search",
            extra={
                "origin_id": str(request.origin_id),
                "destination_id": str(request.destination_id),
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/schedule/seat-map", response_model=SeatMapResponse)
async def get_schedule_seat_map(
    request: GetScheduleSeatMapRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        seat_service = SeatService(db)
        schedule = await seat_service.get_schedule_or_raise(request.schedule_id)
        seat_map = await seat_service.get_schedule_seat_map(schedule)
        return JSONResponse(status_code=200, content=seat_map.to_schema().model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in schedule seat map retrieval",
            extra={"schedule_id": str(request.schedule_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

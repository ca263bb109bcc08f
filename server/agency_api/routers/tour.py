"""Tour router for catalog and seat map operations."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.seat import GetTourSeatMapRequest, SeatMapResponse, SeatState, ToggleTourSeatRequest
from ..schemas.tour import CreateTourRequest, GetTourRequest, ListToursRequest, ListToursResponse, Tour
from ..services.seat_service import SeatService
from ..services.tour_service import TourService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/tour", tags=["tour"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/create", response_model=Tour, dependencies=[AdminAuth])
async def create_tour(
    request: CreateTourRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Create a new tour.

    The base cost, paying clients and cost per paying person are computed
    from the bus, hotel quotes and provider costs.
    """
    tour_service = TourService(db)

    try:
        tour = await tour_service.create_tour(request)
        response_data = Tour.model_validate(tour)

        return JSONResponse(
            status_code=200,
            content=response_data.model_dump(mode="json")
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour creation",
            extra={"slug": request.slug, "title": request.title, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/get", response_model=Tour)
async def get_tour(
    request: GetTourRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Get a tour by id or slug."""
    tour_service = TourService(db)

    try:
        tour = await tour_service.get_tour(request)
        return JSONResponse(
            status_code=200,
            content=Tour.model_validate(tour).model_dump(mode="json")
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour retrieval",
            extra={"tour_id": str(request.tour_id), "slug": request.slug, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/list", response_model=ListToursResponse)
async def list_tours(
    request: ListToursRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List tours with cursor pagination."""
    tour_service = TourService(db)

    try:
        tours, next_cursor = await tour_service.list_tours(request)
        response_data = ListToursResponse(
            items=[Tour.model_validate(tour) for tour in tours],
            next_cursor=next_cursor
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in tour listing", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/seat-map", response_model=SeatMapResponse)
async def get_tour_seat_map(
    request: GetTourSeatMapRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Get the seat map of a tour.

    Seats without an assignment row are available.
    """
    try:
        tour = await TourService(db).get_tour_by_id_or_raise(request.tour_id)
        seat_map = await SeatService(db).get_tour_seat_map(tour)

        logger.debug(
            "Tour seat map retrieved",
            extra={"tour_id": str(tour.id), "available_seats": seat_map.available_seats}
        )
        return JSONResponse(status_code=200, content=seat_map.to_schema().model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour seat map retrieval",
            extra={"tour_id": str(request.tour_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/toggle-seat", response_model=SeatState, dependencies=[AdminAuth])
async def toggle_tour_seat(
    request: ToggleTourSeatRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Block a free seat, or free a blocked or courtesy seat."""
    try:
        tour = await TourService(db).get_tour_by_id_or_raise(request.tour_id)
        row = await SeatService(db).toggle_tour_seat(tour, request)
        return JSONResponse(status_code=200, content=SeatState.model_validate(row).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error toggling tour seat",
            extra={"tour_id": str(request.tour_id), "seat_number": request.seat_number, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

"""Hotel quote router."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.hotel import CheapestHotelRequest, CheapestHotelResponse, CreateHotelRequest, Hotel
from ..services.hotel_service import HotelService, to_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/hotel", tags=["hotel"], dependencies=[AdminAuth])

DB_DEPENDENCY = Depends(get_db)


@router.post("/create", response_model=Hotel)
async def create_hotel(
    request: CreateHotelRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Record a hotel quote; totals are computed on read."""
    try:
        hotel = await HotelService(db).create_hotel(request)
        return JSONResponse(status_code=200, content=to_schema(hotel).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in hotel creation",
            extra={"name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/cheapest", response_model=CheapestHotelResponse)
async def cheapest_hotel(
    request: CheapestHotelRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Cheapest active quote by double-room price, scaled to the stay."""
    try:
        hotel, nights, estimate = await HotelService(db).find_cheapest(request)
        response_data = CheapestHotelResponse(
            hotel=to_schema(hotel),
            nights=nights,
            estimated_cost_double=estimate
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in hotel search", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e

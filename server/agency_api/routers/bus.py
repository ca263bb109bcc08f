"""Bus router for fleet and seat layout operations."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.bus import Bus, CreateBusRequest, GetBusRequest, UpdateBusLayoutRequest
from ..schemas.seat import LayoutPreviewRequest, LayoutPreviewResponse
from ..services.bus_service import BusService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/bus", tags=["bus"], dependencies=[AdminAuth])

DB_DEPENDENCY = Depends(get_db)


@router.post("/create", response_model=Bus)
async def create_bus(
    request: CreateBusRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Register a bus.

    Seats in the layout are renumbered column by column and the capacity
    becomes the number of seat cells.
    """
    try:
        bus = await BusService(db).create_bus(request)
        return JSONResponse(status_code=200, content=Bus.model_validate(bus).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in bus creation",
            extra={"name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/get", response_model=Bus)
async def get_bus(
    request: GetBusRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        bus = await BusService(db).get_bus_by_id_or_raise(request.bus_id)
        return JSONResponse(status_code=200, content=Bus.model_validate(bus).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in bus retrieval",
            extra={"bus_id": str(request.bus_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/layout/preview", response_model=LayoutPreviewResponse)
async def preview_layout(request: LayoutPreviewRequest) -> JSONResponse:
    """Resize or repaint a layout grid without saving it."""
    try:
        layout, seat_count = BusService.preview_layout(request)
        response_data = LayoutPreviewResponse(layout=layout, seat_count=seat_count)
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in layout preview", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/layout/update", response_model=Bus)
async def update_layout(
    request: UpdateBusLayoutRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Replace a bus's layout; its capacity follows the new seat count."""
    try:
        bus = await BusService(db).update_layout(request)
        return JSONResponse(status_code=200, content=Bus.model_validate(bus).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in layout update",
            extra={"bus_id": str(request.bus_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

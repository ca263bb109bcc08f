"""Boarding router: ticket validation and boarding status."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.ticket import TicketDetails, UpdateBoardingRequest, ValidateTicketRequest
from ..services.ticket_service import TicketService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/ticket", tags=["ticket"], dependencies=[AdminAuth])

DB_DEPENDENCY = Depends(get_db)


@router.post("/validate", response_model=TicketDetails)
async def validate_ticket(
    request: ValidateTicketRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Resolve a scanned QR code to the passenger and departure."""
    try:
        details = await TicketService(db).validate_ticket(request.ticket_code)
        return JSONResponse(status_code=200, content=details.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error validating ticket",
            extra={"ticket_code": request.ticket_code, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/boarding", response_model=TicketDetails)
async def update_boarding(
    request: UpdateBoardingRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Mark a passenger as boarded, no-show or pending."""
    try:
        details = await TicketService(db).update_boarding(request)
        return JSONResponse(status_code=200, content=details.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error updating boarding status",
            extra={"passenger_id": str(request.passenger_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

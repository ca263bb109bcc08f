"""Back-office router for bus passengers."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.client import Passenger, UpdatePassengerRequest, UpdatePassengerResponse
from ..services.passenger_service import PassengerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/passenger", tags=["passenger"], dependencies=[AdminAuth])


@router.post("/update", response_model=UpdatePassengerResponse)
async def update_passenger(
    request: UpdatePassengerRequest,
    db: AsyncSession = Depends(get_db)
) -> JSONResponse:
    """
    Edit a passenger, optionally moving them to another departure or seat.

    Moving to another departure charges the fare difference to the client.
    """
    try:
        passenger, client, fare_difference = await PassengerService(db).update_passenger(request)
        response_data = UpdatePassengerResponse(
            passenger=Passenger.model_validate(passenger),
            client_total_amount=client.total_amount,
            fare_difference=fare_difference
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error updating passenger",
            extra={"passenger_id": str(request.passenger_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

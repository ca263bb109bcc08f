"""Booking router for public tour reservations and bus tickets."""

import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import IdempotencyKey
from ..core.exceptions import ProblemDetailsException
from ..schemas.booking import (
    BusTicketResponse,
    CreateBusTicketRequest,
    CreateTourBookingRequest,
    GetReservationRequest,
    TourBookingResponse,
    TourQuote,
    TourQuoteRequest,
)
from ..schemas.client import Client
from ..schemas.payment import ListPaymentsResponse, Payment
from ..services.bus_ticket_service import BusTicketService
from ..services.idempotency_service import IdempotencyService
from ..services.payment_service import PaymentService
from ..services.tour_booking_service import TourBookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/booking", tags=["booking"])

# Define dependencies to avoid B008 linting errors
DB_DEPENDENCY = Depends(get_db)


async def handle_idempotent_operation(
    operation: str,
    idempotency_key: str,
    request_body: dict[str, Any],
    operation_func: Callable[[], Awaitable[dict[str, Any]]],
    db: AsyncSession
) -> JSONResponse:
    """Run ``operation_func`` once per idempotency key and replay its outcome."""
    idempotency_service = IdempotencyService(db)

    cached_response = await idempotency_service.check_idempotency(
        idempotency_key=idempotency_key,
        operation=operation,
        request_body=request_body
    )
    if cached_response:
        status_code, response_body = cached_response
        return JSONResponse(status_code=status_code, content=response_body)

    try:
        response_dict = await operation_func()
    except ProblemDetailsException as e:
        # Discard whatever the failed operation left in the session
        await db.rollback()
        await idempotency_service.store_response(
            idempotency_key=idempotency_key,
            operation=operation,
            request_body=request_body,
            status_code=e.status_code,
            response_body=e.problem_details
        )
        raise

    await idempotency_service.store_response(
        idempotency_key=idempotency_key,
        operation=operation,
        request_body=request_body,
        status_code=200,
        response_body=response_dict
    )
    return JSONResponse(status_code=200, content=response_dict)


@router.post("/tour/quote", response_model=TourQuote)
async def quote_tour(
    request: TourQuoteRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Price a party for a tour.

    Adults share rooms (quads first); children under 12 pay the child rate.
    """
    try:
        quote = await TourBookingService(db).quote(request)
        return JSONResponse(status_code=200, content=quote.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour quote",
            extra={"tour_id": str(request.tour_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/tour/create", response_model=TourBookingResponse)
async def create_tour_booking(
    request: CreateTourBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    idempotency_key: str = IdempotencyKey
) -> JSONResponse:
    """
    Reserve seats on a tour and open a pending contract.

    This operation is idempotent based on the Idempotency-Key header.
    """
    booking_service = TourBookingService(db)

    async def operation():
        response_data = await booking_service.create_booking(request)
        logger.info(
            "Tour booking completed",
            extra={
                "contract_number": response_data.contract_number,
                "tour_id": str(request.tour_id),
                "seats": response_data.seats,
                "idempotency_key": idempotency_key
            }
        )
        return response_data.model_dump(mode="json")

    try:
        return await handle_idempotent_operation(
            operation="booking/tour",
            idempotency_key=idempotency_key,
            request_body=request.model_dump(mode="json"),
            operation_func=operation,
            db=db
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour booking",
            extra={
                "tour_id": str(request.tour_id),
                "seats": request.selected_seats,
                "idempotency_key": idempotency_key,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/bus/create", response_model=BusTicketResponse)
async def create_bus_tickets(
    request: CreateBusTicketRequest,
    db: AsyncSession = DB_DEPENDENCY,
    idempotency_key: str = IdempotencyKey
) -> JSONResponse:
    """
    Buy tickets on a scheduled departure, one seat per passenger.

    This operation is idempotent based on the Idempotency-Key header.
    """
    ticket_service = BusTicketService(db)

    async def operation():
        response_data = await ticket_service.create_tickets(request)
        logger.info(
            "Bus ticket purchase completed",
            extra={
                "contract_number": response_data.contract_number,
                "schedule_id": str(request.schedule_id),
                "passengers": len(request.passengers),
                "idempotency_key": idempotency_key
            }
        )
        return response_data.model_dump(mode="json")

    try:
        return await handle_idempotent_operation(
            operation="booking/bus",
            idempotency_key=idempotency_key,
            request_body=request.model_dump(mode="json"),
            operation_func=operation,
            db=db
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in bus ticket purchase",
            extra={
                "schedule_id": str(request.schedule_id),
                "idempotency_key": idempotency_key,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/get", response_model=Client)
async def get_reservation(
    request: GetReservationRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Look a reservation up by contract number.

    This is a read operation and does not require idempotency.
    """
    try:
        client = await PaymentService(db).get_client_by_contract(request.contract_number)
        return JSONResponse(status_code=200, content=Client.model_validate(client).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in reservation lookup",
            extra={"contract_number": request.contract_number, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/payments", response_model=ListPaymentsResponse)
async def get_reservation_payments(
    request: GetReservationRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Payment history of a reservation, looked up by contract number."""
    try:
        service = PaymentService(db)
        client = await service.get_client_by_contract(request.contract_number)
        payments = await service.list_payments(client.id)
        response_data = ListPaymentsResponse(
            client_id=client.id,
            items=[Payment.model_validate(p) for p in payments]
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in reservation payment lookup",
            extra={"contract_number": request.contract_number, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

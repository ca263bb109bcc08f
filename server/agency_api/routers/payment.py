"""Payment router."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth, IdempotencyKey
from ..core.exceptions import ProblemDetailsException
from ..schemas.payment import (
    ConfirmPaymentRequest,
    ListPaymentsRequest,
    ListPaymentsResponse,
    Payment,
    PaymentResult,
    RecordPaymentRequest,
)
from ..services.payment_service import PaymentService
from .booking import handle_idempotent_operation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/payment", tags=["payment"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/confirm", response_model=PaymentResult)
async def confirm_payment(
    request: ConfirmPaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    idempotency_key: str = IdempotencyKey
) -> JSONResponse:
    """
    Confirm a payment against a contract number.

    This operation is idempotent based on the Idempotency-Key header, so a
    processor notification delivered twice credits the contract once.
    """
    payment_service = PaymentService(db)

    async def operation():
        result = await payment_service.confirm_payment(request)
        return result.model_dump(mode="json")

    try:
        return await handle_idempotent_operation(
            operation="payment/confirm",
            idempotency_key=idempotency_key,
            request_body=request.model_dump(mode="json"),
            operation_func=operation,
            db=db
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error confirming payment",
            extra={
                "contract_number": request.contract_number,
                "idempotency_key": idempotency_key,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/record", response_model=PaymentResult, dependencies=[AdminAuth])
async def record_payment(
    request: RecordPaymentRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Record a manual payment; it may not exceed the remaining balance."""
    try:
        result = await PaymentService(db).record_payment(request)
        return JSONResponse(status_code=200, content=result.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error recording payment",
            extra={"client_id": str(request.client_id), "amount": request.amount, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/list", response_model=ListPaymentsResponse, dependencies=[AdminAuth])
async def list_payments(
    request: ListPaymentsRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        payments = await PaymentService(db).list_payments(request.client_id)
        response_data = ListPaymentsResponse(
            client_id=request.client_id,
            items=[Payment.model_validate(p) for p in payments]
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error listing payments",
            extra={"client_id": str(request.client_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e

"""Payments credited against client contracts."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import NotFoundError, PaymentRejectedError, ValidationError
from ..core.observability import metrics_collector
from ..domain import pricing
from ..models.client import Client, ClientPayment, ClientStatus
from ..schemas.common import Money
from ..schemas.payment import (
    ConfirmPaymentRequest,
    Payment,
    PaymentResult,
    RecordPaymentRequest,
)
from .client_service import ClientService

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for confirming and recording client payments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_client_by_contract(self, contract_number: str) -> Client:
        result = await self.db.execute(
            select(Client).where(func.upper(Client.contract_number) == contract_number.strip().upper())
        )
        client = result.scalar_one_or_none()
        if not client:
            logger.warning("Contract not found", extra={"contract_number": contract_number})
            raise NotFoundError(resource_type="contract", resource_id=contract_number)
        return client

    async def confirm_payment(self, request: ConfirmPaymentRequest) -> PaymentResult:
        """
        Credit a confirmed payment to the contract.

        The first confirmation credits the advance; later ones settle the
        remaining balance. Nothing is credited while both are zero.

        Raises:
            NotFoundError: If the contract does not exist
            ValidationError: If the contract is cancelled
        """
        client = await self.get_client_by_contract(request.contract_number)
        self._ensure_payable(client)

        credit = pricing.payment_credit(client.total_amount, client.total_paid, client.advance_payment)
        if credit <= 0:
            logger.info(
                "Payment confirmation with nothing owed",
                extra={"client_id": str(client.id), "contract_number": client.contract_number}
            )
            return self._result(client, 0, None, "Nothing is owed on this contract")

        payment = await self._apply(client, credit, request.payment_method.value, notes="Payment confirmed")
        return self._result(client, credit, payment, "Payment applied")

    async def record_payment(self, request: RecordPaymentRequest) -> PaymentResult:
        """
        Record a manual payment entered by the agency.

        Raises:
            NotFoundError: If the client does not exist
            ValidationError: If the contract is cancelled
            PaymentRejectedError: If the amount exceeds the remaining balance
        """
        client = await ClientService(self.db).get_client_by_id_or_raise(request.client_id)
        self._ensure_payable(client)

        remaining = client.remaining_balance
        if request.amount > remaining:
            logger.warning(
                "Manual payment rejected",
                extra={"client_id": str(client.id), "amount": request.amount, "remaining": remaining}
            )
            raise PaymentRejectedError(
                detail="The payment exceeds the remaining balance",
                amount=request.amount,
                remaining=remaining,
            )

        payment = await self._apply(
            client,
            request.amount,
            request.payment_method.value,
            notes=request.notes,
            payment_date=request.payment_date,
        )
        return self._result(client, request.amount, payment, "Payment recorded")

    async def list_payments(self, client_id: UUID) -> list[ClientPayment]:
        await ClientService(self.db).get_client_by_id_or_raise(client_id)
        result = await self.db.execute(
            select(ClientPayment)
            .where(ClientPayment.client_id == client_id)
            .order_by(ClientPayment.payment_date, ClientPayment.created_at)
        )
        return list(result.scalars())

    async def _apply(self, client: Client, amount: int, method: str,
                     notes: Optional[str] = None, payment_date=None) -> ClientPayment:
        payment = ClientPayment(
            client_id=client.id,
            amount=amount,
            payment_method=method,
            notes=notes,
        )
        if payment_date is not None:
            payment.payment_date = payment_date
        self.db.add(payment)

        client.total_paid += amount
        client.payment_method = method
        if client.status == ClientStatus.PENDING.value:
            client.status = pricing.status_after_payment(client.total_amount, client.total_paid)
        await self.db.commit()

        metrics_collector.record_payment(method, amount)
        logger.info(
            "Payment credited",
            extra={
                "client_id": str(client.id),
                "payment_id": str(payment.id),
                "amount": amount,
                "method": method,
                "total_paid": client.total_paid,
                "status": client.status
            }
        )
        return payment

    @staticmethod
    def _ensure_payable(client: Client) -> None:
        if client.status == ClientStatus.CANCELLED.value:
            raise ValidationError(
                detail="Payments cannot be applied to a cancelled contract",
                errors={"contract_number": client.contract_number}
            )

    @staticmethod
    def _result(client: Client, credited: int, payment: Optional[ClientPayment], message: str) -> PaymentResult:
        return PaymentResult(
            client_id=client.id,
            contract_number=client.contract_number,
            credited=Money(amount=credited, currency=settings.currency),
            total_paid=client.total_paid,
            remaining_balance=client.remaining_balance,
            status=client.status,
            payment=Payment.model_validate(payment) if payment else None,
            message=message,
        )

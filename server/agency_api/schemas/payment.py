"""Payment schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .booking import PaymentMethod
from .common import Money


class ConfirmPaymentRequest(BaseModel):
    """A processor or the agency confirms payment against a contract number."""

    contract_number: str = Field(..., min_length=1, max_length=16)
    payment_method: PaymentMethod


class RecordPaymentRequest(BaseModel):
    """Admin records a manual payment."""

    client_id: UUID
    amount: int = Field(..., gt=0, description="Amount in minor units")
    payment_method: PaymentMethod = PaymentMethod.MANUAL
    payment_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=500)


class ListPaymentsRequest(BaseModel):
    client_id: UUID


class Payment(BaseModel):
    id: UUID
    client_id: UUID
    amount: int
    payment_method: str
    payment_date: date
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    """Outcome of applying a payment."""

    client_id: UUID
    contract_number: str
    credited: Money
    total_paid: int
    remaining_balance: int
    status: str
    payment: Optional[Payment] = Field(None, description="Absent when nothing was owed")
    message: str


class ListPaymentsResponse(BaseModel):
    client_id: UUID
    items: list[Payment]

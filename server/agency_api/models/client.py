"""Client (reservation contract) and payment models."""

from datetime import date, datetime
from enum import Enum
from typing import Any, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base
from .common import TimestampMixin, utcnow

if TYPE_CHECKING:
    from .passenger import BusPassenger


class ClientStatus(str, Enum):
    """Client status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Client(TimestampMixin, Base):
    """
    A reservation contract for a tour or a bus ticket.

    The contractor's details live on the row itself; companions are kept as
    a JSON list of ``{"name", "age"}``.
    """

    __tablename__ = "clients"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    contract_number: Mapped[str] = mapped_column(String(16), nullable=False, unique=True, index=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    identification_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contractor_age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    tour_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("tours.id", ondelete="SET NULL"), nullable=True, index=True
    )
    bus_route_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("bus_routes.id", ondelete="SET NULL"), nullable=True, index=True
    )

    number_of_people: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    companions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    extra_services: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    room_details: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)

    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    advance_payment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_paid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ClientStatus.PENDING.value)

    payments: Mapped[list["ClientPayment"]] = relationship(
        "ClientPayment",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ClientPayment.payment_date"
    )
    passengers: Mapped[list["BusPassenger"]] = relationship(
        "BusPassenger",
        back_populates="client",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("number_of_people > 0", name="ck_client_people_positive"),
        CheckConstraint("total_amount >= 0", name="ck_client_total_non_negative"),
        CheckConstraint("total_paid >= 0", name="ck_client_paid_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_client_status_valid"
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def remaining_balance(self) -> int:
        return max(self.total_amount - self.total_paid, 0)

    def __repr__(self) -> str:
        return (
            f"<Client(id={self.id}, contract='{self.contract_number}', "
            f"people={self.number_of_people}, status='{self.status}')>"
        )


class ClientPayment(Base):
    """A payment credited towards a client's total."""

    __tablename__ = "client_payments"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    client_id: Mapped[UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, default=lambda: utcnow().date())
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    client: Mapped["Client"] = relationship("Client", back_populates="payments")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_client_payment_amount_positive"),
    )

    def __repr__(self) -> str:
        return f"<ClientPayment(id={self.id}, client_id={self.client_id}, amount={self.amount})>"

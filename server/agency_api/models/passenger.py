"""Bus passenger model definition."""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import expression

from ..core.database import Base
from .common import TimestampMixin

if TYPE_CHECKING:
    from .client import Client


class BoardingStatus(str, Enum):
    """Boarding status enumeration."""
    PENDING = "pending"
    BOARDED = "boarded"
    NO_SHOW = "no_show"


class BusPassenger(TimestampMixin, Base):
    """One traveller on a bus ticket, holding exactly one seat."""

    __tablename__ = "bus_passengers"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    client_id: Mapped[UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    schedule_id: Mapped[UUID] = mapped_column(
        ForeignKey("bus_schedules.id"), nullable=False, index=True
    )
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    identification_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_contractor: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    origin_destination_id: Mapped[UUID] = mapped_column(ForeignKey("bus_destinations.id"), nullable=False)
    destination_id: Mapped[UUID] = mapped_column(ForeignKey("bus_destinations.id"), nullable=False)
    fare_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    boarding_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BoardingStatus.PENDING.value
    )

    client: Mapped["Client"] = relationship("Client", back_populates="passengers")

    __table_args__ = (
        CheckConstraint("seat_number > 0", name="ck_passenger_seat_positive"),
        CheckConstraint("age IS NULL OR (age >= 0 AND age <= 120)", name="ck_passenger_age_range"),
        CheckConstraint(
            "boarding_status IN ('pending', 'boarded', 'no_show')",
            name="ck_passenger_boarding_status_valid"
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def ticket_code(self) -> str:
        """Payload encoded in the boarding QR code."""
        return f"{self.id}_{self.schedule_id}_{self.seat_number}"

    def __repr__(self) -> str:
        return (
            f"<BusPassenger(id={self.id}, schedule_id={self.schedule_id}, "
            f"seat={self.seat_number}, boarding='{self.boarding_status}')>"
        )

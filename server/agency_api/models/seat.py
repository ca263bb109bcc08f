"""Seat assignment models for tours and bus schedules."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from ..domain.seating import SeatStatus
from .common import TimestampMixin

SEAT_STATUS_CHECK = "status IN ('available', 'booked', 'blocked', 'courtesy')"


class TourSeatAssignment(TimestampMixin, Base):
    """State of one seat on a tour's bus; absent rows mean available."""

    __tablename__ = "tour_seat_assignments"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tour_id: Mapped[UUID] = mapped_column(
        ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SeatStatus.AVAILABLE.value)
    client_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    booked_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("tour_id", "seat_number", name="uq_tour_seat"),
        CheckConstraint("seat_number > 0", name="ck_tour_seat_number_positive"),
        CheckConstraint(SEAT_STATUS_CHECK, name="ck_tour_seat_status_valid"),
    )

    def __repr__(self) -> str:
        return f"<TourSeatAssignment(tour_id={self.tour_id}, seat={self.seat_number}, status='{self.status}')>"


class BusSeatAssignment(TimestampMixin, Base):
    """State of one seat on a scheduled bus departure."""

    __tablename__ = "bus_seat_assignments"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    schedule_id: Mapped[UUID] = mapped_column(
        ForeignKey("bus_schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SeatStatus.AVAILABLE.value)
    client_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    booked_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("schedule_id", "seat_number", name="uq_schedule_seat"),
        CheckConstraint("seat_number > 0", name="ck_bus_seat_number_positive"),
        CheckConstraint(SEAT_STATUS_CHECK, name="ck_bus_seat_status_valid"),
    )

    def __repr__(self) -> str:
        return f"<BusSeatAssignment(schedule_id={self.schedule_id}, seat={self.seat_number}, status='{self.status}')>"

"""Hotel quote model definition."""

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from ..core.database import Base
from .common import TimestampMixin


class Hotel(TimestampMixin, Base):
    """A lodging quote: nightly cost and capacity per room type."""

    __tablename__ = "hotels"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    quoted_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    num_nights_quoted: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    cost_per_night_double: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_per_night_triple: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_per_night_quad: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    capacity_double: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    capacity_triple: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    capacity_quad: Mapped[int] = mapped_column(Integer, nullable=False, default=4)

    num_double_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    num_triple_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    num_quad_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    advance_payment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_paid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=expression.true()
    )

    __table_args__ = (
        CheckConstraint("num_nights_quoted > 0", name="ck_hotel_nights_positive"),
        CheckConstraint(
            "cost_per_night_double >= 0 AND cost_per_night_triple >= 0 AND cost_per_night_quad >= 0",
            name="ck_hotel_costs_non_negative"
        ),
        CheckConstraint("total_paid >= advance_payment", name="ck_hotel_paid_covers_advance"),
    )

    def cost_per_night(self, room_type: str) -> int:
        return getattr(self, f"cost_per_night_{room_type}")

    def capacity(self, room_type: str) -> int:
        return getattr(self, f"capacity_{room_type}")

    def rooms(self, room_type: str) -> int:
        return getattr(self, f"num_{room_type}_rooms")

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name='{self.name}', nights={self.num_nights_quoted})>"

"""Tour model definition."""

from datetime import date
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from ..core.database import Base
from .common import TimestampMixin


class Tour(TimestampMixin, Base):
    """A packaged trip sold per person by room occupancy."""

    __tablename__ = "tours"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    departure_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Transport
    bus_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("buses.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    bus_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    bus_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    courtesies: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Cost inputs: [{"hotel_quote_id", "room_type"}] and [{"name", "service", "cost"}]
    hotel_details: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    provider_details: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Derived costing
    total_base_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paying_clients_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cost_per_paying_person: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Per-person selling prices in minor units
    selling_price_double: Mapped[int] = mapped_column(Integer, nullable=False)
    selling_price_triple: Mapped[int] = mapped_column(Integer, nullable=False)
    selling_price_quad: Mapped[int] = mapped_column(Integer, nullable=False)
    selling_price_child: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    advance_payment_per_person: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=expression.true()
    )

    __table_args__ = (
        CheckConstraint("bus_capacity > 0", name="ck_tour_bus_capacity_positive"),
        CheckConstraint("courtesies >= 0", name="ck_tour_courtesies_non_negative"),
        CheckConstraint("courtesies < bus_capacity", name="ck_tour_courtesies_lt_capacity"),
        CheckConstraint("selling_price_double > 0", name="ck_tour_price_double_positive"),
        CheckConstraint("selling_price_triple > 0", name="ck_tour_price_triple_positive"),
        CheckConstraint("selling_price_quad > 0", name="ck_tour_price_quad_positive"),
        CheckConstraint("selling_price_child >= 0", name="ck_tour_price_child_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Tour(id={self.id}, title='{self.title}', slug='{self.slug}')>"

"""Bus model definition."""

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .common import TimestampMixin


class Bus(TimestampMixin, Base):
    """A coach with a seat layout grid."""

    __tablename__ = "buses"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    license_plate: Mapped[str | None] = mapped_column(String(32), nullable=True)
    rental_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Rows of {"type": ..., "number": ...} cells; null means seats 1..total_capacity
    seat_layout: Mapped[list[list[dict[str, Any]]] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint("total_capacity >= 0", name="ck_bus_total_capacity_non_negative"),
        CheckConstraint("rental_cost >= 0", name="ck_bus_rental_cost_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Bus(id={self.id}, name='{self.name}', capacity={self.total_capacity})>"

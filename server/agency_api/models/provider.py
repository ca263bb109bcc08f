"""Provider model definition."""

from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from ..core.database import Base
from .common import TimestampMixin


class Provider(TimestampMixin, Base):
    """An add-on service (tour guide, insurance, excursion) sold per unit."""

    __tablename__ = "providers"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    service_type: Mapped[str] = mapped_column(String(100), nullable=False)
    unit_type: Mapped[str] = mapped_column(String(50), nullable=False, default="person")
    cost_per_unit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    selling_price_per_unit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=expression.true()
    )

    __table_args__ = (
        CheckConstraint("cost_per_unit >= 0", name="ck_provider_cost_non_negative"),
        CheckConstraint("selling_price_per_unit >= 0", name="ck_provider_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Provider(id={self.id}, name='{self.name}', service='{self.service_type}')>"

"""Agency-wide settings model."""

from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .common import TimestampMixin


class AgencySettings(TimestampMixin, Base):
    """Single-row table of agency configuration edited from the back office."""

    __tablename__ = "agency_settings"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    agency_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    advance_payment_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_mode: Mapped[str] = mapped_column(String(20), nullable=False, default="test")
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    __table_args__ = (
        CheckConstraint("advance_payment_amount >= 0", name="ck_agency_advance_non_negative"),
        CheckConstraint("payment_mode IN ('test', 'production')", name="ck_agency_payment_mode_valid"),
        CheckConstraint("length(currency) = 3", name="ck_agency_currency_length"),
    )

    def __repr__(self) -> str:
        return f"<AgencySettings(mode='{self.payment_mode}', advance={self.advance_payment_amount})>"

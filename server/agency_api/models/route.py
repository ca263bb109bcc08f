"""Bus route network models: destinations, routes, segments and schedules."""

from datetime import date, time
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import expression

from ..core.database import Base
from .common import TimestampMixin

if TYPE_CHECKING:
    from .bus import Bus


class BusDestination(TimestampMixin, Base):
    """A stop that routes can serve."""

    __tablename__ = "bus_destinations"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )

    def __repr__(self) -> str:
        return f"<BusDestination(id={self.id}, name='{self.name}')>"


class BusRoute(TimestampMixin, Base):
    """An ordered list of stops driven by one bus."""

    __tablename__ = "bus_routes"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Ordered destination ids as strings
    all_stops: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    bus_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("buses.id", ondelete="SET NULL"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )

    bus: Mapped["Bus | None"] = relationship("Bus", lazy="selectin")
    segments: Mapped[list["RouteSegment"]] = relationship(
        "RouteSegment",
        back_populates="route",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    schedules: Mapped[list["BusSchedule"]] = relationship(
        "BusSchedule",
        back_populates="route",
        cascade="all, delete-orphan"
    )

    def segment_for(self, origin_id: UUID, destination_id: UUID) -> "RouteSegment | None":
        for segment in self.segments:
            if (segment.start_destination_id == origin_id
                    and segment.end_destination_id == destination_id):
                return segment
        return None

    def __repr__(self) -> str:
        return f"<BusRoute(id={self.id}, name='{self.name}', stops={len(self.all_stops)})>"


class RouteSegment(Base):
    """Fare between two stops of a route, in travel order."""

    __tablename__ = "route_segments"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    route_id: Mapped[UUID] = mapped_column(
        ForeignKey("bus_routes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_destination_id: Mapped[UUID] = mapped_column(
        ForeignKey("bus_destinations.id"), nullable=False
    )
    end_destination_id: Mapped[UUID] = mapped_column(
        ForeignKey("bus_destinations.id"), nullable=False
    )
    adult_price: Mapped[int] = mapped_column(Integer, nullable=False)
    child_price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    distance_km: Mapped[int | None] = mapped_column(Integer, nullable=True)

    route: Mapped["BusRoute"] = relationship("BusRoute", back_populates="segments")

    __table_args__ = (
        UniqueConstraint(
            "route_id", "start_destination_id", "end_destination_id",
            name="uq_route_segment_pair"
        ),
        CheckConstraint("adult_price > 0", name="ck_segment_adult_price_positive"),
        CheckConstraint("child_price >= 0", name="ck_segment_child_price_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<RouteSegment(route_id={self.route_id}, "
            f"{self.start_destination_id}->{self.end_destination_id}, adult={self.adult_price})>"
        )


class BusSchedule(TimestampMixin, Base):
    """A recurring departure of a route on given weekdays."""

    __tablename__ = "bus_schedules"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    route_id: Mapped[UUID] = mapped_column(
        ForeignKey("bus_routes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    departure_time: Mapped[time] = mapped_column(Time, nullable=False)
    # Weekday numbers, 0 = Sunday
    day_of_week: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    effective_date_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    effective_date_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )

    route: Mapped["BusRoute"] = relationship("BusRoute", back_populates="schedules", lazy="selectin")

    def runs_on(self, travel_date: date) -> bool:
        """True if the schedule is active and operates on ``travel_date``."""
        if not self.is_active:
            return False
        # date.weekday() is 0 = Monday
        if (travel_date.weekday() + 1) % 7 not in self.day_of_week:
            return False
        if self.effective_date_start and travel_date < self.effective_date_start:
            return False
        if self.effective_date_end and travel_date > self.effective_date_end:
            return False
        return True

    def __repr__(self) -> str:
        return f"<BusSchedule(id={self.id}, route_id={self.route_id}, departs={self.departure_time})>"

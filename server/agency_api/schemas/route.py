"""Bus network schemas: destinations, routes, schedules and trip search."""

from datetime import date, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator


class CreateDestinationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    state: Optional[str] = Field(None, max_length=100)


class Destination(BaseModel):
    id: UUID
    name: str
    state: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


class ListDestinationsResponse(BaseModel):
    items: list[Destination]


class SegmentPrice(BaseModel):
    """Fare between two stops of the route."""

    start_destination_id: UUID
    end_destination_id: UUID
    adult_price: int = Field(..., gt=0)
    child_price: int = Field(0, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=0)
    distance_km: Optional[int] = Field(None, ge=0)


class SaveRouteRequest(BaseModel):
    """
    Create or update a route with its stops and segment fares.

    Every ordered pair of stops must be priced.
    """

    route_id: Optional[UUID] = Field(None, description="Existing route to update")
    name: str = Field(..., min_length=1, max_length=255)
    bus_id: UUID
    all_stops: list[UUID] = Field(..., min_length=2, description="Destination ids in travel order")
    segments: list[SegmentPrice] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("all_stops")
    @classmethod
    def check_distinct_stops(cls, v: list[UUID]) -> list[UUID]:
        if len(set(v)) != len(v):
            raise ValueError("a destination may appear only once in a route")
        return v


class Segment(BaseModel):
    start_destination_id: UUID
    end_destination_id: UUID
    adult_price: int
    child_price: int
    duration_minutes: Optional[int]
    distance_km: Optional[int]

    class Config:
        from_attributes = True


class Route(BaseModel):
    id: UUID
    name: str
    bus_id: Optional[UUID]
    all_stops: list[UUID]
    segments: list[Segment]
    is_active: bool

    class Config:
        from_attributes = True


class CreateScheduleRequest(BaseModel):
    """Request schema for a recurring departure of a route."""

    route_id: UUID
    departure_time: time
    day_of_week: list[int] = Field(..., min_length=1, description="0 = Sunday ... 6 = Saturday")
    effective_date_start: Optional[date] = None
    effective_date_end: Optional[date] = None
    is_active: bool = True

    @field_validator("day_of_week")
    @classmethod
    def check_days(cls, v: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("day_of_week values must be between 0 and 6")
        return sorted(set(v))

    @model_validator(mode="after")
    def check_window(self):
        if (self.effective_date_start and self.effective_date_end
                and self.effective_date_end < self.effective_date_start):
            raise ValueError("effective_date_end must not be before effective_date_start")
        return self


class Schedule(BaseModel):
    id: UUID
    route_id: UUID
    departure_time: time
    day_of_week: list[int]
    effective_date_start: Optional[date]
    effective_date_end: Optional[date]
    is_active: bool

    class Config:
        from_attributes = True


class SearchTripsRequest(BaseModel):
    """Request schema for public trip search."""

    origin_id: UUID
    destination_id: UUID
    travel_date: date


class TripOption(BaseModel):
    """One bookable departure matching a search."""

    route_id: UUID
    route_name: str
    schedule_id: UUID
    bus_id: Optional[UUID]
    departure_time: time
    origin_name: str
    destination_name: str
    adult_price: int
    child_price: int
    duration_minutes: Optional[int]
    distance_km: Optional[int]
    available_seats: int


class SearchTripsResponse(BaseModel):
    travel_date: date
    items: list[TripOption]

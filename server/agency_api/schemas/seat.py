"""Seat layout and seat map schemas."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..domain.seating import CellType, SeatStatus


class SeatLayoutItem(BaseModel):
    """One cell of a bus layout grid."""

    type: CellType = Field(..., description="Cell kind")
    number: Optional[int] = Field(None, ge=1, description="Seat number, only for seat cells")


class CellEdit(BaseModel):
    """Paint a cell of the grid with a new kind."""

    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)
    type: CellType


class LayoutPreviewRequest(BaseModel):
    """Request schema for previewing an edited layout."""

    layout: list[list[SeatLayoutItem]] = Field(default_factory=list, description="Current grid")
    rows: Optional[int] = Field(None, ge=1, le=40, description="Resize to this many rows")
    cols: Optional[int] = Field(None, ge=1, le=20, description="Resize to this many columns")
    edits: list[CellEdit] = Field(default_factory=list, description="Cells to repaint, applied in order")


class LayoutPreviewResponse(BaseModel):
    """Renumbered layout and its seat count."""

    layout: list[list[SeatLayoutItem]]
    seat_count: int


class SeatState(BaseModel):
    """State of a single seat."""

    seat_number: int
    status: SeatStatus
    client_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class SeatMapResponse(BaseModel):
    """Seat map of a tour or a scheduled departure."""

    scope: str = Field(..., description="'tour' or 'schedule'")
    scope_id: UUID
    layout: Optional[list[list[SeatLayoutItem]]] = Field(None, description="Grid to draw, if the bus has one")
    seats: list[SeatState]
    available_seats: int


class GetTourSeatMapRequest(BaseModel):
    tour_id: UUID


class GetScheduleSeatMapRequest(BaseModel):
    schedule_id: UUID


class ToggleTourSeatRequest(BaseModel):
    """Request schema for blocking or freeing a tour seat."""

    tour_id: UUID
    seat_number: int = Field(..., ge=1)
    block_as: SeatStatus = Field(SeatStatus.BLOCKED, description="'blocked' or 'courtesy' when blocking a free seat")

"""Seat layout grids and seat maps.

A layout is a list of rows, each row a list of cells shaped like
``{"type": "seat", "number": 7}``. Only ``seat`` cells carry a number, and
numbers run column-first: down the first column, then down the next.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence
from uuid import UUID

SeatLayout = list[list[dict[str, Any]]]


class CellType(str, Enum):
    """Kinds of cell a layout grid can hold."""
    SEAT = "seat"
    AISLE = "aisle"
    BATHROOM = "bathroom"
    DRIVER = "driver"
    EMPTY = "empty"
    ENTRY = "entry"


class SeatStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    BLOCKED = "blocked"
    COURTESY = "courtesy"


class LayoutError(ValueError):
    """Raised for malformed layouts or grid sizes."""


class SeatSelectionError(ValueError):
    """Raised when a seat selection cannot be honoured."""

    def __init__(self, seats: Sequence[int], reason: str):
        self.seats = sorted(set(seats))
        self.reason = reason
        super().__init__(f"seats {self.seats}: {reason}")


@dataclass(frozen=True)
class SeatState:
    seat_number: int
    status: SeatStatus = SeatStatus.AVAILABLE
    client_id: UUID | None = None

    def is_selectable_by(self, client_id: UUID | None) -> bool:
        """A seat may be picked if free, or if it is already this client's."""
        if self.status == SeatStatus.AVAILABLE:
            return True
        return (
            self.status == SeatStatus.BOOKED
            and client_id is not None
            and self.client_id == client_id
        )


def _grid_width(layout: SeatLayout) -> int:
    return max((len(row) for row in layout), default=0)


def _validated_cell(cell: Mapping[str, Any]) -> dict[str, Any]:
    try:
        cell_type = CellType(cell.get("type", CellType.EMPTY.value))
    except ValueError as e:
        raise LayoutError(f"unknown cell type {cell.get('type')!r}") from e
    return {"type": cell_type.value}


def renumber_seats(layout: SeatLayout) -> SeatLayout:
    """
    Return a copy of ``layout`` with seats numbered 1..N column-first.

    Non-seat cells lose any number they carried. The input is not modified.
    """
    numbered = [[_validated_cell(cell) for cell in row] for row in layout]

    next_number = 1
    for col in range(_grid_width(numbered)):
        for row in numbered:
            if col < len(row) and row[col]["type"] == CellType.SEAT.value:
                row[col]["number"] = next_number
                next_number += 1
    return numbered


def empty_layout(rows: int, cols: int) -> SeatLayout:
    if rows <= 0 or cols <= 0:
        raise LayoutError("rows and columns must be greater than 0")
    return [[{"type": CellType.EMPTY.value} for _ in range(cols)] for _ in range(rows)]


def resize_layout(layout: SeatLayout, rows: int, cols: int) -> SeatLayout:
    """Resize the grid, keeping in-bounds cells and padding with empty ones."""
    resized = empty_layout(rows, cols)
    for r in range(min(rows, len(layout))):
        for c in range(min(cols, len(layout[r]))):
            resized[r][c] = dict(layout[r][c])
    return renumber_seats(resized)


def set_cell(layout: SeatLayout, row: int, col: int, cell_type: CellType | str) -> SeatLayout:
    """Paint one cell with ``cell_type`` and renumber."""
    if not (0 <= row < len(layout)) or not (0 <= col < len(layout[row])):
        raise LayoutError(f"cell ({row}, {col}) is outside the grid")
    painted = [[dict(cell) for cell in r] for r in layout]
    painted[row][col] = {"type": CellType(cell_type).value}
    return renumber_seats(painted)


def seat_numbers(layout: SeatLayout | None) -> list[int]:
    """Seat numbers present in the layout, ascending."""
    if not layout:
        return []
    return sorted(
        cell["number"]
        for row in layout
        for cell in row
        if cell.get("type") == CellType.SEAT.value and cell.get("number") is not None
    )


def count_seats(layout: SeatLayout | None) -> int:
    if not layout:
        return 0
    return sum(1 for row in layout for cell in row if cell.get("type") == CellType.SEAT.value)


def layout_seat_numbers(layout: SeatLayout | None, capacity: int) -> list[int]:
    """Seats of a bus: from its layout, or 1..capacity when it has none."""
    numbers = seat_numbers(layout)
    if numbers:
        return numbers
    return list(range(1, max(capacity, 0) + 1))


def build_seat_map(
    numbers: Iterable[int],
    assignments: Iterable[Any],
) -> list[SeatState]:
    """
    Overlay assignment rows on the bus's seats.

    ``assignments`` are objects with ``seat_number``, ``status`` and
    ``client_id`` attributes. Assignments for seats the bus does not have are
    ignored. The result is ordered by seat number.
    """
    by_seat = {a.seat_number: a for a in assignments}
    seat_map = []
    for number in sorted(set(numbers)):
        assignment = by_seat.get(number)
        if assignment is None:
            seat_map.append(SeatState(seat_number=number))
        else:
            seat_map.append(SeatState(
                seat_number=number,
                status=SeatStatus(assignment.status),
                client_id=assignment.client_id,
            ))
    return seat_map


def validate_selection(
    seat_map: Sequence[SeatState],
    selection: Sequence[int],
    client_id: UUID | None = None,
) -> list[int]:
    """
    Check that every selected seat exists and can be taken by ``client_id``.

    Returns the selection sorted. Raises SeatSelectionError naming the
    offending seats otherwise.
    """
    if not selection:
        raise SeatSelectionError([], "no seats selected")

    duplicates = {seat for seat in selection if selection.count(seat) > 1}
    if duplicates:
        raise SeatSelectionError(list(duplicates), "selected more than once")

    states = {state.seat_number: state for state in seat_map}
    unknown = [seat for seat in selection if seat not in states]
    if unknown:
        raise SeatSelectionError(unknown, "not on this bus")

    taken = [seat for seat in selection if not states[seat].is_selectable_by(client_id)]
    if taken:
        raise SeatSelectionError(taken, "already taken or not for sale")

    return sorted(selection)


def toggle_block(current: SeatStatus | str, block_as: SeatStatus | str = SeatStatus.BLOCKED) -> SeatStatus:
    """
    Admin toggle for a seat.

    Free seats become blocked (or courtesy); blocked and courtesy seats are
    freed. Booked seats belong to a client and cannot be toggled.
    """
    current = SeatStatus(current)
    block_as = SeatStatus(block_as)
    if block_as not in (SeatStatus.BLOCKED, SeatStatus.COURTESY):
        raise ValueError(f"cannot block a seat as {block_as.value}")
    if current == SeatStatus.BOOKED:
        raise SeatSelectionError([], "seat is booked by a client")
    if current == SeatStatus.AVAILABLE:
        return block_as
    return SeatStatus.AVAILABLE


def available_count(seat_map: Sequence[SeatState]) -> int:
    return sum(1 for state in seat_map if state.status == SeatStatus.AVAILABLE)

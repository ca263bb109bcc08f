"""Unit tests for seat layouts and seat maps."""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from agency_api.domain.seating import (
    LayoutError,
    SeatSelectionError,
    SeatState,
    SeatStatus,
    available_count,
    build_seat_map,
    count_seats,
    empty_layout,
    layout_seat_numbers,
    renumber_seats,
    resize_layout,
    seat_numbers,
    set_cell,
    toggle_block,
    validate_selection,
)

SEAT = {"type": "seat"}
AISLE = {"type": "aisle"}


def test_renumber_runs_column_first():
    layout = renumber_seats([
        [SEAT, AISLE, SEAT],
        [SEAT, AISLE, SEAT],
    ])

    assert layout[0][0]["number"] == 1
    assert layout[1][0]["number"] == 2
    assert layout[0][2]["number"] == 3
    assert layout[1][2]["number"] == 4
    assert "number" not in layout[0][1]


def test_renumber_handles_ragged_rows_and_drops_stale_numbers():
    layout = renumber_seats([
        [{"type": "driver", "number": 9}],
        [SEAT, SEAT],
    ])

    assert layout[0][0] == {"type": "driver"}
    assert layout[1][0]["number"] == 1
    assert layout[1][1]["number"] == 2


def test_renumber_does_not_modify_input():
    original = [[{"type": "seat", "number": 7}]]
    renumber_seats(original)

    assert original == [[{"type": "seat", "number": 7}]]


def test_unknown_cell_type_is_rejected():
    with pytest.raises(LayoutError):
        renumber_seats([[{"type": "sofa"}]])


def test_resize_keeps_cells_in_bounds():
    layout = renumber_seats([[SEAT, SEAT], [SEAT, SEAT]])
    resized = resize_layout(layout, rows=1, cols=3)

    assert len(resized) == 1
    assert len(resized[0]) == 3
    assert count_seats(resized) == 2
    assert resized[0][2] == {"type": "empty"}


def test_set_cell_paints_and_renumbers():
    layout = set_cell(empty_layout(2, 2), 1, 1, "seat")

    assert seat_numbers(layout) == [1]
    with pytest.raises(LayoutError):
        set_cell(layout, 5, 0, "seat")


def test_empty_layout_requires_positive_size():
    with pytest.raises(LayoutError):
        empty_layout(0, 4)


def test_layout_seat_numbers_falls_back_to_capacity():
    assert layout_seat_numbers(None, 4) == [1, 2, 3, 4]
    assert layout_seat_numbers(renumber_seats([[SEAT, AISLE, SEAT]]), 40) == [1, 2]


def test_build_seat_map_overlays_assignments():
    client_id = uuid4()
    assignments = [
        SimpleNamespace(seat_number=2, status="booked", client_id=client_id),
        SimpleNamespace(seat_number=3, status="blocked", client_id=None),
        SimpleNamespace(seat_number=99, status="booked", client_id=client_id),
    ]

    seat_map = build_seat_map([3, 1, 2], assignments)

    assert [s.seat_number for s in seat_map] == [1, 2, 3]
    assert seat_map[1] == SeatState(2, SeatStatus.BOOKED, client_id)
    assert seat_map[2].status == SeatStatus.BLOCKED
    assert available_count(seat_map) == 1


class TestValidateSelection:
    client_id = uuid4()
    seat_map = [
        SeatState(1),
        SeatState(2, SeatStatus.BOOKED, client_id),
        SeatState(3, SeatStatus.BOOKED, uuid4()),
        SeatState(4, SeatStatus.BLOCKED),
        SeatState(5, SeatStatus.COURTESY),
    ]

    def test_free_and_own_seats_are_selectable(self):
        assert validate_selection(self.seat_map, [2, 1], self.client_id) == [1, 2]

    def test_other_clients_seat_is_rejected(self):
        with pytest.raises(SeatSelectionError) as exc_info:
            validate_selection(self.seat_map, [1, 3], self.client_id)
        assert exc_info.value.seats == [3]

    @pytest.mark.parametrize("seat", [4, 5])
    def test_blocked_and_courtesy_seats_are_not_for_sale(self, seat):
        with pytest.raises(SeatSelectionError):
            validate_selection(self.seat_map, [seat], self.client_id)

    def test_own_seat_without_client_is_rejected(self):
        with pytest.raises(SeatSelectionError):
            validate_selection(self.seat_map, [2])

    def test_unknown_seat(self):
        with pytest.raises(SeatSelectionError) as exc_info:
            validate_selection(self.seat_map, [42])
        assert exc_info.value.reason == "not on this bus"

    def test_duplicate_seat(self):
        with pytest.raises(SeatSelectionError) as exc_info:
            validate_selection(self.seat_map, [1, 1])
        assert exc_info.value.seats == [1]

    def test_empty_selection(self):
        with pytest.raises(SeatSelectionError):
            validate_selection(self.seat_map, [])


def test_toggle_block():
    assert toggle_block(SeatStatus.AVAILABLE) == SeatStatus.BLOCKED
    assert toggle_block("available", "courtesy") == SeatStatus.COURTESY
    assert toggle_block(SeatStatus.BLOCKED) == SeatStatus.AVAILABLE
    assert toggle_block(SeatStatus.COURTESY) == SeatStatus.AVAILABLE


def test_toggle_booked_seat_is_refused():
    with pytest.raises(SeatSelectionError):
        toggle_block(SeatStatus.BOOKED)


def test_toggle_cannot_block_as_booked():
    with pytest.raises(ValueError):
        toggle_block(SeatStatus.AVAILABLE, SeatStatus.BOOKED)

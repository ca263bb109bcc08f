"""Property-based tests for seat, room and payment invariants."""

from uuid import uuid4

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from agency_api.domain.occupancy import allocate_party_rooms, allocate_rooms
from agency_api.domain.pricing import (
    divide_cents,
    payment_credit,
    remaining_balance,
    status_after_payment,
)
from agency_api.domain.seating import (
    SeatSelectionError,
    SeatState,
    SeatStatus,
    count_seats,
    renumber_seats,
    seat_numbers,
    validate_selection,
)

pytestmark = pytest.mark.property

# Strategies for generating test data
party_sizes = st.integers(min_value=2, max_value=200)
ages = st.one_of(st.none(), st.integers(min_value=0, max_value=120))
amounts = st.integers(min_value=0, max_value=10_000_000)
cell_types = st.sampled_from(["seat", "aisle", "bathroom", "driver", "empty", "entry"])
layouts = st.lists(st.lists(st.fixed_dictionaries({"type": cell_types}), max_size=6), max_size=15)
statuses = st.sampled_from(list(SeatStatus))


@given(people=party_sizes)
def test_rooms_hold_exactly_the_party(people):
    """Every party of two or more fills its rooms with no empty bed."""
    rooms = allocate_rooms(people)

    assert rooms.capacity == people
    assert rooms.double_rooms <= 1
    assert rooms.triple_rooms <= 1


@given(party=st.lists(ages, min_size=1, max_size=60))
def test_rooms_only_count_adults(party):
    rooms, adults, children = allocate_party_rooms(party)

    assert adults + children == len(party)
    if adults >= 2:
        assert rooms.capacity == adults
    elif adults == 1:
        assert rooms.capacity == 2


@given(layout=layouts)
def test_renumbered_seats_are_consecutive(layout):
    numbered = renumber_seats(layout)

    assert seat_numbers(numbered) == list(range(1, count_seats(numbered) + 1))
    assert renumber_seats(numbered) == numbered


@given(
    seat_statuses=st.lists(statuses, min_size=1, max_size=40),
    selection=st.lists(st.integers(min_value=1, max_value=45), min_size=1, max_size=10),
)
def test_selection_never_includes_an_unavailable_seat(seat_statuses, selection):
    client_id = uuid4()
    seat_map = [
        SeatState(number, status, uuid4() if status == SeatStatus.BOOKED else None)
        for number, status in enumerate(seat_statuses, start=1)
    ]

    try:
        chosen = validate_selection(seat_map, selection, client_id)
    except SeatSelectionError:
        return

    states = {s.seat_number: s for s in seat_map}
    assert sorted(set(chosen)) == chosen
    assert all(states[seat].status == SeatStatus.AVAILABLE for seat in chosen)


@given(total=amounts, paid=amounts, advance=amounts)
def test_payment_never_overpays(total, paid, advance):
    assume(paid <= total)
    credit = payment_credit(total, paid, advance)

    assert 0 <= credit <= total - paid
    if paid > 0:
        assert paid + credit == total


@given(total=amounts, advance=amounts)
def test_two_confirmations_settle_any_contract_with_an_advance(total, advance):
    assume(advance > 0)
    paid = payment_credit(total, 0, advance)
    paid += payment_credit(total, paid, advance)

    assert remaining_balance(total, paid) == 0
    assert status_after_payment(total, paid) == "confirmed"


@given(numerator=amounts, denominator=st.integers(min_value=1, max_value=1000))
def test_divide_cents_is_within_half_a_cent(numerator, denominator):
    result = divide_cents(numerator, denominator)

    assert abs(result * denominator - numerator) * 2 <= denominator

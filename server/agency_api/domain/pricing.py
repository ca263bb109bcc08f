"""Rate tables and money arithmetic.

Every amount is an integer number of minor currency units (cents). Where a
division is needed the result is rounded half-up to a whole cent.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Sequence

from .occupancy import ROOM_OCCUPANCY, RoomDetails, is_adult

ROOM_TYPES = ("double", "triple", "quad")


def divide_cents(numerator: int, denominator: int) -> int:
    """Integer division of money rounded half-up."""
    if denominator == 0:
        raise ZeroDivisionError("cannot divide an amount by zero")
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TourRates:
    """Per-person selling prices of a tour."""
    double: int
    triple: int
    quad: int
    child: int = 0

    def per_person(self, room_type: str) -> int:
        return getattr(self, room_type)


@dataclass(frozen=True)
class ExtraLine:
    unit_price: int
    quantity: int

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class HotelLine:
    """One hotel quote used by a tour, priced for a single room type."""
    cost_per_night: int
    nights: int
    room_capacity: int


@dataclass(frozen=True)
class CostBreakdown:
    total_base_cost: int
    paying_clients_count: int
    cost_per_paying_person: int


def lodging_subtotal(rooms: RoomDetails, rates: TourRates) -> int:
    """Rooms times per-person rate times room occupancy."""
    return (
        rooms.double_rooms * rates.double * ROOM_OCCUPANCY["double"]
        + rooms.triple_rooms * rates.triple * ROOM_OCCUPANCY["triple"]
        + rooms.quad_rooms * rates.quad * ROOM_OCCUPANCY["quad"]
    )


def tour_booking_total(
    rooms: RoomDetails,
    children: int,
    rates: TourRates,
    extras: Iterable[ExtraLine] = (),
) -> int:
    return (
        lodging_subtotal(rooms, rates)
        + children * rates.child
        + sum(extra.subtotal for extra in extras)
    )


def advance_due(seats: int, advance_per_person: int) -> int:
    return max(seats, 0) * advance_per_person


def fare_for_age(age: int | None, adult_price: int, child_price: int) -> int:
    return adult_price if is_adult(age) else child_price


def bus_ticket_total(adults: int, children: int, adult_price: int, child_price: int) -> int:
    return adults * adult_price + children * child_price


def remaining_balance(total: int, paid: int) -> int:
    return max(total - paid, 0)


def hotel_line_cost_per_person(line: HotelLine) -> int:
    """Cost per person of a hotel line; zero when the room has no capacity."""
    if line.room_capacity <= 0:
        return 0
    return divide_cents(line.cost_per_night * line.nights, line.room_capacity)


def tour_cost_breakdown(
    bus_cost: int,
    bus_capacity: int,
    courtesies: int,
    provider_costs: Sequence[int] = (),
    hotel_lines: Sequence[HotelLine] = (),
) -> CostBreakdown:
    """
    Base cost of running a tour and what each paying traveller must cover.

    Courtesy seats travel free, so the base cost is spread over
    ``bus_capacity - courtesies`` paying clients.
    """
    total = (
        bus_cost
        + sum(provider_costs)
        + sum(hotel_line_cost_per_person(line) for line in hotel_lines)
    )
    paying = max(bus_capacity - courtesies, 0)
    per_paying = divide_cents(total, paying) if paying > 0 else 0
    return CostBreakdown(
        total_base_cost=total,
        paying_clients_count=paying,
        cost_per_paying_person=per_paying,
    )


def hotel_quote_total(
    rooms_by_type: Mapping[str, int],
    cost_per_night_by_type: Mapping[str, int],
    nights: int,
) -> int:
    return sum(
        rooms_by_type.get(room_type, 0) * cost_per_night_by_type.get(room_type, 0) * nights
        for room_type in ROOM_TYPES
    )


def estimate_stay_cost(cost_per_night_double: int, nights_quoted: int, nights: int) -> int:
    """Scale a quote's double-room price to a stay of ``nights``."""
    return divide_cents(cost_per_night_double * nights, max(nights_quoted, 1))


def payment_credit(total: int, paid: int, advance: int) -> int:
    """
    Amount a payment confirmation credits.

    The first payment covers the advance, so nothing is credited when no
    advance applies; later payments settle the balance.
    """
    if paid == 0:
        return min(advance, total)
    return remaining_balance(total, paid)


def status_after_payment(total: int, paid: int) -> str:
    return "confirmed" if paid >= total else "pending"

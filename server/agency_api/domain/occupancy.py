"""Room allocation for a travelling party."""

from dataclasses import asdict, dataclass
from typing import Iterable, Mapping

CHILD_AGE_LIMIT = 12
MAX_AGE = 120

ROOM_OCCUPANCY = {"double": 2, "triple": 3, "quad": 4}


@dataclass(frozen=True)
class RoomDetails:
    double_rooms: int = 0
    triple_rooms: int = 0
    quad_rooms: int = 0

    @property
    def total_rooms(self) -> int:
        return self.double_rooms + self.triple_rooms + self.quad_rooms

    @property
    def capacity(self) -> int:
        """Beds across all rooms."""
        return (
            self.double_rooms * ROOM_OCCUPANCY["double"]
            + self.triple_rooms * ROOM_OCCUPANCY["triple"]
            + self.quad_rooms * ROOM_OCCUPANCY["quad"]
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, int] | None) -> "RoomDetails":
        data = data or {}
        return cls(
            double_rooms=int(data.get("double_rooms", 0)),
            triple_rooms=int(data.get("triple_rooms", 0)),
            quad_rooms=int(data.get("quad_rooms", 0)),
        )


def is_adult(age: int | None) -> bool:
    """Unknown ages count as adult."""
    return age is None or age >= CHILD_AGE_LIMIT


def validate_age(age: int | None) -> None:
    if age is not None and not 0 <= age <= MAX_AGE:
        raise ValueError(f"age must be between 0 and {MAX_AGE}, got {age}")


def count_party(ages: Iterable[int | None]) -> tuple[int, int]:
    """Split ages into ``(adults, children)``."""
    adults = children = 0
    for age in ages:
        if is_adult(age):
            adults += 1
        else:
            children += 1
    return adults, children


def allocate_rooms(people: int) -> RoomDetails:
    """
    Fill quads first and settle the remainder.

    A remainder of 3 takes a triple and 2 takes a double. A remainder of 1
    breaks one quad into a triple plus a double (5 = 3 + 2); a lone
    traveller gets a double.
    """
    if people <= 0:
        return RoomDetails()

    quads, remainder = divmod(people, 4)
    doubles = triples = 0

    if remainder == 3:
        triples = 1
    elif remainder == 2:
        doubles = 1
    elif remainder == 1:
        if quads > 0:
            quads -= 1
            triples += 1
            doubles += 1
        else:
            doubles = 1

    return RoomDetails(double_rooms=doubles, triple_rooms=triples, quad_rooms=quads)


def allocate_party_rooms(ages: Iterable[int | None]) -> tuple[RoomDetails, int, int]:
    """
    Allocate rooms for the adults of a party.

    Children share their adults' rooms and are charged the child rate, so two
    adults travelling with two children take a single double room.
    Returns ``(rooms, adults, children)``.
    """
    adults, children = count_party(ages)
    return allocate_rooms(adults), adults, children


def describe_rooms(rooms: RoomDetails) -> str:
    parts = []
    for label, count in (("Quad", rooms.quad_rooms), ("Triple", rooms.triple_rooms), ("Double", rooms.double_rooms)):
        if count:
            parts.append(f"{count} {label}")
    return ", ".join(parts) if parts else "No rooms"

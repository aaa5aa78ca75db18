from enum import Enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from hotelbook.common.utils.constants import ROOM_TYPE_PRICES


class Category(str, Enum):
    STANDARD = "STANDARD"
    DELUXE = "DELUXE"
    SUITE = "SUITE"


@dataclass
class Room:
    room_id: str
    category: Category
    name: str
    amenities: List[str] = field(default_factory=list)

    @property
    def price_per_night(self) -> Decimal:
        return ROOM_TYPE_PRICES[self.category.value]


ROOM_CATALOG: List[Room] = [
    Room(
        room_id="standard-101",
        category=Category.STANDARD,
        name="Standard Room 101",
        amenities=["Wi-Fi", "TV", "Air conditioning", "Minibar"],
    ),
    Room(
        room_id="standard-102",
        category=Category.STANDARD,
        name="Standard Room 102",
        amenities=["Wi-Fi", "TV", "Air conditioning", "Minibar"],
    ),
    Room(
        room_id="deluxe-201",
        category=Category.DELUXE,
        name="Deluxe Room 201",
        amenities=[
            "Wi-Fi",
            "Smart TV",
            "Air conditioning",
            "Minibar",
            "Balcony",
            "Breakfast",
        ],
    ),
    Room(
        room_id="suite-301",
        category=Category.SUITE,
        name="Master Suite 301",
        amenities=[
            "Wi-Fi",
            "Smart TV",
            "Air conditioning",
            "Minibar",
            "Balcony",
            "Hot tub",
            "Room service",
            "Breakfast",
        ],
    ),
]


@dataclass
class RoomAvailability:
    room_id: str
    available: bool

    def to_dict(self) -> dict:
        return {"roomId": self.room_id, "available": self.available}

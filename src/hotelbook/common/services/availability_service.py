import logging
import math
from datetime import datetime
from typing import List, Optional

from hotelbook.common.models.bookings import BookingStatus
from hotelbook.common.models.rooms import Room, RoomAvailability, ROOM_CATALOG
from hotelbook.common.repository.booking_repo import BookingRepository
from hotelbook.common.utils.custom_exceptions import InvalidRangeError

logger = logging.getLogger(__name__)


def calculate_nights(checkin: datetime, checkout: datetime) -> int:
    seconds = abs((checkout - checkin).total_seconds())
    return math.ceil(seconds / 86400)


class AvailabilityService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        rooms: Optional[List[Room]] = None,
    ):
        self.booking_repo = booking_repo
        self.rooms = rooms if rooms is not None else ROOM_CATALOG

    def check_availability(
        self, room_id: str, checkin: datetime, checkout: datetime
    ) -> bool:
        if checkin >= checkout:
            raise InvalidRangeError("check-in date must be before check-out date")

        logger.info(
            f"Checking availability for room {room_id} from "
            f"{checkin.isoformat()} to {checkout.isoformat()}"
        )
        confirmed = self.booking_repo.find_by_room_id_and_status(
            room_id, BookingStatus.CONFIRMED
        )
        for booking in confirmed:
            if booking.overlaps(checkin, checkout):
                logger.info(
                    f"Room {room_id} not available due to booking {booking.booking_id}"
                )
                return False

        return True

    def check_availability_for_multiple_rooms(
        self, room_ids: List[str], checkin: datetime, checkout: datetime
    ) -> List[RoomAvailability]:
        return [
            RoomAvailability(
                room_id=room_id,
                available=self.check_availability(room_id, checkin, checkout),
            )
            for room_id in room_ids
        ]

    def get_available_rooms_for_period(
        self,
        checkin: datetime,
        checkout: datetime,
        room_types: Optional[List[str]] = None,
    ) -> List[dict]:
        wanted = {t.upper() for t in room_types or []}
        candidates = [
            room for room in self.rooms if not wanted or room.category.value in wanted
        ]
        nights = calculate_nights(checkin, checkout)

        available = []
        for room in candidates:
            if not self.check_availability(room.room_id, checkin, checkout):
                continue
            available.append(
                {
                    "id": room.room_id,
                    "type": room.category.value,
                    "name": room.name,
                    "pricePerNight": float(room.price_per_night),
                    "totalPrice": float(room.price_per_night * nights),
                    "nights": nights,
                    "amenities": list(room.amenities),
                }
            )

        logger.info(f"Found {len(available)} available rooms")
        return available

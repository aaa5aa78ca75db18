import unittest
from unittest.mock import MagicMock
from datetime import datetime, timezone

from hotelbook.common.models.bookings import Booking, BookingStatus
from hotelbook.common.models.rooms import Room, Category
from hotelbook.common.services.availability_service import (
    AvailabilityService,
    calculate_nights,
)
from hotelbook.common.utils.custom_exceptions import InvalidRangeError, StorageError


def day(d: int) -> datetime:
    return datetime(2024, 5, d, tzinfo=timezone.utc)


def confirmed(checkin: datetime, checkout: datetime, booking_id="b1") -> Booking:
    return Booking(
        booking_id=booking_id,
        user_id="u1",
        room_id="standard-101",
        checkin=checkin,
        checkout=checkout,
        room_type="Standard",
        status=BookingStatus.CONFIRMED,
    )


class TestAvailabilityService(unittest.TestCase):

    def setUp(self):
        self.booking_repo = MagicMock()
        self.booking_repo.find_by_room_id_and_status.return_value = []
        self.service = AvailabilityService(self.booking_repo)

    def test_available_when_no_confirmed_bookings(self):
        self.assertTrue(self.service.check_availability("standard-101", day(15), day(18)))
        self.booking_repo.find_by_room_id_and_status.assert_called_once_with(
            "standard-101", BookingStatus.CONFIRMED
        )

    def test_overlap_matches_half_open_rule(self):
        self.booking_repo.find_by_room_id_and_status.return_value = [
            confirmed(day(15), day(18))
        ]
        cases = [
            (day(10), day(15), True),   # ends on existing check-in
            (day(18), day(20), True),   # starts on existing check-out
            (day(10), day(16), False),
            (day(17), day(20), False),
            (day(16), day(17), False),  # inside
            (day(14), day(19), False),  # around
            (day(15), day(18), False),  # identical
            (day(19), day(21), True),
        ]
        for checkin, checkout, expected in cases:
            with self.subTest(checkin=checkin.day, checkout=checkout.day):
                self.assertEqual(
                    self.service.check_availability("standard-101", checkin, checkout),
                    expected,
                )

    def test_invalid_range_raises(self):
        with self.assertRaises(InvalidRangeError):
            self.service.check_availability("standard-101", day(18), day(15))
        with self.assertRaises(InvalidRangeError):
            self.service.check_availability("standard-101", day(15), day(15))
        self.booking_repo.find_by_room_id_and_status.assert_not_called()

    def test_storage_error_propagates(self):
        self.booking_repo.find_by_room_id_and_status.side_effect = StorageError("down")

        with self.assertRaises(StorageError):
            self.service.check_availability("standard-101", day(15), day(18))

    def test_multiple_rooms_preserves_order(self):
        def by_room(room_id, status):
            if room_id == "deluxe-201":
                return [confirmed(day(15), day(18))]
            return []

        self.booking_repo.find_by_room_id_and_status.side_effect = by_room

        results = self.service.check_availability_for_multiple_rooms(
            ["suite-301", "deluxe-201", "standard-101"], day(16), day(17)
        )

        self.assertEqual(
            [(r.room_id, r.available) for r in results],
            [("suite-301", True), ("deluxe-201", False), ("standard-101", True)],
        )

    def test_rooms_for_period_filters_type_and_availability(self):
        rooms = [
            Room("standard-101", Category.STANDARD, "Standard 101", ["Wi-Fi"]),
            Room("standard-102", Category.STANDARD, "Standard 102", ["Wi-Fi"]),
            Room("suite-301", Category.SUITE, "Suite 301", ["Hot tub"]),
        ]
        service = AvailabilityService(self.booking_repo, rooms=rooms)
        self.booking_repo.find_by_room_id_and_status.side_effect = (
            lambda room_id, status: [confirmed(day(15), day(18))]
            if room_id == "standard-101"
            else []
        )

        result = service.get_available_rooms_for_period(day(15), day(18), ["standard"])

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0]["id"], "standard-102")
        self.assertEqual(result[0]["pricePerNight"], 200.0)
        self.assertEqual(result[0]["nights"], 3)
        self.assertEqual(result[0]["totalPrice"], 600.0)

    def test_calculate_nights_rounds_partial_days_up(self):
        checkin = datetime(2024, 5, 15, 14, tzinfo=timezone.utc)
        checkout = datetime(2024, 5, 18, 10, tzinfo=timezone.utc)
        self.assertEqual(calculate_nights(checkin, checkout), 3)
        self.assertEqual(calculate_nights(day(15), day(18)), 3)


if __name__ == "__main__":
    unittest.main()

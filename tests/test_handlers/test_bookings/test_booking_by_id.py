import json
import unittest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone

from hotelbook.handlers.bookings import get_booking, update_booking, cancel_booking
from hotelbook.common.models.bookings import Booking, BookingStatus, BookingUpdate
from hotelbook.common.utils.custom_exceptions import NotFoundException, InvalidStateError


def make_booking(status=BookingStatus.CREATED):
    return Booking(
        booking_id="b1",
        user_id="u1",
        room_id="standard-101",
        checkin=datetime(2024, 5, 15, tzinfo=timezone.utc),
        checkout=datetime(2024, 5, 18, tzinfo=timezone.utc),
        room_type="Standard",
        status=status,
    )


class BookingByIdHandlerTests(unittest.TestCase):

    def setUp(self):
        self.container = MagicMock()
        self.service = self.container.booking_service
        self.patches = [
            patch.object(m, "get_container", return_value=self.container)
            for m in (get_booking, update_booking, cancel_booking)
        ]
        for p in self.patches:
            p.start()

    def tearDown(self):
        for p in self.patches:
            p.stop()

    def _event(self, booking_id="b1", body=None, user_id="u1"):
        return {
            "body": body,
            "pathParameters": {"id": booking_id} if booking_id else None,
            "requestContext": {"authorizer": {"user_id": user_id} if user_id else {}},
        }

    def test_get_booking_success(self):
        self.service.get_booking_by_id.return_value = make_booking()

        resp = get_booking.get_booking(self._event(), None)

        self.assertEqual(200, resp["statusCode"])
        self.service.get_booking_by_id.assert_called_once_with("b1", "u1")
        self.assertEqual(json.loads(resp["body"])["data"]["id"], "b1")

    def test_get_booking_not_found_returns_404(self):
        self.service.get_booking_by_id.side_effect = NotFoundException("booking", "b1", 404)
        resp = get_booking.get_booking(self._event(), None)
        self.assertEqual(404, resp["statusCode"])

    def test_get_booking_requires_id_and_user(self):
        self.assertEqual(400, get_booking.get_booking(self._event(booking_id=None), None)["statusCode"])
        self.assertEqual(401, get_booking.get_booking(self._event(user_id=None), None)["statusCode"])

    def test_update_booking_success(self):
        self.service.update_booking.return_value = make_booking()

        resp = update_booking.update_booking(
            self._event(body=json.dumps({"numberOfGuests": 3, "specialRequests": "Late arrival"})),
            None,
        )

        self.assertEqual(200, resp["statusCode"])
        booking_id, patch_arg, user_id = self.service.update_booking.call_args.args
        self.assertEqual((booking_id, user_id), ("b1", "u1"))
        self.assertEqual(
            patch_arg, BookingUpdate(number_of_guests=3, special_requests="Late arrival")
        )

    def test_update_booking_rejects_unknown_fields(self):
        resp = update_booking.update_booking(
            self._event(body=json.dumps({"status": "confirmed"})), None
        )
        self.assertEqual(400, resp["statusCode"])
        self.service.update_booking.assert_not_called()

    def test_update_booking_missing_body(self):
        resp = update_booking.update_booking(self._event(), None)
        self.assertEqual(400, resp["statusCode"])

    def test_update_booking_invalid_state_returns_409(self):
        self.service.update_booking.side_effect = InvalidStateError("Cannot update a confirmed booking")
        resp = update_booking.update_booking(self._event(body=json.dumps({"numberOfGuests": 3})), None)
        self.assertEqual(409, resp["statusCode"])

    def test_cancel_booking_success(self):
        self.service.cancel_booking.return_value = make_booking(BookingStatus.CANCELLED)

        resp = cancel_booking.cancel_booking(self._event(), None)

        self.assertEqual(200, resp["statusCode"])
        self.service.cancel_booking.assert_called_once_with("b1", "u1")
        self.assertEqual(json.loads(resp["body"])["data"]["status"], "cancelled")

    def test_cancel_booking_invalid_state_returns_409(self):
        self.service.cancel_booking.side_effect = InvalidStateError("Cannot cancel a confirmed booking")
        resp = cancel_booking.cancel_booking(self._event(), None)
        self.assertEqual(409, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()

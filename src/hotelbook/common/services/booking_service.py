import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from hotelbook.common.repository.booking_repo import BookingRepository
from hotelbook.common.models.bookings import (
    Booking,
    BookingStatus,
    BookingUpdate,
    CANCELLABLE_STATUSES,
    CONFIRMABLE_STATUSES,
)
from hotelbook.common.models.payments import PaymentItem, PaymentPreference
from hotelbook.common.schemas.bookings import BookingRequest
from hotelbook.common.services.availability_service import (
    AvailabilityService,
    calculate_nights,
)
from hotelbook.common.services.payment_service import MercadoPagoClient
from hotelbook.common.utils.booking_number import generate_confirmation_code
from hotelbook.common.utils.constants import DEFAULT_CURRENCY
from hotelbook.common.utils.custom_exceptions import (
    NotFoundException,
    InvalidArgumentError,
    InvalidRangeError,
    InvalidStateError,
    RoomUnavailableError,
)

logger = logging.getLogger(__name__)


@dataclass
class BookingResult:
    booking: Booking
    payment_preference: Optional[PaymentPreference] = None


class BookingService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        availability_service: AvailabilityService,
        payment_client: Optional[MercadoPagoClient] = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.booking_repo = booking_repo
        self.availability_service = availability_service
        self.payment_client = payment_client
        self.currency = currency

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _validate_user_id(user_id) -> None:
        if not user_id or not isinstance(user_id, str):
            raise InvalidArgumentError("Invalid user ID provided")

    def create_booking(self, req: BookingRequest, user_id: str) -> BookingResult:
        self._validate_user_id(user_id)
        if req.checkin >= req.checkout:
            raise InvalidRangeError("check-in date must be before check-out date")

        if not self.availability_service.check_availability(
            req.room_id, req.checkin, req.checkout
        ):
            raise RoomUnavailableError(req.room_id)

        now = self._now()
        booking = Booking(
            user_id=user_id,
            room_id=req.room_id,
            checkin=req.checkin,
            checkout=req.checkout,
            room_type=req.room_type,
            number_of_rooms=req.number_of_rooms,
            number_of_guests=req.number_of_guests,
            is_breakfast_included=req.is_breakfast_included,
            special_requests=req.special_requests,
            total_price=req.total_price,
            status=BookingStatus.CREATED,
            created_at=now,
            updated_at=now,
        )
        created = self.booking_repo.create(booking)

        confirmation_code = generate_confirmation_code()
        created = self.booking_repo.update(
            created.booking_id,
            {"confirmation_code": confirmation_code, "updated_at": self._now()},
        )

        preference = self._request_payment_preference(created)
        logger.info(f"Booking created with confirmation code: {confirmation_code}")
        return BookingResult(booking=created, payment_preference=preference)

    def _payment_items(self, booking: Booking) -> List[PaymentItem]:
        nights = calculate_nights(booking.checkin, booking.checkout)
        return [
            PaymentItem(
                id=booking.booking_id,
                title=f"Booking - {booking.room_type}",
                description=f"Booking for {nights} night(s)",
                quantity=1,
                currency_id=self.currency,
                unit_price=booking.total_price,
            )
        ]

    def _request_payment_preference(
        self, booking: Booking
    ) -> Optional[PaymentPreference]:
        if self.payment_client is None:
            logger.info(
                f"No payment client configured, skipping preference for {booking.booking_id}"
            )
            return None
        try:
            return self.payment_client.create_payment_preference(
                self._payment_items(booking), booking.booking_id, booking.user_id
            )
        except Exception as err:
            # the booking stands without a preference; the guest can retry payment later
            logger.warning(
                f"Payment preference creation failed (non-critical) for "
                f"booking {booking.booking_id}: {err}"
            )
            return None

    def find_by_payment_id(self, payment_id: str) -> Optional[Booking]:
        logger.info(f"Finding booking by payment ID: {payment_id}")
        return self.booking_repo.find_by_payment_id(payment_id)

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        self._validate_user_id(user_id)
        bookings = self.booking_repo.find_by_user_id(user_id)
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    def get_booking_by_id(self, booking_id: str, user_id: str) -> Booking:
        self._validate_user_id(user_id)
        booking = self.booking_repo.find_by_id(booking_id)
        # someone else's booking looks exactly like a missing one
        if booking is None or booking.user_id != user_id:
            raise NotFoundException("booking", booking_id, 404)
        return booking

    def update_booking(
        self, booking_id: str, patch: BookingUpdate, user_id: str
    ) -> Booking:
        booking = self.get_booking_by_id(booking_id, user_id)
        if booking.status != BookingStatus.CREATED:
            raise InvalidStateError(
                f"Cannot update a {booking.status.value} booking"
            )

        changes = patch.changes()
        checkin = changes.get("checkin", booking.checkin)
        checkout = changes.get("checkout", booking.checkout)
        room_id = changes.get("room_id", booking.room_id)
        if checkin >= checkout:
            raise InvalidRangeError("check-in date must be before check-out date")

        if {"room_id", "checkin", "checkout"} & changes.keys():
            if not self.availability_service.check_availability(
                room_id, checkin, checkout
            ):
                raise RoomUnavailableError(room_id)

        changes["updated_at"] = self._now()
        return self.booking_repo.update(
            booking_id, changes, expected_statuses=[BookingStatus.CREATED]
        )

    def cancel_booking(self, booking_id: str, user_id: str) -> Booking:
        booking = self.get_booking_by_id(booking_id, user_id)
        if booking.status not in CANCELLABLE_STATUSES:
            raise InvalidStateError(
                f"Cannot cancel a {booking.status.value} booking"
            )

        cancelled = self.booking_repo.update(
            booking_id,
            {"status": BookingStatus.CANCELLED, "updated_at": self._now()},
            expected_statuses=CANCELLABLE_STATUSES,
        )
        logger.info(f"Booking {booking_id} cancelled by user {user_id}")
        return cancelled

    def confirm_booking_payment(self, booking_id: str, payment_id: str) -> Booking:
        booking = self.booking_repo.find_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id, 404)

        if booking.status == BookingStatus.CONFIRMED:
            return booking
        if booking.status not in CONFIRMABLE_STATUSES:
            raise InvalidStateError(
                f"Cannot confirm a {booking.status.value} booking"
            )
        if booking.payment_id and booking.payment_id != payment_id:
            raise InvalidStateError(
                f"Booking {booking_id} is already linked to payment {booking.payment_id}"
            )

        holder = self.booking_repo.find_by_payment_id(payment_id)
        if holder is not None and holder.booking_id != booking_id:
            raise InvalidStateError(
                f"Payment {payment_id} is already linked to booking {holder.booking_id}"
            )

        try:
            confirmed = self.booking_repo.update(
                booking_id,
                {
                    "status": BookingStatus.CONFIRMED,
                    "payment_id": payment_id,
                    "updated_at": self._now(),
                },
                expected_statuses=CONFIRMABLE_STATUSES,
            )
        except InvalidStateError:
            # a concurrent delivery may have confirmed it between read and write
            current = self.booking_repo.find_by_id(booking_id)
            if current is not None and current.status == BookingStatus.CONFIRMED:
                return current
            raise

        logger.info(f"Booking {booking_id} confirmed with payment {payment_id}")
        return confirmed

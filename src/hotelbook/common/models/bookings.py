from enum import Enum
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


class BookingStatus(str, Enum):
    CREATED = "created"
    # Declared for an explicit "awaiting provider callback" marking; no
    # operation in this service sets it.
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


CONFIRMABLE_STATUSES = (BookingStatus.CREATED, BookingStatus.PENDING_PAYMENT)
CANCELLABLE_STATUSES = (BookingStatus.CREATED, BookingStatus.PENDING_PAYMENT)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Booking:
    user_id: str
    room_id: str
    checkin: datetime
    checkout: datetime
    room_type: str
    number_of_rooms: int = 1
    number_of_guests: int = 1
    is_breakfast_included: bool = False
    special_requests: Optional[str] = None
    total_price: Decimal = Decimal("0")
    status: BookingStatus = BookingStatus.CREATED
    booking_id: Optional[str] = None
    confirmation_code: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def overlaps(self, checkin: datetime, checkout: datetime) -> bool:
        # half-open [checkin, checkout): same-day turnover is not a conflict
        return self.checkin < checkout and checkin < self.checkout


@dataclass
class BookingUpdate:
    """Fields a guest may change while a booking is still ``created``."""

    room_id: Optional[str] = None
    checkin: Optional[datetime] = None
    checkout: Optional[datetime] = None
    room_type: Optional[str] = None
    number_of_rooms: Optional[int] = None
    number_of_guests: Optional[int] = None
    is_breakfast_included: Optional[bool] = None
    special_requests: Optional[str] = None
    total_price: Optional[Decimal] = None
    # None means unchanged; special_requests is cleared explicitly
    clear_special_requests: bool = False

    def changes(self) -> dict:
        changes = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "clear_special_requests" and getattr(self, f.name) is not None
        }
        if self.clear_special_requests:
            changes["special_requests"] = None
        return changes

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from hotelbook.common.models.bookings import Booking, BookingUpdate
from hotelbook.common.utils.datetime_normaliser import ensure_utc

CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)
NULLABLE_UPDATE_FIELDS = {"special_requests"}


class BookingRequest(BaseModel):
    model_config = CAMEL

    room_id: str = Field(min_length=1)
    checkin: datetime = Field(alias="checkIn")
    checkout: datetime = Field(alias="checkOut")
    room_type: str = Field(min_length=1)
    number_of_rooms: int = Field(default=1, ge=1)
    number_of_guests: int = Field(default=1, ge=1)
    is_breakfast_included: bool = False
    special_requests: Optional[str] = None
    total_price: Decimal = Field(ge=0)

    @field_validator("checkin", "checkout")
    @classmethod
    def normalise_dates(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def validate_range(self):
        if self.checkout <= self.checkin:
            raise ValueError("checkout must be after checkin")
        return self


class BookingUpdateRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    room_id: Optional[str] = Field(default=None, min_length=1)
    checkin: Optional[datetime] = Field(default=None, alias="checkIn")
    checkout: Optional[datetime] = Field(default=None, alias="checkOut")
    room_type: Optional[str] = Field(default=None, min_length=1)
    number_of_rooms: Optional[int] = Field(default=None, ge=1)
    number_of_guests: Optional[int] = Field(default=None, ge=1)
    is_breakfast_included: Optional[bool] = None
    special_requests: Optional[str] = None
    total_price: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("checkin", "checkout")
    @classmethod
    def normalise_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @model_validator(mode="after")
    def validate_range(self):
        if self.checkin and self.checkout and self.checkout <= self.checkin:
            raise ValueError("checkout must be after checkin")
        return self

    @model_validator(mode="after")
    def validate_nulls(self):
        for name in self.model_fields_set - NULLABLE_UPDATE_FIELDS:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_update(self) -> BookingUpdate:
        data = self.model_dump(exclude_unset=True)
        clear = "special_requests" in data and data["special_requests"] is None
        if clear:
            del data["special_requests"]
        return BookingUpdate(**data, clear_special_requests=clear)


class AvailabilityQuery(BaseModel):
    model_config = CAMEL

    checkin: datetime = Field(alias="checkIn")
    checkout: datetime = Field(alias="checkOut")
    room_id: Optional[str] = None
    room_ids: Optional[List[str]] = None
    room_type: Optional[str] = None

    @field_validator("room_ids", mode="before")
    @classmethod
    def split_room_ids(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("checkin", "checkout")
    @classmethod
    def normalise_dates(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def validate_range(self):
        if self.checkout <= self.checkin:
            raise ValueError("checkout must be after checkin")
        return self


class BookingResponse(BaseModel):
    model_config = CAMEL

    id: str
    user_id: str
    room_id: str
    checkin: datetime = Field(alias="checkIn")
    checkout: datetime = Field(alias="checkOut")
    room_type: str
    number_of_rooms: int
    number_of_guests: int
    is_breakfast_included: bool
    special_requests: Optional[str] = None
    total_price: float
    status: str
    confirmation_code: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.booking_id,
            user_id=booking.user_id,
            room_id=booking.room_id,
            checkin=booking.checkin,
            checkout=booking.checkout,
            room_type=booking.room_type,
            number_of_rooms=booking.number_of_rooms,
            number_of_guests=booking.number_of_guests,
            is_breakfast_included=booking.is_breakfast_included,
            special_requests=booking.special_requests,
            total_price=float(booking.total_price),
            status=booking.status.value,
            confirmation_code=booking.confirmation_code,
            payment_id=booking.payment_id,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PaymentNotificationData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None


class PaymentNotification(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    action: Optional[str] = None
    type: Optional[str] = None
    data: Optional[PaymentNotificationData] = None

    @property
    def payment_id(self) -> Optional[str]:
        if self.data is None or self.data.id is None:
            return None
        return str(self.data.id)

from botocore.exceptions import ClientError
import logging
from typing import Optional, List, Iterable
from uuid import uuid4
from boto3.dynamodb.conditions import Key
from hotelbook.common.models.bookings import Booking, BookingStatus
from hotelbook.common.utils.custom_exceptions import (
    NotFoundException,
    InvalidStateError,
    StorageError,
)
from hotelbook.common.utils.datetime_normaliser import from_stored, to_iso_string
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)

USER_INDEX = "user_id-index"
ROOM_STATUS_INDEX = "room_id-status-index"
PAYMENT_INDEX = "payment_id-index"

# Booking field -> stored attribute name
ATTRIBUTES = {
    "user_id": "user_id",
    "room_id": "room_id",
    "checkin": "check_in",
    "checkout": "check_out",
    "room_type": "room_type",
    "number_of_rooms": "number_of_rooms",
    "number_of_guests": "number_of_guests",
    "is_breakfast_included": "is_breakfast_included",
    "special_requests": "special_requests",
    "total_price": "total_price",
    "status": "booking_status",
    "confirmation_code": "confirmation_code",
    "payment_id": "payment_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}


class BookingRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _key(booking_id: str) -> dict:
        return {"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}

    @staticmethod
    def _serialize(value):
        if isinstance(value, datetime):
            return to_iso_string(value)
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    def _to_item(self, booking: Booking) -> dict:
        item = dict(self._key(booking.booking_id))
        for field_name, attribute in ATTRIBUTES.items():
            value = getattr(booking, field_name)
            # absent rather than NULL so the sparse payment index stays valid
            if value is None:
                continue
            item[attribute] = self._serialize(value)
        return item

    @staticmethod
    def _to_domain(item: dict) -> Booking:
        return Booking(
            booking_id=item["pk"].removeprefix("BOOKING#"),
            user_id=item["user_id"],
            room_id=item["room_id"],
            checkin=from_stored(item["check_in"]),
            checkout=from_stored(item["check_out"]),
            room_type=item.get("room_type", ""),
            number_of_rooms=int(item.get("number_of_rooms", 1)),
            number_of_guests=int(item.get("number_of_guests", 1)),
            is_breakfast_included=bool(item.get("is_breakfast_included", False)),
            special_requests=item.get("special_requests"),
            total_price=Decimal(str(item.get("total_price", "0"))),
            status=BookingStatus(item["booking_status"]),
            confirmation_code=item.get("confirmation_code"),
            payment_id=item.get("payment_id"),
            created_at=from_stored(item["created_at"]),
            updated_at=from_stored(item["updated_at"]),
        )

    def create(self, booking: Booking) -> Booking:
        booking.booking_id = booking.booking_id or str(uuid4())
        try:
            self.table.put_item(
                Item=self._to_item(booking),
                ConditionExpression="attribute_not_exists(pk)",
            )
        except ClientError as err:
            logger.error(f"Error creating booking {booking.booking_id}: {err}")
            raise StorageError(f"could not create booking: {err}") from err
        return booking

    def find_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(Key=self._key(booking_id))
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id}: {err}")
            raise StorageError(f"could not read booking {booking_id}: {err}") from err

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def _query_index(self, index_name: str, condition) -> List[dict]:
        try:
            resp = self.table.query(
                IndexName=index_name, KeyConditionExpression=condition
            )
            items = resp.get("Items", [])
            while "LastEvaluatedKey" in resp:
                resp = self.table.query(
                    IndexName=index_name,
                    KeyConditionExpression=condition,
                    ExclusiveStartKey=resp["LastEvaluatedKey"],
                )
                items.extend(resp.get("Items", []))
        except ClientError as err:
            logger.error(f"Error querying {index_name}: {err}")
            raise StorageError(f"could not query {index_name}: {err}") from err
        return items

    def find_by_user_id(self, user_id: str) -> List[Booking]:
        items = self._query_index(USER_INDEX, Key("user_id").eq(user_id))
        return [self._to_domain(item) for item in items]

    def find_by_room_id_and_status(
        self, room_id: str, status: BookingStatus
    ) -> List[Booking]:
        items = self._query_index(
            ROOM_STATUS_INDEX,
            Key("room_id").eq(room_id)
            & Key("booking_status").eq(BookingStatus(status).value),
        )
        return [self._to_domain(item) for item in items]

    def find_by_payment_id(self, payment_id: str) -> Optional[Booking]:
        items = self._query_index(PAYMENT_INDEX, Key("payment_id").eq(payment_id))
        if not items:
            return None

        bookings = sorted(
            (self._to_domain(item) for item in items), key=lambda b: b.booking_id
        )
        if len(bookings) > 1:
            logger.warning(
                "payment %s is referenced by %d bookings (%s); using %s",
                payment_id,
                len(bookings),
                ", ".join(b.booking_id for b in bookings),
                bookings[0].booking_id,
            )
        return bookings[0]

    def update(
        self,
        booking_id: str,
        changes: dict,
        expected_statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> Booking:
        if not changes:
            booking = self.find_by_id(booking_id)
            if booking is None:
                raise NotFoundException("booking", booking_id, 404)
            return booking

        names = {}
        values = {}
        assignments = []
        removals = []
        for field_name, value in changes.items():
            attribute = ATTRIBUTES.get(field_name)
            if attribute is None:
                raise ValueError(f"unknown booking field '{field_name}'")
            names[f"#{attribute}"] = attribute
            # None clears the attribute
            if value is None:
                removals.append(f"#{attribute}")
                continue
            values[f":{attribute}"] = self._serialize(value)
            assignments.append(f"#{attribute} = :{attribute}")

        condition = "attribute_exists(pk)"
        expected = [BookingStatus(s) for s in expected_statuses or []]
        if expected:
            names["#booking_status"] = "booking_status"
            placeholders = []
            for i, status in enumerate(expected):
                values[f":expected{i}"] = status.value
                placeholders.append(f":expected{i}")
            condition += f" AND #booking_status IN ({', '.join(placeholders)})"

        expression = []
        if assignments:
            expression.append("SET " + ", ".join(assignments))
        if removals:
            expression.append("REMOVE " + ", ".join(removals))

        params = {
            "Key": self._key(booking_id),
            "UpdateExpression": " ".join(expression),
            "ConditionExpression": condition,
            "ExpressionAttributeNames": names,
            "ReturnValues": "ALL_NEW",
        }
        if values:
            params["ExpressionAttributeValues"] = values

        try:
            response = self.table.update_item(**params)
        except ClientError as err:
            if (
                err.response.get("Error", {}).get("Code")
                == "ConditionalCheckFailedException"
            ):
                raise self._condition_failure(booking_id, expected) from err
            logger.error(f"Error updating booking {booking_id}: {err}")
            raise StorageError(f"could not update booking {booking_id}: {err}") from err

        return self._to_domain(response["Attributes"])

    def _condition_failure(self, booking_id: str, expected: List[BookingStatus]):
        if not expected:
            return NotFoundException("booking", booking_id, 404)
        current = self.find_by_id(booking_id)
        if current is None:
            return NotFoundException("booking", booking_id, 404)
        return InvalidStateError(
            f"booking '{booking_id}' is {current.status.value}, expected one of "
            + ", ".join(s.value for s in expected)
        )

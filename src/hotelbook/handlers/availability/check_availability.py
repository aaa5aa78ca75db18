from pydantic import ValidationError

from hotelbook.common.container import get_container
from hotelbook.common.schemas.bookings import AvailabilityQuery
from hotelbook.common.utils.custom_response import (
    send_custom_response,
    send_error_response,
    format_validation_error,
)
from hotelbook.common.utils.request_context import get_user_id


def check_availability(event, context):
    if not get_user_id(event):
        return send_custom_response(401, "Unauthorized")

    try:
        query = AvailabilityQuery.model_validate(event.get("queryStringParameters") or {})
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    service = get_container().availability_service
    try:
        if query.room_id:
            available = service.check_availability(
                query.room_id, query.checkin, query.checkout
            )
            data = {"roomId": query.room_id, "available": available}
        elif query.room_ids:
            results = service.check_availability_for_multiple_rooms(
                query.room_ids, query.checkin, query.checkout
            )
            data = {"rooms": [r.to_dict() for r in results]}
        else:
            room_types = [query.room_type] if query.room_type else None
            rooms = service.get_available_rooms_for_period(
                query.checkin, query.checkout, room_types
            )
            data = {"count": len(rooms), "rooms": rooms}
    except Exception as err:
        return send_error_response(err)

    return send_custom_response(200, "Availability retrieved successfully", data)

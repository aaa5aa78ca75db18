from hotelbook.common.container import get_container
from hotelbook.common.schemas.bookings import BookingResponse
from hotelbook.common.utils.custom_response import (
    send_custom_response,
    send_error_response,
)
from hotelbook.common.utils.request_context import get_user_id


def get_user_bookings(event, context):
    user_id = get_user_id(event)
    if not user_id:
        return send_custom_response(401, "Unauthorized")

    try:
        bookings = get_container().booking_service.get_user_bookings(user_id)
    except Exception as err:
        return send_error_response(err)

    result = [BookingResponse.from_domain(b).to_json_dict() for b in bookings]
    return send_custom_response(
        200,
        "Bookings retrieved successfully",
        {"count": len(result), "bookings": result},
    )

import logging

from hotelbook.common.container import get_container
from hotelbook.common.schemas.bookings import BookingResponse
from hotelbook.common.utils.custom_response import (
    send_custom_response,
    send_error_response,
)
from hotelbook.common.utils.request_context import get_user_id, get_path_param

logger = logging.getLogger(__name__)


# Serves both DELETE /booking/{id} and POST /booking/{id}/cancel.
def cancel_booking(event, context):
    user_id = get_user_id(event)
    if not user_id:
        return send_custom_response(401, "Unauthorized")

    booking_id = get_path_param(event, "id")
    if not booking_id:
        return send_custom_response(400, "Booking id is required")

    try:
        logger.info(f"Cancelling booking {booking_id} for user: {user_id}")
        booking = get_container().booking_service.cancel_booking(booking_id, user_id)
    except Exception as err:
        return send_error_response(err)

    return send_custom_response(
        200,
        "Booking cancelled successfully",
        BookingResponse.from_domain(booking).to_json_dict(),
    )

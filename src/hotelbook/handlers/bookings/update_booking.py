import logging

from pydantic import ValidationError

from hotelbook.common.container import get_container
from hotelbook.common.schemas.bookings import BookingUpdateRequest, BookingResponse
from hotelbook.common.utils.custom_response import (
    send_custom_response,
    send_error_response,
    format_validation_error,
)
from hotelbook.common.utils.request_context import get_user_id, get_path_param

logger = logging.getLogger(__name__)


def update_booking(event, context):
    user_id = get_user_id(event)
    if not user_id:
        return send_custom_response(401, "Unauthorized")

    booking_id = get_path_param(event, "id")
    if not booking_id:
        return send_custom_response(400, "Booking id is required")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        patch = BookingUpdateRequest.model_validate_json(event["body"]).to_update()
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    try:
        logger.info(f"Updating booking {booking_id} for user: {user_id}")
        booking = get_container().booking_service.update_booking(
            booking_id, patch, user_id
        )
    except Exception as err:
        return send_error_response(err)

    return send_custom_response(
        200,
        "Booking updated successfully",
        BookingResponse.from_domain(booking).to_json_dict(),
    )

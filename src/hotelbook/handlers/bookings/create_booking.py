import logging

from pydantic import ValidationError

from hotelbook.common.container import get_container
from hotelbook.common.schemas.bookings import BookingRequest, BookingResponse
from hotelbook.common.utils.custom_response import (
    send_custom_response,
    send_error_response,
    format_validation_error,
)
from hotelbook.common.utils.request_context import get_user_id

logger = logging.getLogger(__name__)


def create_booking(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = BookingRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))
    except ValueError as e:
        return send_custom_response(400, str(e))

    user_id = get_user_id(event)
    if not user_id:
        return send_custom_response(401, "Unauthorized")

    try:
        logger.info(f"Creating booking for user: {user_id}")
        result = get_container().booking_service.create_booking(request_body, user_id)
    except Exception as err:
        return send_error_response(err)

    preference = result.payment_preference
    return send_custom_response(
        201,
        "Booking created successfully",
        {
            "booking": BookingResponse.from_domain(result.booking).to_json_dict(),
            "paymentPreference": preference.to_dict() if preference else None,
        },
    )

import logging

from pydantic import ValidationError

from hotelbook.common.container import get_container
from hotelbook.common.models.payments import WebhookResult
from hotelbook.common.schemas.bookings import PaymentNotification
from hotelbook.common.utils.custom_response import send_raw_response
from hotelbook.common.utils.request_context import get_header, parse_json_body

logger = logging.getLogger(__name__)


# Always answers 200: MercadoPago redelivers anything else indefinitely.
def mercadopago_webhook(event, context):
    try:
        notification = PaymentNotification.model_validate(parse_json_body(event))
    except (ValidationError, ValueError) as err:
        logger.warning(f"[MERCADOPAGO] Unreadable webhook body: {err}")
        result = WebhookResult(processed=False, error="Invalid payload")
        return send_raw_response(200, result.to_dict())

    try:
        result = get_container().reconciliation_service.handle_notification(
            notification,
            x_signature=get_header(event, "x-signature"),
            x_request_id=get_header(event, "x-request-id"),
        )
    except Exception as err:
        logger.exception("[MERCADOPAGO] Webhook could not be processed")
        result = WebhookResult(processed=False, error=str(err))
    return send_raw_response(200, result.to_dict())

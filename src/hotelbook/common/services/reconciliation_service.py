import logging
from typing import Optional

from hotelbook.common.models.bookings import BookingStatus
from hotelbook.common.models.payments import WebhookResult
from hotelbook.common.schemas.bookings import PaymentNotification
from hotelbook.common.services.booking_service import BookingService
from hotelbook.common.services.payment_service import MercadoPagoClient
from hotelbook.common.utils.constants import HANDLED_PAYMENT_EVENTS

logger = logging.getLogger(__name__)


class PaymentReconciliationService:
    """Turns MercadoPago notifications into booking confirmations.

    Every outcome, including internal failures, is reported as a
    ``WebhookResult`` so the provider always gets a 200 and does not start
    redelivering.
    """

    def __init__(
        self,
        booking_service: BookingService,
        payment_client: Optional[MercadoPagoClient] = None,
        verify_signatures: bool = False,
        verify_payments: bool = False,
    ):
        if (verify_signatures or verify_payments) and payment_client is None:
            raise ValueError("payment verification needs a payment client")
        self.booking_service = booking_service
        self.payment_client = payment_client
        self.verify_signatures = verify_signatures
        self.verify_payments = verify_payments

    def handle_notification(
        self,
        notification: PaymentNotification,
        x_signature: Optional[str] = None,
        x_request_id: Optional[str] = None,
    ) -> WebhookResult:
        try:
            logger.info(
                f"[MERCADOPAGO] Webhook received: event={notification.id} "
                f"action={notification.action} request_id={x_request_id}"
            )

            if notification.action not in HANDLED_PAYMENT_EVENTS:
                logger.info(f"[MERCADOPAGO] Unhandled action: {notification.action}")
                return WebhookResult(processed=False, reason=f"Ignored action: {notification.action}")

            payment_id = notification.payment_id
            if not payment_id:
                logger.warning(f"[MERCADOPAGO] {notification.action} without payment id")
                return WebhookResult(processed=False, reason="Missing payment id")

            if self.verify_signatures and not self.payment_client.verify_webhook_signature(
                x_signature, x_request_id, payment_id
            ):
                logger.warning(f"[MERCADOPAGO] Invalid webhook signature for payment {payment_id}")
                return WebhookResult(processed=False, reason="Invalid signature")

            return self._handle_payment_update(payment_id)
        except Exception as err:
            logger.exception("[MERCADOPAGO] Webhook processing error")
            return WebhookResult(processed=False, error=str(err))

    def _handle_payment_update(self, payment_id: str) -> WebhookResult:
        logger.info(f"[MERCADOPAGO] Processing payment update: {payment_id}")

        booking = self.booking_service.find_by_payment_id(payment_id)
        if booking is None:
            logger.warning(f"[MERCADOPAGO] Booking not found for payment {payment_id}")
            return WebhookResult(processed=False, reason="Booking not found")

        if booking.status == BookingStatus.CONFIRMED:
            logger.info(f"[MERCADOPAGO] Booking {booking.booking_id} already confirmed")
            return WebhookResult(
                processed=True,
                booking_id=booking.booking_id,
                reason="Booking already confirmed",
            )

        if self.verify_payments and not self.payment_client.verify_payment(payment_id):
            logger.info(f"[MERCADOPAGO] Payment {payment_id} not approved yet")
            return WebhookResult(
                processed=False,
                booking_id=booking.booking_id,
                reason="Payment not approved",
            )

        confirmed = self.booking_service.confirm_booking_payment(
            booking.booking_id, payment_id
        )
        logger.info(f"[MERCADOPAGO] Booking confirmed: {confirmed.booking_id}")
        return WebhookResult(processed=True, booking_id=confirmed.booking_id)

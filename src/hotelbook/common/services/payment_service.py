import hashlib
import hmac
import logging
from typing import List, Optional

import mercadopago

from hotelbook.common.models.payments import PaymentItem, PaymentPreference
from hotelbook.common.utils.custom_exceptions import PaymentProviderError

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/payment/webhook/mercadopago"


class MercadoPagoClient:
    def __init__(
        self,
        access_token: str,
        frontend_url: str,
        backend_url: str,
        statement_descriptor: str = "",
        webhook_secret: str = "",
        sdk: Optional[mercadopago.SDK] = None,
    ):
        self.sdk = sdk if sdk else mercadopago.SDK(access_token)
        self.frontend_url = frontend_url.rstrip("/")
        self.backend_url = backend_url.rstrip("/")
        self.statement_descriptor = statement_descriptor
        self.webhook_secret = webhook_secret

    def _preference_body(
        self, items: List[PaymentItem], booking_id: str, user_id: str
    ) -> dict:
        return {
            "items": [item.to_dict() for item in items],
            "back_urls": {
                "success": f"{self.frontend_url}/booking/success/{booking_id}",
                "failure": f"{self.frontend_url}/booking/failure/{booking_id}",
                "pending": f"{self.frontend_url}/booking/pending/{booking_id}",
            },
            "auto_return": "approved",
            "external_reference": booking_id,
            "notification_url": f"{self.backend_url}{WEBHOOK_PATH}",
            "statement_descriptor": self.statement_descriptor,
            "metadata": {"booking_id": booking_id, "user_id": user_id},
        }

    @staticmethod
    def _unwrap(result: dict, operation: str) -> dict:
        if not isinstance(result, dict):
            raise PaymentProviderError(f"{operation} returned an unexpected result: {result!r}")
        status = result.get("status")
        response = result.get("response") or {}
        if status not in (200, 201):
            message = response.get("message") if isinstance(response, dict) else response
            raise PaymentProviderError(f"{operation} failed with status {status}: {message}")
        if not isinstance(response, dict):
            raise PaymentProviderError(f"{operation} returned a non-object body: {response!r}")
        return response

    def create_payment_preference(
        self, items: List[PaymentItem], booking_id: str, user_id: str
    ) -> PaymentPreference:
        try:
            result = self.sdk.preference().create(
                self._preference_body(items, booking_id, user_id)
            )
        except Exception as err:
            logger.error(f"Error creating payment preference for {booking_id}: {err}")
            raise PaymentProviderError(f"Failed to create payment preference: {err}") from err

        response = self._unwrap(result, "payment preference creation")
        if not response.get("id"):
            raise PaymentProviderError(
                f"payment preference for booking {booking_id} came back without an id"
            )
        logger.info(f"Payment preference created for booking {booking_id}: {response.get('id')}")
        return PaymentPreference(
            id=response["id"],
            init_point=response.get("init_point"),
            sandbox_init_point=response.get("sandbox_init_point"),
            raw=response,
        )

    def get_payment_details(self, payment_id: str) -> dict:
        try:
            result = self.sdk.payment().get(payment_id)
        except Exception as err:
            logger.error(f"Error getting payment details {payment_id}: {err}")
            raise PaymentProviderError(f"Failed to get payment details: {err}") from err
        return self._unwrap(result, f"payment lookup {payment_id}")

    def verify_payment(self, payment_id: str) -> bool:
        details = self.get_payment_details(payment_id)
        return details.get("status") == "approved"

    def verify_webhook_signature(
        self, x_signature: Optional[str], x_request_id: Optional[str], data_id: Optional[str]
    ) -> bool:
        """Check MercadoPago's ``x-signature`` header.

        The header looks like ``ts=1704908010,v1=<hex>``; ``v1`` is the
        HMAC-SHA256 of ``id:<data.id>;request-id:<x-request-id>;ts:<ts>;``
        keyed with the webhook secret. Parts whose value is missing are left
        out of the manifest.
        """
        if not self.webhook_secret or not x_signature:
            return False

        parts = {}
        for chunk in x_signature.split(","):
            key, sep, value = chunk.strip().partition("=")
            if sep:
                parts[key] = value
        ts = parts.get("ts")
        received = parts.get("v1")
        if not ts or not received:
            return False

        manifest = ""
        if data_id:
            manifest += f"id:{str(data_id).lower()};"
        if x_request_id:
            manifest += f"request-id:{x_request_id};"
        manifest += f"ts:{ts};"

        expected = hmac.new(
            self.webhook_secret.encode(), manifest.encode(), hashlib.sha256
        ).hexdigest()
        return hmac.compare_digest(expected, received)

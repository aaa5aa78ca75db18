import base64
import json
import unittest
from unittest.mock import MagicMock, patch

from hotelbook.handlers.payments import mercadopago_webhook as mod
from hotelbook.common.models.payments import WebhookResult


class MercadoPagoWebhookTests(unittest.TestCase):

    def setUp(self):
        self.container = MagicMock()
        self.p_container = patch.object(mod, "get_container", return_value=self.container)
        self.p_container.start()
        self.reconciliation = self.container.reconciliation_service

    def tearDown(self):
        self.p_container.stop()

    def _event(self, body, headers=None):
        return {"body": body, "headers": headers or {}}

    def test_forwards_notification_and_headers(self):
        self.reconciliation.handle_notification.return_value = WebhookResult(
            processed=True, booking_id="b1"
        )
        body = json.dumps({"id": 1, "action": "payment.updated", "data": {"id": "pay-123"}})

        resp = mod.mercadopago_webhook(
            self._event(body, {"X-Signature": "ts=1,v1=abc", "x-request-id": "req-1"}), None
        )

        self.assertEqual(200, resp["statusCode"])
        self.assertEqual(
            json.loads(resp["body"]), {"received": True, "processed": True, "bookingId": "b1"}
        )
        notification = self.reconciliation.handle_notification.call_args.args[0]
        self.assertEqual(notification.action, "payment.updated")
        self.assertEqual(notification.payment_id, "pay-123")
        self.assertEqual(
            self.reconciliation.handle_notification.call_args.kwargs,
            {"x_signature": "ts=1,v1=abc", "x_request_id": "req-1"},
        )

    def test_processing_failure_still_returns_200(self):
        self.reconciliation.handle_notification.return_value = WebhookResult(
            processed=False, error="dynamodb down"
        )

        resp = mod.mercadopago_webhook(
            self._event(json.dumps({"action": "payment.created", "data": {"id": "p"}})), None
        )

        self.assertEqual(200, resp["statusCode"])
        self.assertEqual(
            json.loads(resp["body"]),
            {"received": True, "processed": False, "error": "dynamodb down"},
        )

    def test_wiring_failure_still_returns_200(self):
        with patch.object(mod, "get_container", side_effect=RuntimeError("TABLE_NAME environment variable is not set")):
            with self.assertLogs("hotelbook.handlers.payments.mercadopago_webhook", level="ERROR"):
                resp = mod.mercadopago_webhook(
                    self._event(json.dumps({"action": "payment.updated", "data": {"id": "pay-1"}})),
                    None,
                )

        self.assertEqual(200, resp["statusCode"])
        self.assertEqual(
            json.loads(resp["body"]),
            {
                "received": True,
                "processed": False,
                "error": "TABLE_NAME environment variable is not set",
            },
        )

    def test_unexpected_processing_exception_still_returns_200(self):
        self.reconciliation.handle_notification.side_effect = ValueError("boom")

        resp = mod.mercadopago_webhook(
            self._event(json.dumps({"action": "payment.created", "data": {"id": "p"}})), None
        )

        self.assertEqual(200, resp["statusCode"])
        self.assertEqual(json.loads(resp["body"])["error"], "boom")

    def test_base64_body_is_decoded(self):
        self.reconciliation.handle_notification.return_value = WebhookResult(processed=True, booking_id="b1")
        raw = json.dumps({"action": "payment.updated", "data": {"id": "pay-9"}}).encode("utf-8")

        resp = mod.mercadopago_webhook(
            {"body": base64.b64encode(raw).decode("ascii"), "isBase64Encoded": True, "headers": {}},
            None,
        )

        self.assertEqual(200, resp["statusCode"])
        notification = self.reconciliation.handle_notification.call_args.args[0]
        self.assertEqual(notification.payment_id, "pay-9")

    def test_malformed_body_is_acknowledged(self):
        for body in ("{not json", json.dumps([1, 2]), json.dumps({"data": "oops"})):
            with self.subTest(body=body):
                resp = mod.mercadopago_webhook(self._event(body), None)
                self.assertEqual(200, resp["statusCode"])
                self.assertFalse(json.loads(resp["body"])["processed"])
        self.reconciliation.handle_notification.assert_not_called()


if __name__ == "__main__":
    unittest.main()

from decimal import Decimal

CONFIRMATION_CODE_PREFIX = "RES"

DEFAULT_CURRENCY = "BRL"

PAYMENT_EVENT_CREATED = "payment.created"
PAYMENT_EVENT_UPDATED = "payment.updated"
HANDLED_PAYMENT_EVENTS = (PAYMENT_EVENT_CREATED, PAYMENT_EVENT_UPDATED)

ROOM_TYPE_PRICES = {
    "STANDARD": Decimal("200"),
    "DELUXE": Decimal("350"),
    "SUITE": Decimal("500"),
}

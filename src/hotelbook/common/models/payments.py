from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class PaymentItem:
    id: str
    title: str
    description: str
    unit_price: Decimal
    quantity: int = 1
    currency_id: str = "BRL"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "quantity": self.quantity,
            "currency_id": self.currency_id,
            "unit_price": float(self.unit_price),
        }


@dataclass
class PaymentPreference:
    id: str
    init_point: Optional[str] = None
    sandbox_init_point: Optional[str] = None
    raw: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "init_point": self.init_point,
            "sandbox_init_point": self.sandbox_init_point,
        }


@dataclass
class WebhookResult:
    received: bool = True
    processed: bool = False
    booking_id: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        body = {"received": self.received, "processed": self.processed}
        if self.booking_id is not None:
            body["bookingId"] = self.booking_id
        if self.reason is not None:
            body["reason"] = self.reason
        if self.error is not None:
            body["error"] = self.error
        return body

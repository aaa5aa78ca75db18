import os
from dataclasses import dataclass

from hotelbook.common.utils.constants import DEFAULT_CURRENCY

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    table_name: str
    aws_region: str = "sa-east-1"
    mercadopago_access_token: str = ""
    mercadopago_webhook_secret: str = ""
    verify_payments: bool = False
    frontend_url: str = "http://localhost:3000"
    backend_url: str = "http://localhost:3001"
    currency: str = DEFAULT_CURRENCY
    statement_descriptor: str = "Pousada Chapada Reserva"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        table_name = os.environ.get("TABLE_NAME")
        if not table_name:
            raise RuntimeError("TABLE_NAME environment variable is not set")

        return cls(
            table_name=table_name,
            aws_region=os.environ.get("AWS_REGION", cls.aws_region),
            mercadopago_access_token=os.environ.get("MERCADOPAGO_ACCESS_TOKEN", ""),
            mercadopago_webhook_secret=os.environ.get("MERCADOPAGO_WEBHOOK_SECRET", ""),
            verify_payments=os.environ.get("MERCADOPAGO_VERIFY_PAYMENTS", "").lower()
            in TRUTHY,
            frontend_url=os.environ.get("FRONTEND_URL", cls.frontend_url),
            backend_url=os.environ.get("BACKEND_URL", cls.backend_url),
            currency=os.environ.get("PAYMENT_CURRENCY", cls.currency),
            statement_descriptor=os.environ.get(
                "STATEMENT_DESCRIPTOR", cls.statement_descriptor
            ),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
        )

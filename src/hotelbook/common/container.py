import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from boto3 import resource

from hotelbook.common.config import Settings
from hotelbook.common.repository.booking_repo import BookingRepository
from hotelbook.common.services.availability_service import AvailabilityService
from hotelbook.common.services.booking_service import BookingService
from hotelbook.common.services.payment_service import MercadoPagoClient
from hotelbook.common.services.reconciliation_service import (
    PaymentReconciliationService,
)


@dataclass(frozen=True)
class Container:
    settings: Settings
    booking_repo: BookingRepository
    availability_service: AvailabilityService
    booking_service: BookingService
    payment_client: MercadoPagoClient
    reconciliation_service: PaymentReconciliationService


def build_container(settings: Optional[Settings] = None, table=None) -> Container:
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    if table is None:
        dynamodb = resource("dynamodb", region_name=settings.aws_region)
        table = dynamodb.Table(settings.table_name)

    booking_repo = BookingRepository(table)
    availability_service = AvailabilityService(booking_repo)
    payment_client = MercadoPagoClient(
        access_token=settings.mercadopago_access_token,
        frontend_url=settings.frontend_url,
        backend_url=settings.backend_url,
        statement_descriptor=settings.statement_descriptor,
        webhook_secret=settings.mercadopago_webhook_secret,
    )
    booking_service = BookingService(
        booking_repo=booking_repo,
        availability_service=availability_service,
        payment_client=payment_client,
        currency=settings.currency,
    )
    reconciliation_service = PaymentReconciliationService(
        booking_service=booking_service,
        payment_client=payment_client,
        verify_signatures=bool(settings.mercadopago_webhook_secret),
        verify_payments=settings.verify_payments,
    )
    return Container(
        settings=settings,
        booking_repo=booking_repo,
        availability_service=availability_service,
        booking_service=booking_service,
        payment_client=payment_client,
        reconciliation_service=reconciliation_service,
    )


@lru_cache(maxsize=1)
def get_container() -> Container:
    """Build the wiring once per Lambda execution environment."""
    return build_container()

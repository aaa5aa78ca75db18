import json
import logging
from pydantic import BaseModel, ValidationError
from typing import Any, Generic, TypeVar, Optional

from hotelbook.common.utils.custom_exceptions import (
    NotFoundException,
    InvalidArgumentError,
    InvalidRangeError,
    InvalidStateError,
    RoomUnavailableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_HEADERS = {
    "Content-Type": "application/json",
}


class APIResponse(BaseModel, Generic[T]):
    status_code: int
    message: str
    data: Optional[T] = None


def send_custom_response(status_code: int, message: str, data: Optional[Any] = None):
    return {
        "statusCode": status_code,
        "headers": JSON_HEADERS,
        "body": APIResponse[Any](
            status_code=status_code, message=message, data=data
        ).model_dump_json(),
    }


def send_raw_response(status_code: int, body: dict):
    return {
        "statusCode": status_code,
        "headers": JSON_HEADERS,
        "body": json.dumps(body),
    }


def send_error_response(err: Exception):
    """Map a service-layer exception to its HTTP response."""
    if isinstance(err, NotFoundException):
        return send_custom_response(err.status_code, str(err))
    if isinstance(err, (InvalidRangeError, InvalidArgumentError)):
        return send_custom_response(400, str(err))
    if isinstance(err, (RoomUnavailableError, InvalidStateError)):
        return send_custom_response(409, str(err))
    logger.error(f"Unhandled error: {err!r}")
    return send_custom_response(500, "Internal server error")


def format_validation_error(err: ValidationError) -> str:
    return "; ".join(f"{error['msg']}" for error in err.errors())

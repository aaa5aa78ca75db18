"""Confirmation code generation."""

import random
import string
import time

from hotelbook.common.utils.constants import CONFIRMATION_CODE_PREFIX

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_confirmation_code() -> str:
    """Generate a human-shareable confirmation code.

    Returns:
        str: Code like 'RES-LX3K9Q2A-7PZ4M', the millisecond clock in base36
        followed by five random base36 characters.
    """
    timestamp = _to_base36(int(time.time() * 1000))
    random_part = "".join(random.choices(_BASE36, k=5))
    return f"{CONFIRMATION_CODE_PREFIX}-{timestamp}-{random_part}"

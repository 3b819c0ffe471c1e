"""Tracking number generation.

Format: prefix + last 8 digits of the epoch-millisecond clock + a
zero-padded random suffix in 0-999, e.g. ``SY12345678042``.

Uniqueness is probabilistic only: two numbers generated in the same
millisecond collide one time in a thousand.  The database enforces
uniqueness and ``OrderService`` retries on conflict.
"""

from __future__ import annotations

import secrets
import time
from typing import Callable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

TIMESTAMP_DIGITS = 8
SUFFIX_DIGITS = 3
RANDOM_SUFFIX_BOUND = 10**SUFFIX_DIGITS
TRACKING_NUMBER_MAX_LENGTH = 20
MAX_PREFIX_LENGTH = TRACKING_NUMBER_MAX_LENGTH - TIMESTAMP_DIGITS - SUFFIX_DIGITS


def generate_tracking_number(
    clock: Optional[Callable[[], float]] = None,
    randbelow: Optional[Callable[[int], int]] = None,
    prefix: Optional[str] = None,
) -> str:
    if prefix is None:
        prefix = settings.ORDER_TRACKING_PREFIX
    if len(prefix) > MAX_PREFIX_LENGTH:
        raise ImproperlyConfigured(
            f"Tracking prefix {prefix!r} is longer than {MAX_PREFIX_LENGTH} characters."
        )
    clock = clock or time.time
    randbelow = randbelow or secrets.randbelow
    millis = int(clock() * 1000)
    timestamp = str(millis % 10**TIMESTAMP_DIGITS).zfill(TIMESTAMP_DIGITS)
    suffix = str(randbelow(RANDOM_SUFFIX_BOUND)).zfill(SUFFIX_DIGITS)
    return f"{prefix}{timestamp}{suffix}"

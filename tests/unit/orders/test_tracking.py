"""Unit tests for tracking number generation."""

import re

import pytest
from django.core.exceptions import ImproperlyConfigured
from freezegun import freeze_time

from modules.orders.models import Order
from modules.orders.tracking import MAX_PREFIX_LENGTH, generate_tracking_number

pytestmark = pytest.mark.unit

TRACKING_RE = re.compile(r"SY\d{11}")


class TestGenerateTrackingNumber:
    def test_format(self):
        assert TRACKING_RE.fullmatch(generate_tracking_number())

    @freeze_time("2024-03-01 12:00:00.250")
    def test_uses_last_eight_digits_of_epoch_millis(self):
        # 1709294400250 ms
        number = generate_tracking_number(randbelow=lambda bound: 42)
        assert number == "SY94400250042"

    def test_timestamp_is_zero_padded(self):
        number = generate_tracking_number(clock=lambda: 100000.000, randbelow=lambda bound: 7)
        # 100000000 ms -> last 8 digits 00000000
        assert number == "SY00000000007"

    def test_suffix_bound(self):
        bounds = []

        def randbelow(bound):
            bounds.append(bound)
            return bound - 1

        number = generate_tracking_number(clock=lambda: 1.5, randbelow=randbelow)

        assert bounds == [1000]
        assert number == "SY00001500999"

    def test_explicit_prefix(self):
        number = generate_tracking_number(clock=lambda: 1.0, randbelow=lambda b: 0, prefix="DZ")
        assert number == "DZ00001000000"

    def test_prefix_from_settings(self, settings):
        settings.ORDER_TRACKING_PREFIX = "XX"
        assert generate_tracking_number().startswith("XX")

    def test_longest_allowed_prefix_fits_the_column(self):
        number = generate_tracking_number(prefix="P" * MAX_PREFIX_LENGTH)

        max_length = Order._meta.get_field("tracking_number").max_length
        assert len(number) == max_length

    def test_prefix_too_long_for_the_column(self, settings):
        settings.ORDER_TRACKING_PREFIX = "P" * (MAX_PREFIX_LENGTH + 1)

        with pytest.raises(ImproperlyConfigured):
            generate_tracking_number()

"""Unit tests for the structlog processor masking personal data."""

import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit


def _mask(**event):
    return mask_sensitive_data(None, None, dict(event))


class TestMaskSensitiveData:
    @pytest.mark.parametrize(
        "phone", ["0555123456", "0661 23 45 67", "+213770123456", "00213555123456"]
    )
    def test_algerian_mobile_numbers(self, phone):
        result = _mask(event="order.created", detail=f"customer {phone} confirmed")

        assert "***MASKED***" in result["detail"]
        assert phone not in result["detail"]

    def test_password(self):
        result = _mask(event="login", detail="password=hunter2")
        assert "hunter2" not in result["detail"]

    def test_token(self):
        result = _mask(event="auth", detail='token: "abc.def.ghi"')
        assert "abc.def.ghi" not in result["detail"]

    def test_event_name_untouched(self):
        assert _mask(event="order.created")["event"] == "order.created"

    def test_non_strings_untouched(self):
        result = _mask(event="x", quantity=3)
        assert result["quantity"] == 3

    def test_masked_phone_kept(self):
        assert _mask(event="x", phone="***3456")["phone"] == "***3456"

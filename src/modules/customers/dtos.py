"""Customer DTOs."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.customers.models import normalize_phone


class CustomerInfoDTO(BaseModel):
    """Customer identity supplied with an order.

    ``phone`` is normalised so that "0555 12-34-56" and "0555123456"
    resolve to the same customer.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Customer name is required.")
        return v

    @field_validator("phone")
    @classmethod
    def phone_must_have_digits(cls, v: str) -> str:
        v = normalize_phone(v)
        if not re.fullmatch(r"\+?\d{6,15}", v):
            raise ValueError("Invalid phone number.")
        return v

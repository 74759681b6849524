"""Supplier request schemas."""
from __future__ import annotations

import re
from typing import Optional

from flask_babel import gettext as _
from pydantic import EmailStr, Field, field_validator

from clinic_admin.schemas.common import RequestModel, empty_to_none

_SUPPLIER_PHONE_RE = re.compile(r"^[0-9+\-\s()]*$")


class SupplierRequest(RequestModel):
    name: str = Field(min_length=2, max_length=200)
    short_name: Optional[str] = Field(default=None, max_length=50)
    supplier_group: Optional[str] = Field(default=None, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, max_length=500)
    tax_code: Optional[str] = Field(default=None, max_length=20)
    note: Optional[str] = Field(default=None, max_length=1000)

    @field_validator(
        "short_name", "supplier_group", "phone", "email", "address", "tax_code", "note", mode="before"
    )
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _SUPPLIER_PHONE_RE.match(value):
            raise ValueError(_("Phone number may only contain digits, spaces and + - ( )."))
        return value


__all__ = ["SupplierRequest"]

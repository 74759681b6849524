"""Clinic request schemas."""
from __future__ import annotations

from flask_babel import gettext as _
from pydantic import EmailStr, Field, field_validator

from clinic_admin.schemas.common import COLOR_RE, RequestModel, check_phone


class ClinicRequest(RequestModel):
    """Full clinic payload; used for both create and update."""

    clinic_code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=200)
    short_name: str = Field(min_length=1, max_length=20)
    address: str = Field(min_length=1, max_length=500)
    phone: str
    email: EmailStr
    color_code: str
    company_bank_name: str = Field(min_length=1, max_length=200)
    company_bank_account_no: str = Field(min_length=1, max_length=50)
    company_bank_account_name: str = Field(min_length=1, max_length=200)
    personal_bank_name: str = Field(min_length=1, max_length=200)
    personal_bank_account_no: str = Field(min_length=1, max_length=50)
    personal_bank_account_name: str = Field(min_length=1, max_length=200)

    @field_validator("clinic_code")
    @classmethod
    def _upper_code(cls, value: str) -> str:
        return value.upper()

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: str) -> str:
        return check_phone(value)  # type: ignore[return-value]

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("color_code")
    @classmethod
    def _color(cls, value: str) -> str:
        if not COLOR_RE.match(value):
            raise ValueError(_("Color code must look like #RRGGBB."))
        return value


__all__ = ["ClinicRequest"]

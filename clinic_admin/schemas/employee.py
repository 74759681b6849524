"""Employee request schemas."""
from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from flask_babel import gettext as _
from pydantic import EmailStr, Field, field_validator, model_validator

from clinic_admin.schemas.common import (
    NATIONAL_ID_RE,
    RequestModel,
    check_choice,
    check_phone,
    empty_to_none,
    reject_nulls,
)
from clinic_admin.utils.constants import GENDERS

_OPTIONAL_TEXT = (
    "employee_code",
    "department",
    "job_title",
    "position",
    "gender",
    "national_id",
    "tax_id",
    "insurance_number",
    "bank_name",
    "bank_account_no",
    "current_address",
    "clinic_id",
)


def _national_id(value: Optional[str]) -> Optional[str]:
    if value is not None and not NATIONAL_ID_RE.match(value):
        raise ValueError(_("National ID must have 9 or 12 digits."))
    return value


class CreateEmployeeRequest(RequestModel):
    full_name: str = Field(min_length=2, max_length=200)
    email: EmailStr
    phone: str
    employee_code: Optional[str] = Field(default=None, max_length=50)
    role: Literal["admin", "employee"] = "employee"
    clinic_id: str = Field(min_length=1)
    department: Optional[str] = Field(default=None, max_length=120)
    job_title: Optional[str] = Field(default=None, max_length=120)
    position: Optional[str] = Field(default=None, max_length=120)

    @field_validator("employee_code", "department", "job_title", "position", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: str) -> str:
        return check_phone(value)  # type: ignore[return-value]


class UpdateEmployeeRequest(RequestModel):
    """Partial update; omitted fields are left untouched."""

    full_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    employee_code: Optional[str] = Field(default=None, max_length=50)
    role: Optional[Literal["admin", "employee"]] = None
    clinic_id: Optional[str] = None
    department: Optional[str] = Field(default=None, max_length=120)
    job_title: Optional[str] = Field(default=None, max_length=120)
    position: Optional[str] = Field(default=None, max_length=120)
    dob: Optional[dt.date] = None
    gender: Optional[str] = None
    national_id: Optional[str] = None
    tax_id: Optional[str] = Field(default=None, max_length=20)
    insurance_number: Optional[str] = Field(default=None, max_length=20)
    bank_name: Optional[str] = Field(default=None, max_length=200)
    bank_account_no: Optional[str] = Field(default=None, max_length=50)
    current_address: Optional[str] = Field(default=None, max_length=500)

    @field_validator(*_OPTIONAL_TEXT, mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return check_phone(value)

    @field_validator("gender")
    @classmethod
    def _gender(cls, value: Optional[str]) -> Optional[str]:
        return check_choice(value, GENDERS, "gender")

    @field_validator("national_id")
    @classmethod
    def _nid(cls, value: Optional[str]) -> Optional[str]:
        return _national_id(value)

    @model_validator(mode="after")
    def _required_stay_set(self):
        reject_nulls(self, ("full_name", "email", "phone", "role"))
        return self


class SetEmployeeStatusRequest(RequestModel):
    status: Literal["WORKING", "RESIGNED"]


class CompleteProfileRequest(RequestModel):
    full_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    dob: dt.date
    gender: str
    national_id: str
    tax_id: Optional[str] = Field(default=None, max_length=20)
    insurance_number: Optional[str] = Field(default=None, max_length=20)
    bank_name: Optional[str] = Field(default=None, max_length=200)
    bank_account_no: Optional[str] = Field(default=None, max_length=50)
    current_address: Optional[str] = Field(default=None, max_length=500)
    password: str
    confirm_password: str

    @field_validator("tax_id", "insurance_number", "bank_name", "bank_account_no", "current_address", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("gender")
    @classmethod
    def _gender(cls, value: str) -> str:
        return check_choice(value, GENDERS, "gender")  # type: ignore[return-value]

    @field_validator("national_id")
    @classmethod
    def _nid(cls, value: str) -> str:
        return _national_id(value)  # type: ignore[return-value]

    @model_validator(mode="after")
    def _passwords(self):
        if len(self.password) < 6:
            raise ValueError(_("Password must be at least 6 characters."))
        if self.password != self.confirm_password:
            raise ValueError(_("Passwords do not match."))
        return self


class EmployeeListQuery(RequestModel):
    search: Optional[str] = None

    @field_validator("search", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


class WorkingEmployeesQuery(RequestModel):
    clinic_id: Optional[str] = None

    @field_validator("clinic_id", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


__all__ = [
    "CreateEmployeeRequest",
    "UpdateEmployeeRequest",
    "SetEmployeeStatusRequest",
    "CompleteProfileRequest",
    "EmployeeListQuery",
    "WorkingEmployeesQuery",
]

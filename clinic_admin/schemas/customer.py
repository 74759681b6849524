"""Customer request and query schemas."""
from __future__ import annotations

import datetime as dt
import re
from typing import Literal, Optional

from flask_babel import gettext as _
from pydantic import EmailStr, Field, field_validator, model_validator

from clinic_admin.schemas.common import (
    RequestModel,
    check_choice,
    check_phone,
    empty_to_none,
    reject_nulls,
)
from clinic_admin.utils.constants import (
    CUSTOMER_SOURCE_VALUES,
    GENDERS,
    PRIMARY_CONTACT_ROLE_VALUES,
    SERVICE_OF_INTEREST_VALUES,
    SOURCE_NOTE_TYPES,
)
from clinic_admin.utils.dates import DAY_RE

SORTABLE_FIELDS = ("full_name", "customer_code", "created_at", "first_visit_date")
_SORT_RE = re.compile(r"^([a-z_]+):(asc|desc)$")

_NULLABLE_TEXT = (
    "gender",
    "phone",
    "email",
    "address",
    "city",
    "district",
    "primary_contact_role",
    "primary_contact_id",
    "clinic_id",
    "service_of_interest",
    "source",
    "source_notes",
    "occupation",
)


def check_contact_rules(
    phone: Optional[str],
    primary_contact_id: Optional[str],
    primary_contact_role: Optional[str],
    city: Optional[str],
    district: Optional[str],
) -> None:
    """Cross-field rules shared by create and the merged state of update."""
    if not phone and not (primary_contact_id and primary_contact_role):
        raise ValueError(_("A primary contact and their role are required when the customer has no phone."))
    if city and not district:
        raise ValueError(_("District is required when a city is selected."))


def check_source_notes(source: Optional[str], source_notes: Optional[str]) -> None:
    note_type = SOURCE_NOTE_TYPES.get(source or "")
    if note_type in ("employee_search", "customer_search", "text_input_required") and not source_notes:
        raise ValueError(_("Source notes are required for the selected source."))


class _CustomerFields(RequestModel):
    gender: Optional[str] = None
    dob: Optional[dt.date] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=120)
    district: Optional[str] = Field(default=None, max_length=120)
    primary_contact_role: Optional[str] = None
    primary_contact_id: Optional[str] = None
    clinic_id: Optional[str] = None
    service_of_interest: Optional[str] = None
    source: Optional[str] = None
    source_notes: Optional[str] = Field(default=None, max_length=1000)
    occupation: Optional[str] = Field(default=None, max_length=120)

    @field_validator(*_NULLABLE_TEXT, mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return check_phone(value)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @field_validator("gender")
    @classmethod
    def _gender(cls, value: Optional[str]) -> Optional[str]:
        return check_choice(value, GENDERS, "gender")

    @field_validator("primary_contact_role")
    @classmethod
    def _contact_role(cls, value: Optional[str]) -> Optional[str]:
        return check_choice(value, PRIMARY_CONTACT_ROLE_VALUES, "primary contact role")

    @field_validator("source")
    @classmethod
    def _source(cls, value: Optional[str]) -> Optional[str]:
        return check_choice(value, CUSTOMER_SOURCE_VALUES, "source")

    @field_validator("service_of_interest")
    @classmethod
    def _service(cls, value: Optional[str]) -> Optional[str]:
        return check_choice(value, SERVICE_OF_INTEREST_VALUES, "service of interest")


class CreateCustomerRequest(_CustomerFields):
    full_name: str = Field(min_length=2, max_length=200)
    type: Literal["CUSTOMER", "LEAD"] = "CUSTOMER"
    first_visit_date: Optional[dt.datetime] = None

    @model_validator(mode="after")
    def _cross_field(self):
        check_contact_rules(
            self.phone, self.primary_contact_id, self.primary_contact_role, self.city, self.district
        )
        check_source_notes(self.source, self.source_notes)
        return self


class UpdateCustomerRequest(_CustomerFields):
    """Partial update; cross-field rules run on the merged record in the service."""

    full_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    type: Optional[Literal["CUSTOMER", "LEAD"]] = None
    first_visit_date: Optional[dt.datetime] = None

    @model_validator(mode="after")
    def _required_stay_set(self):
        reject_nulls(self, ("full_name", "type"))
        return self


class CustomerListQuery(RequestModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
    search: Optional[str] = None
    clinic_id: Optional[str] = None
    source: Optional[str] = None
    service_of_interest: Optional[str] = None
    sort: str = "created_at:desc"

    @field_validator("search", "clinic_id", "source", "service_of_interest", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("sort", mode="before")
    @classmethod
    def _sort(cls, value):
        value = empty_to_none(value) or "created_at:desc"
        match = _SORT_RE.match(str(value))
        if not match or match.group(1) not in SORTABLE_FIELDS:
            raise ValueError(_("Invalid sort parameter."))
        return value

    @property
    def sort_field(self) -> str:
        return self.sort.split(":", 1)[0]

    @property
    def sort_desc(self) -> bool:
        return self.sort.endswith(":desc")


class CustomerDailyQuery(RequestModel):
    date: Optional[str] = None
    clinic_id: Optional[str] = None

    @field_validator("date", "clinic_id", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("date")
    @classmethod
    def _day(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not DAY_RE.match(value):
            raise ValueError(_("Date must use the YYYY-MM-DD format."))
        return value


class CustomerSearchQuery(RequestModel):
    q: str = Field(min_length=1, max_length=200)
    limit: int = Field(default=10, ge=1, le=50)
    require_phone: bool = False


__all__ = [
    "SORTABLE_FIELDS",
    "check_contact_rules",
    "check_source_notes",
    "CreateCustomerRequest",
    "UpdateCustomerRequest",
    "CustomerListQuery",
    "CustomerDailyQuery",
    "CustomerSearchQuery",
]

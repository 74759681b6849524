"""Labo item, price list and order schemas."""
from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from flask_babel import gettext as _
from pydantic import Field, field_validator, model_validator

from clinic_admin.schemas.common import RequestModel, empty_to_none, reject_nulls
from clinic_admin.utils.constants import ORDER_TYPES
from clinic_admin.utils.dates import DAY_RE

MAX_LABO_PRICE = 100_000_000


class LaboItemRequest(RequestModel):
    name: str = Field(min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    service_group: Optional[str] = Field(default=None, max_length=120)
    unit: Optional[str] = Field(default=None, max_length=50)

    @field_validator("description", "service_group", "unit", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


class CreateLaboServiceRequest(RequestModel):
    supplier_id: str = Field(min_length=1)
    labo_item_id: str = Field(min_length=1)
    price: int = Field(gt=0, le=MAX_LABO_PRICE)
    warranty: Optional[str] = Field(default=None, max_length=100)

    @field_validator("warranty", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


class UpdateLaboServiceRequest(RequestModel):
    price: int = Field(gt=0, le=MAX_LABO_PRICE)
    warranty: Optional[str] = Field(default=None, max_length=100)

    @field_validator("warranty", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


class LaboServiceListQuery(RequestModel):
    supplier_id: Optional[str] = None
    sort_by: Optional[Literal["price", "name"]] = None
    sort_order: Literal["asc", "desc"] = "asc"

    @field_validator("supplier_id", "sort_by", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


def _check_order_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in ORDER_TYPES:
        raise ValueError(_("Invalid order type."))
    return value


class CreateLaboOrderRequest(RequestModel):
    customer_id: str = Field(min_length=1)
    doctor_id: str = Field(min_length=1)
    treatment_date: dt.date
    order_type: str
    supplier_id: str = Field(min_length=1)
    labo_item_id: str = Field(min_length=1)
    quantity: int = Field(ge=1, le=100)
    sent_by_id: str = Field(min_length=1)
    sent_date: Optional[dt.datetime] = None
    expected_fit_date: Optional[dt.date] = None
    detail_requirement: Optional[str] = Field(default=None, max_length=1000)
    clinic_id: Optional[str] = None

    @field_validator("expected_fit_date", "detail_requirement", "clinic_id", "sent_date", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("order_type")
    @classmethod
    def _order_type(cls, value: str) -> str:
        return _check_order_type(value)  # type: ignore[return-value]

    @model_validator(mode="after")
    def _dates(self):
        check_fit_date(self.treatment_date, self.expected_fit_date)
        return self


class UpdateLaboOrderRequest(RequestModel):
    """Partial update; return_date/received_by_id must be given together."""

    doctor_id: Optional[str] = None
    treatment_date: Optional[dt.date] = None
    order_type: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1, le=100)
    sent_by_id: Optional[str] = None
    sent_date: Optional[dt.datetime] = None
    expected_fit_date: Optional[dt.date] = None
    detail_requirement: Optional[str] = Field(default=None, max_length=1000)
    return_date: Optional[dt.datetime] = None
    received_by_id: Optional[str] = None

    @field_validator("expected_fit_date", "detail_requirement", "return_date", "received_by_id", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("order_type")
    @classmethod
    def _order_type(cls, value: Optional[str]) -> Optional[str]:
        return _check_order_type(value)

    @model_validator(mode="after")
    def _pairs(self):
        reject_nulls(self, ("doctor_id", "treatment_date", "order_type", "quantity", "sent_by_id", "sent_date"))
        touched = self.model_fields_set
        if ("return_date" in touched) != ("received_by_id" in touched):
            raise ValueError(_("Return date and receiver must be set together."))
        if (self.return_date is None) != (self.received_by_id is None):
            raise ValueError(_("Return date and receiver must be set together."))
        return self


def check_fit_date(treatment_date: Optional[dt.date], expected_fit_date: Optional[dt.date]) -> None:
    if treatment_date and expected_fit_date and expected_fit_date < treatment_date:
        raise ValueError(_("Expected fit date cannot be before the treatment date."))


class LaboOrderDailyQuery(RequestModel):
    date: Optional[str] = None
    type: Literal["sent", "returned"] = "sent"
    clinic_id: Optional[str] = None
    customer_id: Optional[str] = None

    @field_validator("date", "clinic_id", "customer_id", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("date")
    @classmethod
    def _day(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not DAY_RE.match(value):
            raise ValueError(_("Date must use the YYYY-MM-DD format."))
        return value


__all__ = [
    "MAX_LABO_PRICE",
    "LaboItemRequest",
    "CreateLaboServiceRequest",
    "UpdateLaboServiceRequest",
    "LaboServiceListQuery",
    "CreateLaboOrderRequest",
    "UpdateLaboOrderRequest",
    "check_fit_date",
    "LaboOrderDailyQuery",
]

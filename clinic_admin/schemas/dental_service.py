"""Dental service catalog schemas."""
from __future__ import annotations

import re
from typing import List, Literal, Optional

from flask_babel import gettext as _
from pydantic import Field, field_validator, model_validator

from clinic_admin.schemas.common import RequestModel, empty_to_none

TAG_RE = re.compile(r"^[A-Za-z0-9_-]{1,29}$")
MAX_TAGS = 10


def normalize_tags(values: Optional[List[str]]) -> List[str]:
    """Strip, validate and de-duplicate tags, keeping first-seen order."""
    seen: List[str] = []
    for raw in values or []:
        tag = str(raw).strip()
        if not tag:
            continue
        if not TAG_RE.match(tag):
            raise ValueError(_("Tags may only contain letters, digits, _ and - (max 29 characters)."))
        if tag not in seen:
            seen.append(tag)
    if len(seen) > MAX_TAGS:
        raise ValueError(_("At most %(count)s tags are allowed.", count=MAX_TAGS))
    return seen


class DentalServiceRequest(RequestModel):
    name: str = Field(min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    service_group: Optional[str] = Field(default=None, max_length=120)
    department: Optional[str] = Field(default=None, max_length=120)
    tags: List[str] = Field(default_factory=list)
    unit: str = Field(min_length=1, max_length=50)
    price: int = Field(ge=0)
    min_price: Optional[int] = Field(default=None, ge=0)
    official_warranty: Optional[str] = Field(default=None, max_length=100)
    clinic_warranty: Optional[str] = Field(default=None, max_length=100)
    origin: Optional[str] = Field(default=None, max_length=200)
    avg_treatment_minutes: Optional[int] = Field(default=None, ge=0)
    avg_treatment_sessions: Optional[int] = Field(default=None, ge=0)
    requires_follow_up: bool = False
    payment_account_type: Literal["COMPANY", "PERSONAL"] = "COMPANY"

    @field_validator(
        "description",
        "service_group",
        "department",
        "official_warranty",
        "clinic_warranty",
        "origin",
        mode="before",
    )
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        if value is None:
            return []
        return normalize_tags(value)

    @model_validator(mode="after")
    def _min_price(self):
        if self.min_price is not None and self.min_price > self.price:
            raise ValueError(_("Minimum price cannot exceed the price."))
        return self


__all__ = ["TAG_RE", "MAX_TAGS", "normalize_tags", "DentalServiceRequest"]

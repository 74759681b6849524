"""Labo report query schemas."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator

from clinic_admin.schemas.common import RequestModel, empty_to_none

REPORT_TABS = ("daily", "supplier", "doctor", "service")


class LaboReportSummaryQuery(RequestModel):
    month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    clinic_id: Optional[str] = None

    @field_validator("clinic_id", mode="before")
    @classmethod
    def _blank(cls, value):
        return empty_to_none(value)


class LaboReportDetailQuery(LaboReportSummaryQuery):
    tab: Literal["daily", "supplier", "doctor", "service"]
    key: str = Field(min_length=1)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)


__all__ = ["REPORT_TABS", "LaboReportSummaryQuery", "LaboReportDetailQuery"]

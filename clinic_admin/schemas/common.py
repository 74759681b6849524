"""Shared pydantic building blocks for request and query validation."""
from __future__ import annotations

import re
from typing import Any, Iterable, Literal, Mapping, Optional, Type, TypeVar

from flask_babel import gettext as _
from pydantic import BaseModel, ConfigDict, ValidationError

from clinic_admin.services.errors import ERR

PHONE_RE = re.compile(r"^0\d{9}$")
COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
NATIONAL_ID_RE = re.compile(r"^(?:\d{9}|\d{12})$")

M = TypeVar("M", bound=BaseModel)


class RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class IncludeArchivedQuery(RequestModel):
    include_archived: Literal["0", "1"] = "0"

    @property
    def flag(self) -> bool:
        return self.include_archived == "1"


def parse(model: Type[M], payload: Optional[Mapping[str, Any]]) -> M:
    """Validate `payload` against `model`, raising a 400 ServiceError."""
    try:
        return model.model_validate(dict(payload or {}))
    except ValidationError as exc:
        raise ERR.validation(exc) from exc


def empty_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def check_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not PHONE_RE.match(value):
        raise ValueError(_("Phone number must be 10 digits starting with 0."))
    return value


def check_choice(value: Optional[str], allowed: Iterable[str], label: str) -> Optional[str]:
    if value is None:
        return None
    if value not in tuple(allowed):
        raise ValueError(_("Invalid %(field)s.", field=label))
    return value


def reject_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """Partial updates may omit a required field but never clear it."""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(_("%(field)s cannot be empty.", field=name))


def changes(model: BaseModel) -> dict:
    return model.model_dump(exclude_unset=True)


__all__ = [
    "PHONE_RE",
    "COLOR_RE",
    "NATIONAL_ID_RE",
    "RequestModel",
    "IncludeArchivedQuery",
    "parse",
    "empty_to_none",
    "check_phone",
    "check_choice",
    "reject_nulls",
    "changes",
]

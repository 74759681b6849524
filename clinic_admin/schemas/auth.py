"""Login payload schema."""
from __future__ import annotations

from pydantic import Field

from clinic_admin.schemas.common import RequestModel


class LoginRequest(RequestModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


__all__ = ["LoginRequest"]

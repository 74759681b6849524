"""Utility helpers.

Import surface for identity helpers used by routes and services.
"""
from .identity import (
    SessionUser,
    normalize_email,
    is_admin,
    require_auth,
    require_admin,
    require_employee,
)

__all__ = [
    "SessionUser",
    "normalize_email",
    "is_admin",
    "require_auth",
    "require_admin",
    "require_employee",
]

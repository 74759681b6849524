"""Session identity & permission helpers."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

from flask import session
from flask_babel import gettext as _

from clinic_admin.services.errors import ERR

SESSION_EMPLOYEE_KEY = "employee_id"
ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str
    full_name: str
    role: str
    employee_id: Optional[str]
    clinic_id: Optional[str]

    @property
    def is_admin(self) -> bool:
        return is_admin(self)

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_employee(cls, employee: Any) -> "SessionUser":
        return cls(
            id=employee.id,
            email=employee.email,
            full_name=employee.full_name,
            role=(employee.role or ROLE_EMPLOYEE).lower(),
            employee_id=employee.id,
            clinic_id=employee.clinic_id,
        )


def normalize_email(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip().lower()
    return cleaned or None


def get_session_employee_id() -> Optional[str]:
    raw = session.get(SESSION_EMPLOYEE_KEY)
    return raw if isinstance(raw, str) and raw else None


def remember_employee(employee_id: str) -> None:
    session.clear()
    session[SESSION_EMPLOYEE_KEY] = employee_id


def forget_employee() -> None:
    session.clear()


def is_admin(user: Optional[SessionUser]) -> bool:
    return bool(user and (user.role or "").lower() == ROLE_ADMIN)


def require_auth(user: Optional[SessionUser]) -> SessionUser:
    if user is None:
        raise ERR.unauthorized()
    return user


def require_admin(user: Optional[SessionUser]) -> SessionUser:
    user = require_auth(user)
    if not is_admin(user):
        raise ERR.forbidden(_("Administrator privileges are required."))
    return user


def require_employee(user: Optional[SessionUser]) -> SessionUser:
    user = require_auth(user)
    if not user.employee_id:
        raise ERR.forbidden(_("Your account is not linked to an employee profile."))
    return user


__all__ = [
    "SESSION_EMPLOYEE_KEY",
    "ROLE_ADMIN",
    "ROLE_EMPLOYEE",
    "SessionUser",
    "normalize_email",
    "get_session_employee_id",
    "remember_employee",
    "forget_employee",
    "is_admin",
    "require_auth",
    "require_admin",
    "require_employee",
]

"""Session login for employees (password hashes via werkzeug)."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask_babel import gettext as _
from werkzeug.security import check_password_hash, generate_password_hash

from clinic_admin.db.repositories import employee_repo
from clinic_admin.schemas.auth import LoginRequest
from clinic_admin.schemas.common import parse
from clinic_admin.services.errors import ERR, ServiceError
from clinic_admin.utils.identity import (
    SessionUser,
    forget_employee,
    get_session_employee_id,
    normalize_email,
    remember_employee,
)
from clinic_admin.utils.logging import get_logger

LOG = get_logger("auth_service")


def hash_password(raw: str) -> str:
    return generate_password_hash(raw)


def current_user() -> Optional[SessionUser]:
    """Resolve the session's employee; stale or non-WORKING sessions yield None."""
    employee_id = get_session_employee_id()
    if not employee_id:
        return None
    employee = employee_repo.get_employee(employee_id)
    if employee is None or employee.status != "WORKING":
        return None
    return SessionUser.from_employee(employee)


def login(payload: Optional[Mapping[str, Any]]) -> SessionUser:
    data = parse(LoginRequest, payload)
    email = normalize_email(data.email)
    employee = employee_repo.get_by_email(email) if email else None
    if (
        employee is None
        or not employee.password_hash
        or not check_password_hash(employee.password_hash, data.password)
    ):
        LOG.info("Login failed for %s", email)
        raise ERR.unauthorized(_("Invalid email or password."))
    if employee.status != "WORKING":
        raise ServiceError("ACCOUNT_INACTIVE", _("This account is not active."), 403)
    remember_employee(employee.id)
    LOG.info("Employee %s signed in", employee.id)
    return SessionUser.from_employee(employee)


def logout() -> None:
    forget_employee()


__all__ = ["hash_password", "current_user", "login", "logout"]

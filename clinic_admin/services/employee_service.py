"""Employee management and onboarding (invite -> complete profile)."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import clinic_repo, employee_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.common import changes, parse
from clinic_admin.schemas.employee import (
    CompleteProfileRequest,
    CreateEmployeeRequest,
    EmployeeListQuery,
    SetEmployeeStatusRequest,
    UpdateEmployeeRequest,
    WorkingEmployeesQuery,
)
from clinic_admin.services import invite_link_service
from clinic_admin.services.auth_service import hash_password
from clinic_admin.services.errors import ERR, ServiceError
from clinic_admin.services.permissions import employee_permissions
from clinic_admin.utils.identity import SessionUser, is_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("employee_service")

_WORKING_FIELDS = ("id", "full_name", "employee_code", "job_title", "role", "clinic_id")


def _taken_message(field: str) -> str:
    return {
        "email": _("Email already exists."),
        "phone": _("Phone already exists."),
        "employee_code": _("Employee code already exists."),
        "national_id": _("National ID already exists."),
        "tax_id": _("Tax ID already exists."),
        "insurance_number": _("Insurance number already exists."),
    }.get(field, _("Employee already exists."))


def _require_employee_record(employee_id: str):
    employee = employee_repo.get_employee(employee_id)
    if employee is None:
        raise ERR.not_found(_("Employee not found."))
    return employee


def _require_clinic(clinic_id: str) -> None:
    if clinic_repo.get_clinic(clinic_id) is None:
        raise ERR.invalid(_("Clinic does not exist."))


def _check_unique(values: Dict[str, Any], exclude_id: Optional[str] = None) -> None:
    field = employee_repo.find_taken_field(values, exclude_id=exclude_id)
    if field:
        raise ERR.conflict(_taken_message(field))


def create_employee(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    employee_permissions.validate_create(user)
    data = parse(CreateEmployeeRequest, payload)
    values = data.model_dump()
    _check_unique(values)
    _require_clinic(data.clinic_id)
    values.update(
        status="PENDING",
        created_by_id=user.employee_id,  # type: ignore[union-attr]
        updated_by_id=user.employee_id,  # type: ignore[union-attr]
    )
    try:
        employee = employee_repo.create_employee(values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Employee already exists.")) from exc
    LOG.info("Employee %s created by %s", employee.id, user.employee_id)  # type: ignore[union-attr]
    result = employee.as_dict()
    result["invite_token"] = invite_link_service.encode_invite(employee.id, employee.email)
    return result


def issue_invite(user: Optional[SessionUser], employee_id: str) -> Dict[str, Any]:
    """Re-issue an invite token for a PENDING employee (admin only)."""
    employee_permissions.validate_create(user)
    employee = _require_employee_record(employee_id)
    if employee.status != "PENDING":
        raise ERR.conflict(_("Only pending employees can be invited."))
    return {"invite_token": invite_link_service.encode_invite(employee.id, employee.email)}


def list_employees(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    employee_permissions.validate_view_list(user)
    params = parse(EmployeeListQuery, query)
    return [e.as_dict() for e in employee_repo.list_employees(search=params.search)]


def list_working(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_auth(user)
    params = parse(WorkingEmployeesQuery, query)
    rows = employee_repo.list_working(clinic_id=params.clinic_id)
    return [{field: getattr(e, field) for field in _WORKING_FIELDS} for e in rows]


def get_employee(user: Optional[SessionUser], employee_id: str) -> Dict[str, Any]:
    user = require_auth(user)
    if not is_admin(user) and user.employee_id != employee_id:
        raise ERR.forbidden(_("You can only view your own profile."))
    employee = _require_employee_record(employee_id)
    result = employee.as_dict()
    result["field_permissions"] = employee_permissions.get_field_permissions(user, employee_id)
    return result


def update_employee(
    user: Optional[SessionUser], employee_id: str, payload: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    user = require_auth(user)
    data = parse(UpdateEmployeeRequest, payload)
    existing = _require_employee_record(employee_id)
    employee_permissions.validate_edit(user, existing.id)
    if not is_admin(user):
        raise ERR.forbidden(_("Employees must use the complete profile flow."))

    values = changes(data)
    # only re-check uniques whose value actually changes
    changed = {k: v for k, v in values.items() if v != getattr(existing, k, None)}
    _check_unique(changed, exclude_id=employee_id)
    if changed.get("clinic_id"):
        _require_clinic(changed["clinic_id"])
    values["updated_by_id"] = user.employee_id
    try:
        employee = employee_repo.update_employee(employee_id, values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Employee already exists.")) from exc
    LOG.info("Employee %s updated by %s", employee_id, user.employee_id)
    return employee.as_dict()  # type: ignore[union-attr]


def set_employee_status(
    user: Optional[SessionUser], employee_id: str, payload: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    employee_permissions.validate_change_status(user)
    data = parse(SetEmployeeStatusRequest, payload)
    _require_employee_record(employee_id)
    employee = employee_repo.update_employee(
        employee_id, {"status": data.status, "updated_by_id": user.employee_id}  # type: ignore[union-attr]
    )
    LOG.info("Employee %s status -> %s", employee_id, data.status)
    return employee.as_dict()  # type: ignore[union-attr]


def complete_profile(token: Optional[str], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Finish onboarding: set personal details and password, status WORKING."""
    try:
        invite = invite_link_service.decode_invite(token or "")
    except invite_link_service.SecretKeyUnavailableError:
        LOG.error("Cannot verify invite links: SECRET_KEY is not configured")
        raise
    except invite_link_service.TokenExpiredError as exc:
        raise ServiceError("INVITE_EXPIRED", _("This invite link has expired."), 400) from exc
    except invite_link_service.InviteLinkError as exc:
        raise ServiceError("INVALID_INVITE", _("This invite link is invalid."), 400) from exc

    data = parse(CompleteProfileRequest, payload)
    employee = _require_employee_record(invite["employee_id"])
    if employee.email.lower() != invite["email"]:
        raise ServiceError("INVALID_INVITE", _("This invite link is invalid."), 400)
    if employee.status != "PENDING":
        raise ERR.conflict(_("This profile has already been completed."))

    values = data.model_dump(exclude={"password", "confirm_password"})
    if values.get("full_name") is None:
        values.pop("full_name", None)
    _check_unique(
        {k: values.get(k) for k in ("national_id", "tax_id", "insurance_number")},
        exclude_id=employee.id,
    )
    values.update(
        password_hash=hash_password(data.password),
        status="WORKING",
        updated_by_id=employee.id,
    )
    try:
        updated = employee_repo.update_employee(employee.id, values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Employee already exists.")) from exc
    LOG.info("Employee %s completed profile", employee.id)
    return updated.as_dict()  # type: ignore[union-attr]


def remove_employee(user: Optional[SessionUser], employee_id: str) -> Dict[str, Any]:
    employee_permissions.validate_delete(user)
    if user.employee_id == employee_id:  # type: ignore[union-attr]
        raise ERR.forbidden(_("You cannot delete your own account."))
    existing = _require_employee_record(employee_id)
    linked = employee_repo.count_linked(employee_id)
    if linked["total"] > 0:
        raise ERR.has_linked_data(_("Employee has linked data, please switch status to RESIGNED."))
    employee_repo.delete_employee(employee_id)
    LOG.info("Employee %s deleted by %s", employee_id, user.employee_id)  # type: ignore[union-attr]
    return existing.as_dict()


__all__ = [
    "create_employee",
    "issue_invite",
    "list_employees",
    "list_working",
    "get_employee",
    "update_employee",
    "set_employee_status",
    "complete_profile",
    "remove_employee",
]

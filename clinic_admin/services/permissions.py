"""Permission rules for employees, customers and labo orders.

Each `can_*` check returns a PermissionResult so the UI can disable actions
with a reason; the `validate_*` variants raise ServiceError for services.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional

from flask_babel import gettext as _

from clinic_admin.services.errors import ServiceError
from clinic_admin.utils.identity import SessionUser, is_admin


@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    reason: Optional[str] = None
    full_access: bool = False
    limited_access: bool = False

    def as_dict(self) -> dict:
        return asdict(self)


ALLOWED = PermissionResult(True)


def _denied(reason: str) -> PermissionResult:
    return PermissionResult(False, reason)


def _raise_if_denied(result: PermissionResult, fallback: str) -> None:
    if not result.allowed:
        code = "UNAUTHORIZED" if result.reason == _not_signed_in() else "PERMISSION_DENIED"
        status = 401 if code == "UNAUTHORIZED" else 403
        raise ServiceError(code, result.reason or fallback, status)


def _not_signed_in() -> str:
    return _("You are not signed in.")


def _no_employee() -> str:
    return _("Your account is not linked to an employee profile.")


def _basic(user: Optional[SessionUser]) -> Optional[PermissionResult]:
    if user is None:
        return _denied(_not_signed_in())
    if not user.employee_id:
        return _denied(_no_employee())
    return None


def _record_clinic(record: Any) -> Optional[str]:
    if isinstance(record, dict):
        return record.get("clinic_id")
    return getattr(record, "clinic_id", None)


class EmployeePermissions:
    @staticmethod
    def can_create(user: Optional[SessionUser]) -> PermissionResult:
        if user is None:
            return _denied(_not_signed_in())
        if not is_admin(user):
            return _denied(_("Only administrators can create employees."))
        return ALLOWED

    @staticmethod
    def can_edit(user: Optional[SessionUser], employee_id: str) -> PermissionResult:
        basic = _basic(user)
        if basic:
            return basic
        if is_admin(user) or user.employee_id == employee_id:  # type: ignore[union-attr]
            return ALLOWED
        return _denied(_("You can only edit your own profile."))

    @staticmethod
    def can_delete(user: Optional[SessionUser]) -> PermissionResult:
        if user is None:
            return _denied(_not_signed_in())
        if not is_admin(user):
            return _denied(_("Only administrators can delete employees."))
        return ALLOWED

    @staticmethod
    def can_change_status(user: Optional[SessionUser]) -> PermissionResult:
        if user is None:
            return _denied(_not_signed_in())
        if not is_admin(user):
            return _denied(_("Only administrators can change an employee's status."))
        return ALLOWED

    @staticmethod
    def can_view_list(user: Optional[SessionUser]) -> PermissionResult:
        return _basic(user) or ALLOWED

    @classmethod
    def get_field_permissions(cls, user: Optional[SessionUser], employee_id: str) -> dict:
        editable = cls.can_edit(user, employee_id).allowed
        admin = editable and is_admin(user)
        return {
            "can_edit_role": admin,
            "can_edit_clinic": admin,
            "can_edit_department": admin,
            "can_edit_job_title": admin,
            "can_edit_status": admin,
            "can_edit_personal_info": editable,
        }

    @classmethod
    def validate_create(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_create(user), _("You cannot create employees."))

    @classmethod
    def validate_edit(cls, user: Optional[SessionUser], employee_id: str) -> None:
        _raise_if_denied(cls.can_edit(user, employee_id), _("You cannot edit this employee."))

    @classmethod
    def validate_delete(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_delete(user), _("You cannot delete employees."))

    @classmethod
    def validate_change_status(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_change_status(user), _("You cannot change employee status."))

    @classmethod
    def validate_view_list(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_view_list(user), _("You cannot view employees."))


class CustomerPermissions:
    @staticmethod
    def can_create(user: Optional[SessionUser]) -> PermissionResult:
        basic = _basic(user)
        if basic:
            return basic
        if not user.clinic_id and not is_admin(user):  # type: ignore[union-attr]
            return _denied(_("Employees must belong to a clinic."))
        return ALLOWED

    @staticmethod
    def _same_clinic(user: Optional[SessionUser], customer: Any, reason: str) -> PermissionResult:
        basic = _basic(user)
        if basic:
            return basic
        if is_admin(user):
            return ALLOWED
        if user.clinic_id != _record_clinic(customer):  # type: ignore[union-attr]
            return _denied(reason)
        return ALLOWED

    @classmethod
    def can_edit(cls, user: Optional[SessionUser], customer: Any) -> PermissionResult:
        return cls._same_clinic(user, customer, _("You can only edit customers of your clinic."))

    @classmethod
    def can_delete(cls, user: Optional[SessionUser], customer: Any) -> PermissionResult:
        return cls._same_clinic(user, customer, _("You can only delete customers of your clinic."))

    @classmethod
    def can_view(cls, user: Optional[SessionUser], customer: Any) -> PermissionResult:
        return cls._same_clinic(user, customer, _("You can only view customers of your clinic."))

    @classmethod
    def validate_create(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_create(user), _("You cannot create customers."))

    @classmethod
    def validate_edit(cls, user: Optional[SessionUser], customer: Any) -> None:
        _raise_if_denied(cls.can_edit(user, customer), _("You cannot edit this customer."))

    @classmethod
    def validate_delete(cls, user: Optional[SessionUser], customer: Any) -> None:
        _raise_if_denied(cls.can_delete(user, customer), _("You cannot delete this customer."))

    @classmethod
    def validate_view(cls, user: Optional[SessionUser], customer: Any) -> None:
        _raise_if_denied(cls.can_view(user, customer), _("You cannot view this customer."))


class LaboOrderPermissions:
    LIMITED_FIELDS = frozenset({"quantity", "expected_fit_date", "detail_requirement"})

    @staticmethod
    def can_create(user: Optional[SessionUser]) -> PermissionResult:
        basic = _basic(user)
        if basic:
            return basic
        if not user.clinic_id and not is_admin(user):  # type: ignore[union-attr]
            return _denied(_("Employees must belong to a clinic."))
        return ALLOWED

    @staticmethod
    def can_view(user: Optional[SessionUser], order: Any) -> PermissionResult:
        if user is None:
            return _denied(_not_signed_in())
        if is_admin(user):
            return ALLOWED
        clinic_id = _record_clinic(order)
        if not clinic_id or clinic_id != user.clinic_id:
            return _denied(_("You can only view labo orders of your clinic."))
        return ALLOWED

    @staticmethod
    def can_edit(user: Optional[SessionUser], order: Any) -> PermissionResult:
        basic = _basic(user)
        if basic:
            return basic
        if is_admin(user):
            return PermissionResult(True, full_access=True)
        return_date = order.get("return_date") if isinstance(order, dict) else getattr(order, "return_date", None)
        if return_date is not None:
            return _denied(_("Orders already received from the lab cannot be edited."))
        clinic_id = _record_clinic(order)
        if not clinic_id or clinic_id != user.clinic_id:  # type: ignore[union-attr]
            return _denied(_("You can only edit labo orders of your clinic."))
        return PermissionResult(True, limited_access=True)

    @staticmethod
    def can_delete(user: Optional[SessionUser]) -> PermissionResult:
        if user is None:
            return _denied(_not_signed_in())
        if not is_admin(user):
            return _denied(_("Only administrators can delete labo orders."))
        return ALLOWED

    @classmethod
    def validate_update(cls, user: Optional[SessionUser], order: Any, fields: Iterable[str]) -> PermissionResult:
        result = cls.can_edit(user, order)
        _raise_if_denied(result, _("You cannot edit this labo order."))
        if result.limited_access and set(fields) - cls.LIMITED_FIELDS:
            raise ServiceError(
                "PERMISSION_DENIED",
                _("You can only change the quantity, expected fit date and requirements."),
                403,
            )
        return result

    @classmethod
    def validate_view(cls, user: Optional[SessionUser], order: Any) -> None:
        _raise_if_denied(cls.can_view(user, order), _("You cannot view this labo order."))

    @classmethod
    def validate_create(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_create(user), _("You cannot create labo orders."))

    @classmethod
    def validate_delete(cls, user: Optional[SessionUser]) -> None:
        _raise_if_denied(cls.can_delete(user), _("You cannot delete labo orders."))


employee_permissions = EmployeePermissions()
customer_permissions = CustomerPermissions()
labo_order_permissions = LaboOrderPermissions()

__all__ = [
    "PermissionResult",
    "EmployeePermissions",
    "CustomerPermissions",
    "LaboOrderPermissions",
    "employee_permissions",
    "customer_permissions",
    "labo_order_permissions",
]

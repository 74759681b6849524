"""Tests for the employee, customer and labo order permission rules."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from clinic_admin.services.errors import ServiceError
from clinic_admin.services.permissions import (
    CustomerPermissions,
    EmployeePermissions,
    LaboOrderPermissions,
)
from clinic_admin.utils.identity import SessionUser

ADMIN = SessionUser(id="a1", email="admin@example.com", full_name="Admin", role="admin",
                    employee_id="a1", clinic_id=None)
STAFF = SessionUser(id="e1", email="staff@example.com", full_name="Staff", role="employee",
                    employee_id="e1", clinic_id="c1")
UNLINKED = SessionUser(id="u1", email="nobody@example.com", full_name="Nobody", role="employee",
                       employee_id=None, clinic_id="c1")


def _order(clinic_id="c1", return_date=None):
    return SimpleNamespace(clinic_id=clinic_id, return_date=return_date)


def test_employee_edit_self_or_admin():
    assert EmployeePermissions.can_edit(STAFF, "e1").allowed
    assert not EmployeePermissions.can_edit(STAFF, "e2").allowed
    assert EmployeePermissions.can_edit(ADMIN, "e2").allowed
    assert not EmployeePermissions.can_edit(UNLINKED, "u1").allowed


def test_field_permissions():
    own = EmployeePermissions.get_field_permissions(STAFF, "e1")
    assert own["can_edit_personal_info"] and not own["can_edit_role"]
    assert all(EmployeePermissions.get_field_permissions(ADMIN, "e1").values())
    assert not any(EmployeePermissions.get_field_permissions(STAFF, "e2").values())


def test_not_signed_in_maps_to_401():
    with pytest.raises(ServiceError) as err:
        EmployeePermissions.validate_create(None)
    assert err.value.code == "UNAUTHORIZED"
    assert err.value.http_status == 401


def test_denied_maps_to_permission_denied():
    with pytest.raises(ServiceError) as err:
        EmployeePermissions.validate_delete(STAFF)
    assert err.value.code == "PERMISSION_DENIED"
    assert err.value.http_status == 403


def test_customer_access_is_clinic_scoped():
    assert CustomerPermissions.can_view(STAFF, {"clinic_id": "c1"}).allowed
    assert not CustomerPermissions.can_edit(STAFF, {"clinic_id": "c2"}).allowed
    assert CustomerPermissions.can_delete(ADMIN, {"clinic_id": "c2"}).allowed


def test_customer_create_needs_clinic_for_employees():
    no_clinic = SessionUser(id="e9", email="x@example.com", full_name="X", role="employee",
                            employee_id="e9", clinic_id=None)
    assert not CustomerPermissions.can_create(no_clinic).allowed
    assert CustomerPermissions.can_create(ADMIN).allowed


def test_labo_order_edit_levels():
    admin = LaboOrderPermissions.can_edit(ADMIN, _order(return_date="2026-03-01"))
    assert admin.allowed and admin.full_access

    staff = LaboOrderPermissions.can_edit(STAFF, _order())
    assert staff.allowed and staff.limited_access

    assert not LaboOrderPermissions.can_edit(STAFF, _order(return_date="2026-03-01")).allowed
    assert not LaboOrderPermissions.can_edit(STAFF, _order(clinic_id="c2")).allowed


def test_limited_update_fields():
    LaboOrderPermissions.validate_update(STAFF, _order(), ["quantity", "expected_fit_date"])
    with pytest.raises(ServiceError):
        LaboOrderPermissions.validate_update(STAFF, _order(), ["quantity", "supplier_id"])
    LaboOrderPermissions.validate_update(ADMIN, _order(), ["supplier_id"])


def test_labo_order_view_and_delete():
    assert LaboOrderPermissions.can_view(STAFF, {"clinic_id": "c1"}).allowed
    assert not LaboOrderPermissions.can_view(STAFF, {"clinic_id": None}).allowed
    assert not LaboOrderPermissions.can_delete(STAFF).allowed
    assert LaboOrderPermissions.can_delete(ADMIN).allowed

"""Tests for clinic management."""
from __future__ import annotations

import pytest

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.services import clinic_service
from clinic_admin.services.errors import ServiceError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("CLINIC_ADMIN_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def admin(factory):
    return factory.user(factory.employee(None, role="admin"))


def test_create_normalizes_code_and_email(admin, factory):
    created = clinic_service.create_clinic(
        admin, factory.clinic_payload(clinic_code="q7-450", email="Q7@Example.com")
    )
    assert created["clinic_code"] == "Q7-450"
    assert created["email"] == "q7@example.com"


def test_create_requires_admin(factory):
    clinic = factory.clinic()
    staff = factory.user(factory.employee(clinic.id))
    with pytest.raises(ServiceError) as err:
        clinic_service.create_clinic(staff, factory.clinic_payload())
    assert err.value.http_status == 403
    with pytest.raises(ServiceError) as err:
        clinic_service.create_clinic(None, factory.clinic_payload())
    assert err.value.http_status == 401


@pytest.mark.parametrize(
    "field,value",
    [("phone", "12345"), ("color_code", "red"), ("email", "not-an-email"), ("name", "")],
)
def test_create_validates_fields(admin, factory, field, value):
    with pytest.raises(ServiceError) as err:
        clinic_service.create_clinic(admin, factory.clinic_payload(**{field: value}))
    assert err.value.code == "VALIDATION_ERROR"


@pytest.mark.parametrize("field", ["clinic_code", "name", "short_name"])
def test_duplicates_conflict(admin, factory, field):
    existing = factory.clinic()
    with pytest.raises(ServiceError) as err:
        clinic_service.create_clinic(admin, factory.clinic_payload(**{field: getattr(existing, field)}))
    assert err.value.http_status == 409


def test_update_keeps_own_unique_values(admin, factory):
    clinic = factory.clinic()
    payload = factory.clinic_payload(clinic_code=clinic.clinic_code, name=clinic.name, short_name=clinic.short_name,
                                     address="99 Tran Hung Dao")
    updated = clinic_service.update_clinic(admin, clinic.id, payload)
    assert updated["address"] == "99 Tran Hung Dao"


def test_archive_hides_from_default_list(admin, factory):
    clinic = factory.clinic()
    clinic_service.archive_clinic(admin, clinic.id)
    assert clinic_service.list_clinics(admin) == []
    assert len(clinic_service.list_clinics(admin, {"include_archived": "1"})) == 1
    restored = clinic_service.unarchive_clinic(admin, clinic.id)
    assert restored["archived_at"] is None


def test_remove_blocked_by_employees(admin, factory):
    clinic = factory.clinic()
    factory.employee(clinic.id)
    with pytest.raises(ServiceError) as err:
        clinic_service.remove_clinic(admin, clinic.id)
    assert err.value.code == "HAS_LINKED_DATA"


def test_remove_unknown_clinic(admin):
    with pytest.raises(ServiceError) as err:
        clinic_service.remove_clinic(admin, "missing")
    assert err.value.http_status == 404

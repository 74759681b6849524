"""Tests for employee management and the invite/complete-profile flow."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from werkzeug.security import check_password_hash

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.db.repositories import employee_repo
from clinic_admin.services import employee_service, invite_link_service
from clinic_admin.services.errors import ServiceError
from clinic_admin.startup.wiring import create_app


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("CLINIC_ADMIN_DB_PATH", ":memory:")
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "UTC")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def app_ctx():
    app = create_app({"TESTING": True, "SECRET_KEY": "test-secret", "BABEL_DEFAULT_LOCALE": "en"})
    with app.app_context():
        yield app


@pytest.fixture
def people(factory):
    clinic = factory.clinic()
    admin = factory.employee(None, role="admin")
    staff = factory.employee(clinic.id)
    return {"clinic": clinic, "admin": admin, "staff": staff, "admin_user": factory.user(admin),
            "staff_user": factory.user(staff)}


def _new_employee(clinic_id, **overrides):
    payload = {
        "full_name": "Vo Thi Mai",
        "email": "Mai.Vo@Example.com",
        "phone": "0987654321",
        "clinic_id": clinic_id,
        "job_title": "Bac si",
    }
    payload.update(overrides)
    return payload


def _profile(**overrides):
    payload = {
        "dob": "1995-04-12",
        "gender": "female",
        "national_id": "079195000123",
        "current_address": "1 Nguyen Hue",
        "password": "matkhau1",
        "confirm_password": "matkhau1",
    }
    payload.update(overrides)
    return payload


def test_admin_creates_pending_employee_with_invite(app_ctx, people):
    created = employee_service.create_employee(people["admin_user"], _new_employee(people["clinic"].id))
    assert created["status"] == "PENDING"
    assert created["email"] == "mai.vo@example.com"
    assert created["created_by_id"] == people["admin"].id
    decoded = invite_link_service.decode_invite(created["invite_token"])
    assert decoded["employee_id"] == created["id"]


def test_only_admin_creates(people):
    with pytest.raises(ServiceError) as err:
        employee_service.create_employee(people["staff_user"], _new_employee(people["clinic"].id))
    assert err.value.http_status == 403


def test_duplicate_email_conflicts(people):
    with pytest.raises(ServiceError) as err:
        employee_service.create_employee(
            people["admin_user"], _new_employee(people["clinic"].id, email=people["staff"].email)
        )
    assert err.value.http_status == 409


def test_unknown_clinic_is_rejected(people):
    with pytest.raises(ServiceError) as err:
        employee_service.create_employee(people["admin_user"], _new_employee("missing"))
    assert err.value.http_status == 400


def test_complete_profile_activates_employee(app_ctx, people):
    created = employee_service.create_employee(people["admin_user"], _new_employee(people["clinic"].id))
    done = employee_service.complete_profile(created["invite_token"], _profile())
    assert done["status"] == "WORKING"
    assert done["national_id"] == "079195000123"
    stored = employee_repo.get_employee(created["id"])
    assert check_password_hash(stored.password_hash, "matkhau1")

    with pytest.raises(ServiceError) as err:
        employee_service.complete_profile(created["invite_token"], _profile())
    assert err.value.http_status == 409


def test_complete_profile_rejects_mismatched_passwords(app_ctx, people):
    created = employee_service.create_employee(people["admin_user"], _new_employee(people["clinic"].id))
    with pytest.raises(ServiceError) as err:
        employee_service.complete_profile(created["invite_token"], _profile(confirm_password="other1"))
    assert err.value.code == "VALIDATION_ERROR"


def test_complete_profile_with_bad_token(app_ctx):
    with pytest.raises(ServiceError) as err:
        employee_service.complete_profile("garbage", _profile())
    assert err.value.code == "INVALID_INVITE"


def test_complete_profile_with_expired_token(app_ctx, people):
    created = employee_service.create_employee(people["admin_user"], _new_employee(people["clinic"].id))
    stale = invite_link_service.encode_invite(
        created["id"], created["email"], issued_at=datetime.now(timezone.utc) - timedelta(days=8)
    )
    with pytest.raises(ServiceError) as err:
        employee_service.complete_profile(stale, _profile())
    assert err.value.code == "INVITE_EXPIRED"


def test_complete_profile_without_secret_is_not_an_invalid_invite(app_ctx, people):
    created = employee_service.create_employee(people["admin_user"], _new_employee(people["clinic"].id))
    app_ctx.config["SECRET_KEY"] = None
    with pytest.raises(invite_link_service.SecretKeyUnavailableError):
        employee_service.complete_profile(created["invite_token"], _profile())
    assert employee_repo.get_employee(created["id"]).status == "PENDING"


def test_reissue_invite_only_for_pending(app_ctx, people):
    with pytest.raises(ServiceError) as err:
        employee_service.issue_invite(people["admin_user"], people["staff"].id)
    assert err.value.http_status == 409


def test_employee_views_only_self(people, factory):
    own = employee_service.get_employee(people["staff_user"], people["staff"].id)
    assert own["field_permissions"]["can_edit_personal_info"] is True
    assert own["field_permissions"]["can_edit_role"] is False
    with pytest.raises(ServiceError) as err:
        employee_service.get_employee(people["staff_user"], people["admin"].id)
    assert err.value.http_status == 403


def test_non_admin_update_is_forbidden(people):
    with pytest.raises(ServiceError) as err:
        employee_service.update_employee(people["staff_user"], people["staff"].id, {"job_title": "Le tan"})
    assert err.value.http_status == 403


def test_admin_update_skips_unchanged_uniques(people):
    updated = employee_service.update_employee(
        people["admin_user"],
        people["staff"].id,
        {"email": people["staff"].email, "job_title": "Truong phong"},
    )
    assert updated["job_title"] == "Truong phong"
    assert updated["updated_by_id"] == people["admin"].id


def test_status_change(people):
    result = employee_service.set_employee_status(people["admin_user"], people["staff"].id, {"status": "RESIGNED"})
    assert result["status"] == "RESIGNED"
    with pytest.raises(ServiceError):
        employee_service.set_employee_status(people["admin_user"], people["staff"].id, {"status": "PENDING"})


def test_working_list_is_trimmed(people, factory):
    factory.employee(people["clinic"].id, status="PENDING")
    rows = employee_service.list_working(people["staff_user"], {"clinic_id": people["clinic"].id})
    assert [r["id"] for r in rows] == [people["staff"].id]
    assert set(rows[0]) == {"id", "full_name", "employee_code", "job_title", "role", "clinic_id"}


def test_remove_rules(people, factory):
    with pytest.raises(ServiceError) as err:
        employee_service.remove_employee(people["admin_user"], people["admin"].id)
    assert err.value.http_status == 403

    customer = factory.customer(people["clinic"].id, created_by_id=people["staff"].id)
    assert customer.created_by_id == people["staff"].id
    with pytest.raises(ServiceError) as err:
        employee_service.remove_employee(people["admin_user"], people["staff"].id)
    assert err.value.code == "HAS_LINKED_DATA"

    spare = factory.employee(people["clinic"].id)
    employee_service.remove_employee(people["admin_user"], spare.id)
    assert employee_repo.get_employee(spare.id) is None


def test_name_search_is_literal(people, factory):
    factory.employee(people["clinic"].id, full_name="Le_Van Tam", status="RESIGNED")
    assert employee_service.list_employees(people["admin_user"], {"search": "%"}) == []
    rows = employee_service.list_employees(people["admin_user"], {"search": "le_van"})
    assert [r["full_name"] for r in rows] == ["Le_Van Tam"]
    assert employee_service.list_employees(people["admin_user"], {"search": "le van"}) == []

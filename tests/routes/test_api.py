"""Tests for the JSON API surface: error envelope, auth, clinics, reports."""
from __future__ import annotations

from datetime import datetime

import pytest

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.services import clinic_service
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
def client():
    app = create_app({"TESTING": True, "SECRET_KEY": "api-test-secret", "BABEL_DEFAULT_LOCALE": "en"})
    return app.test_client()


@pytest.fixture
def people(factory):
    clinic = factory.clinic()
    return {
        "clinic": clinic,
        "admin": factory.employee(None, role="admin", email="boss@example.com"),
        "staff": factory.employee(clinic.id, email="staff.one@example.com"),
    }


def _sign_in(client, employee):
    with client.session_transaction() as sess:
        sess["employee_id"] = employee.id


def test_login_me_logout(client, people):
    resp = client.post("/api/v1/auth/login", json={"email": "boss@example.com", "password": "Secret123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"

    me = client.get("/api/v1/auth/me")
    assert me.get_json()["user"]["employee_id"] == people["admin"].id

    client.post("/api/v1/auth/logout")
    assert client.get("/api/v1/auth/me").status_code == 401


def test_login_failure_envelope(client, people):
    resp = client.post("/api/v1/auth/login", json={"email": "boss@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "UNAUTHORIZED"
    assert resp.get_json()["error"]


def test_pending_account_cannot_login(client, people, factory):
    factory.employee(people["clinic"].id, status="PENDING", email="new@example.com")
    resp = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "Secret123"})
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "ACCOUNT_INACTIVE"


def test_malformed_json_is_rejected(client, people):
    _sign_in(client, people["admin"])
    resp = client.post("/api/v1/clinics", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_INVALID"


def test_unexpected_error_becomes_server_error(client, people, monkeypatch):
    def _boom(*_args, **_kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(clinic_service, "list_clinics", _boom)
    _sign_in(client, people["admin"])
    resp = client.get("/api/v1/clinics")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["code"] == "SERVER_ERROR"
    assert "fire" not in body["error"]


def test_clinic_create_flow(client, people, factory):
    _sign_in(client, people["staff"])
    assert client.post("/api/v1/clinics", json=factory.clinic_payload()).status_code == 403

    _sign_in(client, people["admin"])
    resp = client.post("/api/v1/clinics", json=factory.clinic_payload(clinic_code="q1"))
    assert resp.status_code == 201
    clinic_id = resp.get_json()["id"]
    assert client.get(f"/api/v1/clinics/{clinic_id}").get_json()["clinic_code"] == "Q1"
    assert client.post(f"/api/v1/clinics/{clinic_id}/archive").status_code == 200
    listed = client.get("/api/v1/clinics?include_archived=1").get_json()["items"]
    assert clinic_id in [c["id"] for c in listed]


def test_anonymous_clinic_list(client):
    resp = client.get("/api/v1/clinics")
    assert resp.status_code == 401


def test_master_data_requires_login(client, people):
    assert client.get("/api/v1/master-data").status_code == 401
    _sign_in(client, people["staff"])
    data = client.get("/api/v1/master-data").get_json()
    assert "Bảo hành" in data["order_types"]
    assert {s["value"] for s in data["customer_sources"]} >= {"employee_referral", "other"}


def test_labo_report_endpoints(client, people, factory):
    doctor = people["staff"]
    customer = factory.customer(people["clinic"].id)
    supplier, item = factory.supplier(), factory.item()
    price = factory.price(supplier.id, item.id, price=200_000)
    factory.order(customer, doctor, supplier, item, price, return_date=datetime(2026, 3, 4, 9))

    _sign_in(client, doctor)
    denied = client.get("/api/v1/reports/labo/summary?month=2026-03")
    assert denied.status_code == 403
    assert denied.get_json()["code"] == "PERMISSION_DENIED"

    _sign_in(client, people["admin"])
    bad = client.get("/api/v1/reports/labo/summary?month=2026-3")
    assert bad.status_code == 400
    assert bad.get_json()["code"] == "INVALID_QUERY"

    summary = client.get(f"/api/v1/reports/labo/summary?month=2026-03&clinic_id={people['clinic'].id}")
    assert summary.status_code == 200
    assert summary.get_json()["kpi"]["total_cost"] == 200_000

    detail = client.get(f"/api/v1/reports/labo/detail?month=2026-03&tab=supplier&key={supplier.id}")
    assert detail.get_json()["total_records"] == 1


def test_customer_create_and_fetch(client, people):
    _sign_in(client, people["staff"])
    resp = client.post("/api/v1/customers", json={"full_name": "Dang Thi Thu", "phone": "0911222333"})
    assert resp.status_code == 201
    customer_id = resp.get_json()["id"]
    fetched = client.get(f"/api/v1/customers/{customer_id}").get_json()
    assert fetched["full_name"] == "Dang Thi Thu"
    assert fetched["primary_contact"] is None


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "db": True}

"""Tests for the labo report service (summary tabs and drill-down)."""
from __future__ import annotations

from datetime import datetime

import pytest

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.services import labo_report_service
from clinic_admin.services.errors import ServiceError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("CLINIC_ADMIN_DB_PATH", ":memory:")
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "UTC")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def data(factory):
    clinic = factory.clinic()
    admin = factory.employee(None, role="admin")
    doctor = factory.employee(clinic.id, full_name="Bac si Lan")
    customer = factory.customer(clinic.id, full_name="Tran Thi Hoa")
    supplier = factory.supplier()
    item = factory.item(name="Cau rang")
    price = factory.price(supplier.id, item.id, price=250_000)
    factory.order(customer, doctor, supplier, item, price, quantity=3, return_date=datetime(2026, 3, 2, 9))
    factory.order(customer, doctor, supplier, item, price, return_date=datetime(2026, 3, 9, 9))
    factory.order(customer, doctor, supplier, item, None, return_date=datetime(2026, 3, 9, 10))
    return {
        "admin": factory.user(admin),
        "staff": factory.user(doctor),
        "doctor": doctor,
        "supplier": supplier,
        "price": price,
    }


def test_summary_requires_login():
    with pytest.raises(ServiceError) as err:
        labo_report_service.summary(None, {"month": "2026-03"})
    assert err.value.http_status == 401


def test_summary_is_admin_only(data):
    with pytest.raises(ServiceError) as err:
        labo_report_service.summary(data["staff"], {"month": "2026-03"})
    assert err.value.code == "PERMISSION_DENIED"
    assert err.value.http_status == 403


@pytest.mark.parametrize("query", [{}, {"month": "2026-13"}, {"month": "03-2026"}])
def test_summary_rejects_bad_month(data, query):
    with pytest.raises(ServiceError) as err:
        labo_report_service.summary(data["admin"], query)
    assert err.value.code == "INVALID_QUERY"
    assert err.value.http_status == 400


def test_summary_shape_and_percentages(data):
    result = labo_report_service.summary(data["admin"], {"month": "2026-03"})
    kpi = result["kpi"]
    assert kpi["total_orders"] == 3
    assert kpi["total_cost"] == 750_000 + 250_000 + 100_000
    assert kpi["previous_month_orders"] == 0
    assert kpi["total_orders_growth_mom"] is None

    tabs = result["summary_tabs"]
    assert set(tabs) == {"by_date", "by_supplier", "by_doctor", "by_service"}
    by_date = tabs["by_date"]
    assert [row["id"] for row in by_date] == ["2026-03-02", "2026-03-09"]
    assert by_date[0]["date"] == "02/03/2026"
    assert sum(row["percentage"] for row in by_date) == pytest.approx(100.0)

    supplier_row = tabs["by_supplier"][0]
    assert supplier_row["id"] == data["supplier"].id
    assert supplier_row["rank"] == 1
    assert supplier_row["percentage"] == pytest.approx(100.0)

    service_rows = tabs["by_service"]
    assert len(service_rows) == 1
    assert service_rows[0]["id"] == data["price"].id
    assert service_rows[0]["total_cost"] == 1_000_000


def test_empty_month_has_zero_percentages(data):
    result = labo_report_service.summary(data["admin"], {"month": "2025-01"})
    assert result["kpi"]["total_orders"] == 0
    assert result["summary_tabs"]["by_date"] == []


def test_detail_paginates_but_totals_all_records(data):
    query = {"month": "2026-03", "tab": "doctor", "key": data["doctor"].id, "page": 1, "page_size": 2}
    result = labo_report_service.detail(data["admin"], query)
    assert result["total_records"] == 3
    assert len(result["records"]) == 2
    assert result["total_cost"] == 1_100_000

    record = result["records"][0]
    assert record["customer_name"] == "Tran Thi Hoa"
    assert record["return_date_display"] == "02/03/2026"
    assert record["treatment_date"] == "2026-03-01"


def test_detail_without_price_entry_shows_placeholder_service(data):
    result = labo_report_service.detail(
        data["admin"], {"month": "2026-03", "tab": "daily", "key": "2026-03-09"}
    )
    names = sorted(r["service_name"] for r in result["records"])
    assert names == ["Cau rang", "N/A"]


def test_detail_rejects_unknown_tab(data):
    with pytest.raises(ServiceError) as err:
        labo_report_service.detail(data["admin"], {"month": "2026-03", "tab": "week", "key": "x"})
    assert err.value.code == "INVALID_QUERY"

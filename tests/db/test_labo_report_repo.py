"""Aggregation tests for the labo report repository."""
from __future__ import annotations

from datetime import datetime

import pytest

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.db.repositories import labo_report_repo


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("CLINIC_ADMIN_DB_PATH", ":memory:")
    monkeypatch.setenv("CLINIC_ADMIN_TIMEZONE", "UTC")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def setup(factory):
    clinic = factory.clinic()
    doctor_a = factory.employee(clinic.id, full_name="Bac si A")
    doctor_b = factory.employee(clinic.id, full_name="Bac si B")
    customer = factory.customer(clinic.id)
    lab_one = factory.supplier(name="Labo Mot")
    lab_two = factory.supplier(name="Labo Hai")
    crown = factory.item(name="Mao su")
    price_one = factory.price(lab_one.id, crown.id, price=300_000)
    price_two = factory.price(lab_two.id, crown.id, price=1_000_000)
    return locals()


def test_only_orders_returned_in_month_are_counted(factory, setup):
    s = setup
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 10, 8, 0))
    # sent in March, not yet back
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"])
    # returned in April
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 4, 1, 0, 0))

    rows = labo_report_repo.query_month_orders("2026-03")
    assert len(rows) == 1
    assert rows[0].return_date == datetime(2026, 3, 10, 8, 0)


def test_clinic_filter(factory, setup):
    s = setup
    other_clinic = factory.clinic()
    other_customer = factory.customer(other_clinic.id)
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 10))
    factory.order(other_customer, s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 11))

    assert len(labo_report_repo.query_month_orders("2026-03")) == 2
    assert len(labo_report_repo.query_month_orders("2026-03", s["clinic"].id)) == 1
    assert labo_report_repo.month_totals("2026-03", other_clinic.id) == (1, 300_000)


def test_daily_groups_chronologically(factory, setup):
    s = setup
    for day in (12, 3, 12):
        factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                      return_date=datetime(2026, 3, day, 9))
    daily = labo_report_repo.compute_daily(labo_report_repo.query_month_orders("2026-03"))
    assert [d["date"].day for d in daily] == [3, 12]
    assert daily[1]["order_count"] == 2
    assert daily[1]["total_cost"] == 600_000
    assert "rank" not in daily[0]


def test_supplier_ranking_and_average(factory, setup):
    s = setup
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  quantity=2, return_date=datetime(2026, 3, 5))
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 6))
    factory.order(s["customer"], s["doctor_b"], s["lab_two"], s["crown"], s["price_two"],
                  return_date=datetime(2026, 3, 7))

    ranked = labo_report_repo.compute_by_supplier(labo_report_repo.query_month_orders("2026-03"))
    assert [r["supplier_id"] for r in ranked] == [s["lab_two"].id, s["lab_one"].id]
    assert [r["rank"] for r in ranked] == [1, 2]
    assert ranked[1]["order_count"] == 2
    assert ranked[1]["total_cost"] == 900_000
    assert ranked[1]["avg_cost"] == 450_000


def test_equal_costs_keep_first_seen_order(factory, setup):
    s = setup
    factory.order(s["customer"], s["doctor_b"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 5))
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 6))
    ranked = labo_report_repo.compute_by_doctor(labo_report_repo.query_month_orders("2026-03"))
    assert [r["doctor_name"] for r in ranked] == ["Bac si B", "Bac si A"]


def test_service_grouping_skips_orders_without_price_entry(factory, setup):
    s = setup
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 5))
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], None,
                  return_date=datetime(2026, 3, 6))
    rows = labo_report_repo.query_month_orders("2026-03")
    by_service = labo_report_repo.compute_by_service(rows)
    assert len(by_service) == 1
    assert by_service[0]["service_id"] == s["price_one"].id
    assert by_service[0]["service_name"] == "Mao su"
    assert by_service[0]["supplier_name"] == s["lab_one"].short_name


def test_kpi_growth(factory, setup):
    s = setup
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 2, 20))
    for day in (2, 3):
        factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                      return_date=datetime(2026, 3, day))
    rows = labo_report_repo.query_month_orders("2026-03")
    prev_orders, prev_cost = labo_report_repo.month_totals("2026-02")
    kpi = labo_report_repo.compute_kpi(rows, prev_orders, prev_cost)
    assert kpi.total_orders == 2
    assert kpi.total_cost == 600_000
    assert kpi.previous_month_orders == 1
    assert kpi.total_orders_growth_mom == pytest.approx(100.0)
    assert kpi.total_cost_growth_mom == pytest.approx(100.0)


@pytest.mark.parametrize("previous", [None, 0])
def test_growth_is_none_without_previous_month(previous):
    assert labo_report_repo.growth(5, previous) is None


def test_filter_details_by_tab(factory, setup):
    s = setup
    factory.order(s["customer"], s["doctor_a"], s["lab_one"], s["crown"], s["price_one"],
                  return_date=datetime(2026, 3, 5, 14))
    factory.order(s["customer"], s["doctor_b"], s["lab_two"], s["crown"], s["price_two"],
                  return_date=datetime(2026, 3, 6))
    rows = labo_report_repo.query_month_orders("2026-03")

    assert len(labo_report_repo.filter_details(rows, "daily", "2026-03-05")) == 1
    assert len(labo_report_repo.filter_details(rows, "daily", "not-a-date")) == 0
    assert len(labo_report_repo.filter_details(rows, "supplier", s["lab_two"].id)) == 1
    assert len(labo_report_repo.filter_details(rows, "doctor", s["doctor_a"].id)) == 1
    assert len(labo_report_repo.filter_details(rows, "service", s["price_two"].id)) == 1
    assert labo_report_repo.filter_details(rows, "unknown", "x") == []

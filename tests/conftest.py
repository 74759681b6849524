"""Shared record builders for the clinic_admin test-suite."""
from __future__ import annotations

import itertools
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from clinic_admin.db.repositories import (
    clinic_repo,
    customer_repo,
    employee_repo,
    labo_item_repo,
    labo_order_repo,
    labo_service_repo,
    supplier_repo,
)
from clinic_admin.services.auth_service import hash_password
from clinic_admin.utils.identity import SessionUser

_SEQ = itertools.count(1)


def _n() -> int:
    return next(_SEQ)


def clinic_payload(**overrides) -> dict:
    n = _n()
    payload = {
        "clinic_code": f"CL{n:03d}",
        "name": f"Nha khoa {n}",
        "short_name": f"NK{n}",
        "address": "12 Le Loi, Q1",
        "phone": "0281234567",
        "email": f"clinic{n}@example.com",
        "color_code": "#1A2B3C",
        "company_bank_name": "VCB",
        "company_bank_account_no": "0011223344",
        "company_bank_account_name": "CONG TY NHA KHOA",
        "personal_bank_name": "ACB",
        "personal_bank_account_no": "5566778899",
        "personal_bank_account_name": "NGUYEN VAN A",
    }
    payload.update(overrides)
    return payload


def make_clinic(**overrides):
    return clinic_repo.create_clinic(clinic_payload(**overrides))


def make_employee(clinic_id=None, role="employee", status="WORKING", password="Secret123", **overrides):
    n = _n()
    fields = {
        "full_name": f"Nhan Vien {n}",
        "email": f"staff{n}@example.com",
        "phone": f"09{n:08d}",
        "role": role,
        "status": status,
        "clinic_id": clinic_id,
        "password_hash": hash_password(password) if password else None,
    }
    fields.update(overrides)
    return employee_repo.create_employee(fields)


def make_customer(clinic_id, type="CUSTOMER", **overrides):
    n = _n()
    fields = {
        "full_name": f"Khach Hang {n}",
        "type": type,
        "phone": f"08{n:08d}",
        "clinic_id": clinic_id,
        "customer_code": f"TST-0000-{n:03d}" if type == "CUSTOMER" else None,
        "first_visit_date": datetime(2026, 3, 1, 9, 0) if type == "CUSTOMER" else None,
    }
    fields.update(overrides)
    return customer_repo.create_customer(fields)


def make_supplier(**overrides):
    n = _n()
    fields = {"name": f"Labo {n}", "short_name": f"LB{n}"}
    fields.update(overrides)
    return supplier_repo.create_supplier(fields)


def make_item(**overrides):
    n = _n()
    fields = {"name": f"Rang su {n}", "unit": "rang"}
    fields.update(overrides)
    return labo_item_repo.create_item(fields)


def make_price(supplier_id, labo_item_id, price=500_000, warranty="5 nam"):
    return labo_service_repo.create_service(
        {"supplier_id": supplier_id, "labo_item_id": labo_item_id, "price": price, "warranty": warranty}
    )


def make_order(customer, doctor, supplier, item, price=None, quantity=1, **overrides):
    """Insert an order directly, snapshotting the price list entry when given."""
    unit_price = price.price if price is not None else 100_000
    fields = {
        "customer_id": customer.id,
        "doctor_id": doctor.id,
        "clinic_id": customer.clinic_id,
        "treatment_date": date(2026, 3, 1),
        "order_type": "Làm mới",
        "supplier_id": supplier.id,
        "labo_item_id": item.id,
        "labo_service_id": price.id if price is not None else None,
        "quantity": quantity,
        "unit_price": unit_price,
        "total_cost": unit_price * quantity,
        "sent_by_id": doctor.id,
        "sent_date": datetime(2026, 3, 1, 10, 0),
    }
    fields.update(overrides)
    return labo_order_repo.create_order(fields)


def session_user_for(employee) -> SessionUser:
    return SessionUser.from_employee(employee)


@pytest.fixture
def factory():
    return SimpleNamespace(
        clinic_payload=clinic_payload,
        clinic=make_clinic,
        employee=make_employee,
        customer=make_customer,
        supplier=make_supplier,
        item=make_item,
        price=make_price,
        order=make_order,
        user=session_user_for,
    )

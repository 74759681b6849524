"""Tests for suppliers, labo items and the supplier price list."""
from __future__ import annotations

import pytest

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.services import labo_item_service, labo_services_service, supplier_service
from clinic_admin.services.errors import ServiceError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("CLINIC_ADMIN_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def users(factory):
    clinic = factory.clinic()
    return {
        "admin": factory.user(factory.employee(None, role="admin")),
        "staff": factory.user(factory.employee(clinic.id)),
    }


def test_supplier_crud(users):
    created = supplier_service.create_supplier(
        users["admin"], {"name": "Labo Viet", "short_name": "LV", "phone": "(028) 123-456", "email": ""}
    )
    assert created["email"] is None
    assert supplier_service.get_supplier(users["staff"], created["id"])["name"] == "Labo Viet"

    with pytest.raises(ServiceError) as err:
        supplier_service.create_supplier(users["admin"], {"name": "Labo Viet"})
    assert err.value.http_status == 409

    with pytest.raises(ServiceError) as err:
        supplier_service.create_supplier(users["staff"], {"name": "Labo Khac"})
    assert err.value.http_status == 403


def test_supplier_phone_characters(users):
    with pytest.raises(ServiceError) as err:
        supplier_service.create_supplier(users["admin"], {"name": "Labo Viet", "phone": "call me"})
    assert err.value.code == "VALIDATION_ERROR"


def test_supplier_in_price_list_cannot_be_removed(users, factory):
    supplier, item = factory.supplier(), factory.item()
    factory.price(supplier.id, item.id)
    with pytest.raises(ServiceError) as err:
        supplier_service.remove_supplier(users["admin"], supplier.id)
    assert err.value.code == "HAS_LINKED_DATA"

    supplier_service.archive_supplier(users["admin"], supplier.id)
    assert supplier_service.list_suppliers(users["staff"]) == []


def test_item_archive_roundtrip(users, factory):
    item = factory.item()
    labo_item_service.archive_item(users["admin"], item.id)
    assert labo_item_service.list_items(users["staff"]) == []
    assert len(labo_item_service.list_items(users["staff"], {"include_archived": "1"})) == 1
    labo_item_service.unarchive_item(users["admin"], item.id)
    assert len(labo_item_service.list_items(users["staff"])) == 1


def test_item_name_conflict(users, factory):
    item = factory.item()
    with pytest.raises(ServiceError) as err:
        labo_item_service.create_item(users["admin"], {"name": item.name})
    assert err.value.http_status == 409


def test_price_entry_is_unique_per_supplier_item(users, factory):
    supplier, item = factory.supplier(), factory.item()
    payload = {"supplier_id": supplier.id, "labo_item_id": item.id, "price": 1_500_000, "warranty": "10 nam"}
    entry = labo_services_service.create_entry(users["admin"], payload)
    assert entry["supplier"]["id"] == supplier.id
    assert entry["labo_item"]["name"] == item.name

    with pytest.raises(ServiceError) as err:
        labo_services_service.create_entry(users["admin"], payload)
    assert err.value.http_status == 409


@pytest.mark.parametrize("price", [0, -5, 100_000_001])
def test_price_bounds(users, factory, price):
    supplier, item = factory.supplier(), factory.item()
    with pytest.raises(ServiceError):
        labo_services_service.create_entry(
            users["admin"], {"supplier_id": supplier.id, "labo_item_id": item.id, "price": price}
        )


def test_price_entry_requires_existing_supplier(users, factory):
    item = factory.item()
    with pytest.raises(ServiceError) as err:
        labo_services_service.create_entry(
            users["admin"], {"supplier_id": "missing", "labo_item_id": item.id, "price": 10}
        )
    assert err.value.http_status == 400


def test_price_list_sorting(users, factory):
    supplier = factory.supplier()
    cheap, dear = factory.item(name="B item"), factory.item(name="A item")
    factory.price(supplier.id, cheap.id, price=100)
    factory.price(supplier.id, dear.id, price=900)

    by_price = labo_services_service.list_entries(users["staff"], {"sort_by": "price", "sort_order": "desc"})
    assert [e["price"] for e in by_price] == [900, 100]
    by_name = labo_services_service.list_entries(users["staff"], {"supplier_id": supplier.id, "sort_by": "name"})
    assert [e["labo_item"]["name"] for e in by_name] == ["A item", "B item"]


def test_update_changes_price_only(users, factory):
    supplier, item = factory.supplier(), factory.item()
    price = factory.price(supplier.id, item.id, price=100)
    updated = labo_services_service.update_entry(
        users["admin"], price.id, {"price": 250, "warranty": "", "supplier_id": "ignored"}
    )
    assert updated["price"] == 250
    assert updated["warranty"] is None
    assert updated["supplier_id"] == supplier.id


def test_entry_used_by_orders_cannot_be_removed(users, factory):
    clinic = factory.clinic()
    doctor = factory.employee(clinic.id)
    customer = factory.customer(clinic.id)
    supplier, item = factory.supplier(), factory.item()
    price = factory.price(supplier.id, item.id)
    factory.order(customer, doctor, supplier, item, price)
    with pytest.raises(ServiceError) as err:
        labo_services_service.remove_entry(users["admin"], price.id)
    assert err.value.code == "HAS_LINKED_DATA"

"""Repository helpers for the supplier price list (labo services)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func

from clinic_admin.db import app_session
from clinic_admin.db.models import LaboItem, LaboOrder, LaboService, Supplier
from clinic_admin.db.repositories import _common


def list_services(
    supplier_id: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "asc",
) -> List[LaboService]:
    """Default order is supplier name then item name."""
    with app_session() as session:
        query = (
            session.query(LaboService)
            .join(Supplier, LaboService.supplier_id == Supplier.id)
            .join(LaboItem, LaboService.labo_item_id == LaboItem.id)
        )
        if supplier_id:
            query = query.filter(LaboService.supplier_id == supplier_id)
        descending = sort_order == "desc"
        if sort_by == "price":
            ordering = [LaboService.price.desc() if descending else LaboService.price.asc()]
        elif sort_by == "name":
            ordering = [LaboItem.name.desc() if descending else LaboItem.name.asc()]
        else:
            ordering = [Supplier.name.asc(), LaboItem.name.asc()]
        return query.order_by(*ordering, LaboService.id.asc()).all()


def get_service(service_id: str) -> Optional[LaboService]:
    return _common.get_by_id(LaboService, service_id)


def find_by_supplier_item(supplier_id: str, labo_item_id: str) -> Optional[LaboService]:
    with app_session() as session:
        return (
            session.query(LaboService)
            .filter(LaboService.supplier_id == supplier_id, LaboService.labo_item_id == labo_item_id)
            .one_or_none()
        )


def create_service(fields: Dict[str, Any]) -> LaboService:
    return _common.insert(LaboService, fields)


def update_service(service_id: str, fields: Dict[str, Any]) -> Optional[LaboService]:
    return _common.update_fields(LaboService, service_id, fields)


def delete_service(service_id: str) -> bool:
    return _common.delete_by_id(LaboService, service_id)


def count_orders(service_id: str) -> int:
    with app_session() as session:
        count = (
            session.query(func.count(LaboOrder.id)).filter(LaboOrder.labo_service_id == service_id).scalar()
        )
    return count or 0


__all__ = [
    "list_services",
    "get_service",
    "find_by_supplier_item",
    "create_service",
    "update_service",
    "delete_service",
    "count_orders",
]

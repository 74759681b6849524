"""Repository helpers for labo suppliers."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from clinic_admin.db import app_session
from clinic_admin.db.models import LaboOrder, LaboService, Supplier
from clinic_admin.db.repositories import _common


def list_suppliers(include_archived: bool = False) -> List[Supplier]:
    with app_session() as session:
        query = session.query(Supplier)
        if not include_archived:
            query = query.filter(Supplier.archived_at.is_(None))
        return query.order_by(Supplier.name.asc()).all()


def get_supplier(supplier_id: str) -> Optional[Supplier]:
    return _common.get_by_id(Supplier, supplier_id)


def name_taken(name: str, exclude_id: Optional[str] = None) -> bool:
    return _common.exists(Supplier, func.lower(Supplier.name) == name.lower(), exclude_id=exclude_id)


def create_supplier(fields: Dict[str, Any]) -> Supplier:
    return _common.insert(Supplier, fields)


def update_supplier(supplier_id: str, fields: Dict[str, Any]) -> Optional[Supplier]:
    return _common.update_fields(Supplier, supplier_id, fields)


def delete_supplier(supplier_id: str) -> bool:
    return _common.delete_by_id(Supplier, supplier_id)


def set_archived(supplier_id: str, archived_at: Optional[datetime]) -> Optional[Supplier]:
    return _common.set_archived(Supplier, supplier_id, archived_at)


def count_linked(supplier_id: str) -> Dict[str, int]:
    with app_session() as session:
        prices = (
            session.query(func.count(LaboService.id)).filter(LaboService.supplier_id == supplier_id).scalar()
        )
        orders = session.query(func.count(LaboOrder.id)).filter(LaboOrder.supplier_id == supplier_id).scalar()
    counts = {"labo_services": prices or 0, "labo_orders": orders or 0}
    counts["total"] = sum(counts.values())
    return counts


__all__ = [
    "list_suppliers",
    "get_supplier",
    "name_taken",
    "create_supplier",
    "update_supplier",
    "delete_supplier",
    "set_archived",
    "count_linked",
]

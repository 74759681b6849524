"""Repository helpers for labo items."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from clinic_admin.db import app_session
from clinic_admin.db.models import LaboItem, LaboOrder, LaboService
from clinic_admin.db.repositories import _common


def list_items(include_archived: bool = False) -> List[LaboItem]:
    with app_session() as session:
        query = session.query(LaboItem)
        if not include_archived:
            query = query.filter(LaboItem.archived_at.is_(None))
        return query.order_by(LaboItem.name.asc()).all()


def get_item(item_id: str) -> Optional[LaboItem]:
    return _common.get_by_id(LaboItem, item_id)


def name_taken(name: str, exclude_id: Optional[str] = None) -> bool:
    return _common.exists(LaboItem, func.lower(LaboItem.name) == name.lower(), exclude_id=exclude_id)


def create_item(fields: Dict[str, Any]) -> LaboItem:
    return _common.insert(LaboItem, fields)


def update_item(item_id: str, fields: Dict[str, Any]) -> Optional[LaboItem]:
    return _common.update_fields(LaboItem, item_id, fields)


def delete_item(item_id: str) -> bool:
    return _common.delete_by_id(LaboItem, item_id)


def set_archived(item_id: str, archived_at: Optional[datetime]) -> Optional[LaboItem]:
    return _common.set_archived(LaboItem, item_id, archived_at)


def count_linked(item_id: str) -> Dict[str, int]:
    with app_session() as session:
        prices = session.query(func.count(LaboService.id)).filter(LaboService.labo_item_id == item_id).scalar()
        orders = session.query(func.count(LaboOrder.id)).filter(LaboOrder.labo_item_id == item_id).scalar()
    counts = {"labo_services": prices or 0, "labo_orders": orders or 0}
    counts["total"] = sum(counts.values())
    return counts


__all__ = [
    "list_items",
    "get_item",
    "name_taken",
    "create_item",
    "update_item",
    "delete_item",
    "set_archived",
    "count_linked",
]

"""Repository helpers for labo orders."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from clinic_admin.db import app_session
from clinic_admin.db.models import LaboOrder
from clinic_admin.db.repositories import _common


def list_for_customer(
    customer_id: str,
    clinic_id: Optional[str] = None,
    window: Optional[Tuple[datetime, datetime]] = None,
    by: str = "sent",
) -> List[LaboOrder]:
    """Orders of one customer, optionally limited to a sent or returned window."""
    with app_session() as session:
        query = session.query(LaboOrder).filter(LaboOrder.customer_id == customer_id)
        if clinic_id:
            query = query.filter(LaboOrder.clinic_id == clinic_id)
        if window is not None:
            column = LaboOrder.return_date if by == "returned" else LaboOrder.sent_date
            query = query.filter(column >= window[0], column < window[1])
        return query.order_by(LaboOrder.treatment_date.desc(), LaboOrder.created_at.desc()).all()


def list_sent_between(start: datetime, end: datetime, clinic_id: Optional[str] = None) -> List[LaboOrder]:
    with app_session() as session:
        query = session.query(LaboOrder).filter(LaboOrder.sent_date >= start, LaboOrder.sent_date < end)
        if clinic_id:
            query = query.filter(LaboOrder.clinic_id == clinic_id)
        return query.order_by(LaboOrder.created_at.desc(), LaboOrder.id.asc()).all()


def list_returned_between(start: datetime, end: datetime, clinic_id: Optional[str] = None) -> List[LaboOrder]:
    with app_session() as session:
        query = session.query(LaboOrder).filter(
            LaboOrder.return_date >= start, LaboOrder.return_date < end
        )
        if clinic_id:
            query = query.filter(LaboOrder.clinic_id == clinic_id)
        return query.order_by(LaboOrder.return_date.asc(), LaboOrder.id.asc()).all()


def get_order(order_id: str) -> Optional[LaboOrder]:
    return _common.get_by_id(LaboOrder, order_id)


def create_order(fields: Dict[str, Any]) -> LaboOrder:
    return _common.insert(LaboOrder, fields)


def update_order(order_id: str, fields: Dict[str, Any]) -> Optional[LaboOrder]:
    return _common.update_fields(LaboOrder, order_id, fields)


def delete_order(order_id: str) -> bool:
    return _common.delete_by_id(LaboOrder, order_id)


def mark_received(order_id: str, received_by_id: str, when: datetime) -> bool:
    """Set return fields only while still unset; False if already received."""
    with app_session() as session:
        updated = (
            session.query(LaboOrder)
            .filter(LaboOrder.id == order_id, LaboOrder.return_date.is_(None))
            .update(
                {
                    LaboOrder.return_date: when,
                    LaboOrder.received_by_id: received_by_id,
                    LaboOrder.updated_by_id: received_by_id,
                    LaboOrder.updated_at: when,
                },
                synchronize_session=False,
            )
        )
    return bool(updated)


__all__ = [
    "list_for_customer",
    "list_sent_between",
    "list_returned_between",
    "get_order",
    "create_order",
    "update_order",
    "delete_order",
    "mark_received",
]

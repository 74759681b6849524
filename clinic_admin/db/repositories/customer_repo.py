"""Repository helpers for customer records."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_

from clinic_admin.db import app_session
from clinic_admin.db.models import Customer, LaboOrder
from clinic_admin.db.repositories import _common

_SORT_COLUMNS = {
    "full_name": Customer.full_name,
    "customer_code": Customer.customer_code,
    "created_at": Customer.created_at,
    "first_visit_date": Customer.first_visit_date,
}


def _search_filter(term: str):
    """Literal substring match; ``%`` and ``_`` in the term are not wildcards."""
    lowered = term.lower()
    return or_(
        func.lower(Customer.full_name).contains(lowered, autoescape=True),
        func.lower(Customer.customer_code).contains(lowered, autoescape=True),
        Customer.phone.contains(term, autoescape=True),
        func.lower(Customer.email).contains(lowered, autoescape=True),
    )


def list_customers(
    *,
    page: int = 1,
    page_size: int = 20,
    search: Optional[str] = None,
    clinic_id: Optional[str] = None,
    source: Optional[str] = None,
    service_of_interest: Optional[str] = None,
    sort_field: str = "created_at",
    sort_desc: bool = True,
) -> Tuple[List[Customer], int]:
    """Return one page of CUSTOMER rows plus the total match count."""
    with app_session() as session:
        query = session.query(Customer).filter(Customer.type == "CUSTOMER")
        if search:
            query = query.filter(_search_filter(search))
        if clinic_id:
            query = query.filter(Customer.clinic_id == clinic_id)
        if source:
            query = query.filter(Customer.source == source)
        if service_of_interest:
            query = query.filter(Customer.service_of_interest == service_of_interest)
        total = query.order_by(None).count()
        column = _SORT_COLUMNS.get(sort_field, Customer.created_at)
        ordering = column.desc() if sort_desc else column.asc()
        items = (
            query.order_by(ordering, Customer.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return items, total


def list_first_visits(start: datetime, end: datetime, clinic_id: str) -> List[Customer]:
    with app_session() as session:
        return (
            session.query(Customer)
            .filter(
                Customer.clinic_id == clinic_id,
                Customer.first_visit_date >= start,
                Customer.first_visit_date < end,
            )
            .order_by(Customer.first_visit_date.asc(), Customer.id.asc())
            .all()
        )


def search_customers(term: str, limit: int = 10, require_phone: bool = False) -> List[Customer]:
    """Lookup across CUSTOMER and LEAD rows, ordered by name."""
    with app_session() as session:
        query = session.query(Customer).filter(_search_filter(term))
        if require_phone:
            query = query.filter(Customer.phone.isnot(None))
        return query.order_by(Customer.full_name.asc(), Customer.id.asc()).limit(limit).all()


def get_customer(customer_id: str) -> Optional[Customer]:
    return _common.get_by_id(Customer, customer_id)


def find_taken_field(values: Dict[str, Any], exclude_id: Optional[str] = None) -> Optional[str]:
    for field in ("phone", "email"):
        value = values.get(field)
        if not value:
            continue
        column = getattr(Customer, field)
        criterion = func.lower(column) == value.lower() if field == "email" else column == value
        if _common.exists(Customer, criterion, exclude_id=exclude_id):
            return field
    return None


def codes_with_prefix(prefix: str) -> List[str]:
    """All customer codes starting with `prefix` (e.g. ``MK-2603-``)."""
    with app_session() as session:
        rows = (
            session.query(Customer.customer_code)
            .filter(Customer.customer_code.startswith(prefix, autoescape=True))
            .all()
        )
        return [row[0] for row in rows if row[0]]


def create_customer(fields: Dict[str, Any]) -> Customer:
    return _common.insert(Customer, fields)


def update_customer(customer_id: str, fields: Dict[str, Any]) -> Optional[Customer]:
    return _common.update_fields(Customer, customer_id, fields)


def delete_customer(customer_id: str) -> bool:
    return _common.delete_by_id(Customer, customer_id)


def count_linked(customer_id: str) -> Dict[str, int]:
    with app_session() as session:
        orders = session.query(func.count(LaboOrder.id)).filter(LaboOrder.customer_id == customer_id).scalar()
        dependents = (
            session.query(func.count(Customer.id)).filter(Customer.primary_contact_id == customer_id).scalar()
        )
    counts = {"labo_orders": orders or 0, "dependents": dependents or 0}
    counts["total"] = sum(counts.values())
    return counts


__all__ = [
    "list_customers",
    "list_first_visits",
    "search_customers",
    "get_customer",
    "find_taken_field",
    "codes_with_prefix",
    "create_customer",
    "update_customer",
    "delete_customer",
    "count_linked",
]

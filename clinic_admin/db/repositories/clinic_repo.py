"""Repository helpers for clinic records."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from clinic_admin.db import app_session
from clinic_admin.db.models import Clinic, Customer, Employee, LaboOrder
from clinic_admin.db.repositories import _common


def list_clinics(include_archived: bool = False) -> List[Clinic]:
    with app_session() as session:
        query = session.query(Clinic)
        if not include_archived:
            query = query.filter(Clinic.archived_at.is_(None))
        return query.order_by(Clinic.created_at.desc(), Clinic.id.desc()).all()


def get_clinic(clinic_id: str) -> Optional[Clinic]:
    return _common.get_by_id(Clinic, clinic_id)


def find_duplicate_field(
    clinic_code: str,
    name: str,
    short_name: str,
    exclude_id: Optional[str] = None,
) -> Optional[str]:
    """Return the first unique field already taken by another clinic."""
    checks = (
        ("clinic_code", Clinic.clinic_code == clinic_code),
        ("name", func.lower(Clinic.name) == name.lower()),
        ("short_name", func.lower(Clinic.short_name) == short_name.lower()),
    )
    for field, criterion in checks:
        if _common.exists(Clinic, criterion, exclude_id=exclude_id):
            return field
    return None


def create_clinic(fields: Dict[str, Any]) -> Clinic:
    return _common.insert(Clinic, fields)


def update_clinic(clinic_id: str, fields: Dict[str, Any]) -> Optional[Clinic]:
    return _common.update_fields(Clinic, clinic_id, fields)


def delete_clinic(clinic_id: str) -> bool:
    return _common.delete_by_id(Clinic, clinic_id)


def set_archived(clinic_id: str, archived_at: Optional[datetime]) -> Optional[Clinic]:
    return _common.set_archived(Clinic, clinic_id, archived_at)


def count_linked(clinic_id: str) -> Dict[str, int]:
    with app_session() as session:
        employees = session.query(func.count(Employee.id)).filter(Employee.clinic_id == clinic_id).scalar()
        customers = session.query(func.count(Customer.id)).filter(Customer.clinic_id == clinic_id).scalar()
        orders = session.query(func.count(LaboOrder.id)).filter(LaboOrder.clinic_id == clinic_id).scalar()
    counts = {"employees": employees or 0, "customers": customers or 0, "labo_orders": orders or 0}
    counts["total"] = sum(counts.values())
    return counts


__all__ = [
    "list_clinics",
    "get_clinic",
    "find_duplicate_field",
    "create_clinic",
    "update_clinic",
    "delete_clinic",
    "set_archived",
    "count_linked",
]

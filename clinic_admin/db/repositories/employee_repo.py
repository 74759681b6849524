"""Repository helpers for employee records."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from clinic_admin.db import app_session
from clinic_admin.db.models import Customer, Employee, LaboOrder
from clinic_admin.db.repositories import _common

UNIQUE_FIELDS = ("email", "phone", "employee_code", "national_id", "tax_id", "insurance_number")


def list_employees(search: Optional[str] = None) -> List[Employee]:
    """Name search spans every status; without a search only WORKING staff."""
    with app_session() as session:
        query = session.query(Employee)
        if search:
            query = query.filter(func.lower(Employee.full_name).contains(search.lower(), autoescape=True))
        else:
            query = query.filter(Employee.status == "WORKING")
        return query.order_by(Employee.created_at.desc(), Employee.id.desc()).all()


def list_working(clinic_id: Optional[str] = None) -> List[Employee]:
    with app_session() as session:
        query = session.query(Employee).filter(Employee.status == "WORKING")
        if clinic_id:
            query = query.filter(Employee.clinic_id == clinic_id)
        return query.order_by(Employee.full_name.asc()).all()


def get_employee(employee_id: str) -> Optional[Employee]:
    return _common.get_by_id(Employee, employee_id)


def get_by_email(email: str) -> Optional[Employee]:
    with app_session() as session:
        return session.query(Employee).filter(func.lower(Employee.email) == email.lower()).one_or_none()


def find_taken_field(values: Dict[str, Any], exclude_id: Optional[str] = None) -> Optional[str]:
    """Return the first unique field whose (non-empty) value another employee holds."""
    for field in UNIQUE_FIELDS:
        value = values.get(field)
        if not value:
            continue
        column = getattr(Employee, field)
        criterion = func.lower(column) == value.lower() if field == "email" else column == value
        if _common.exists(Employee, criterion, exclude_id=exclude_id):
            return field
    return None


def create_employee(fields: Dict[str, Any]) -> Employee:
    return _common.insert(Employee, fields)


def update_employee(employee_id: str, fields: Dict[str, Any]) -> Optional[Employee]:
    return _common.update_fields(Employee, employee_id, fields)


def delete_employee(employee_id: str) -> bool:
    return _common.delete_by_id(Employee, employee_id)


def count_linked(employee_id: str) -> Dict[str, int]:
    with app_session() as session:
        orders = (
            session.query(func.count(LaboOrder.id))
            .filter(
                or_(
                    LaboOrder.doctor_id == employee_id,
                    LaboOrder.sent_by_id == employee_id,
                    LaboOrder.received_by_id == employee_id,
                )
            )
            .scalar()
        )
        customers = (
            session.query(func.count(Customer.id)).filter(Customer.created_by_id == employee_id).scalar()
        )
        employees = (
            session.query(func.count(Employee.id))
            .filter(Employee.created_by_id == employee_id, Employee.id != employee_id)
            .scalar()
        )
    counts = {"labo_orders": orders or 0, "customers": customers or 0, "employees": employees or 0}
    counts["total"] = sum(counts.values())
    return counts


__all__ = [
    "UNIQUE_FIELDS",
    "list_employees",
    "list_working",
    "get_employee",
    "get_by_email",
    "find_taken_field",
    "create_employee",
    "update_employee",
    "delete_employee",
    "count_linked",
]

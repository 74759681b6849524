"""Labo report data access and aggregation.

The report covers orders *received back* from the lab in a month (filtered by
`return_date`, not `sent_date`). One query loads the month's rows; every
dimension (day, supplier, doctor, price-list entry) is then aggregated in
memory from those rows.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func

from clinic_admin.db import app_session
from clinic_admin.db.models import LaboOrder
from clinic_admin.utils.dates import local_date, month_window


@dataclass(frozen=True)
class ReportOrderRow:
    id: str
    sent_date: datetime
    return_date: Optional[datetime]
    treatment_date: Optional[date]
    order_type: str
    quantity: int
    unit_price: int
    total_cost: int
    customer_id: str
    customer_name: str
    customer_code: Optional[str]
    doctor_id: str
    doctor_name: str
    supplier_id: str
    supplier_name: Optional[str]
    labo_item_name: str
    labo_service_id: Optional[str]
    service_supplier_name: Optional[str]
    service_item_name: Optional[str]

    @property
    def return_day(self) -> Optional[date]:
        return local_date(self.return_date) if self.return_date else None


@dataclass
class KpiData:
    total_orders: int
    total_cost: int
    previous_month_orders: Optional[int]
    previous_month_cost: Optional[int]
    total_orders_growth_mom: Optional[float]
    total_cost_growth_mom: Optional[float]


def _row(order: LaboOrder) -> ReportOrderRow:
    supplier = order.supplier
    service = order.labo_service
    return ReportOrderRow(
        id=order.id,
        sent_date=order.sent_date,
        return_date=order.return_date,
        treatment_date=order.treatment_date,
        order_type=order.order_type,
        quantity=order.quantity,
        unit_price=order.unit_price,
        total_cost=order.total_cost or 0,
        customer_id=order.customer_id,
        customer_name=order.customer.full_name if order.customer else "",
        customer_code=order.customer.customer_code if order.customer else None,
        doctor_id=order.doctor_id,
        doctor_name=order.doctor.full_name if order.doctor else "",
        supplier_id=order.supplier_id,
        supplier_name=supplier.display_name if supplier else None,
        labo_item_name=order.labo_item.name if order.labo_item else "",
        labo_service_id=order.labo_service_id,
        service_supplier_name=service.supplier.display_name if service and service.supplier else None,
        service_item_name=service.labo_item.name if service and service.labo_item else None,
    )


def _month_filter(month: str, clinic_id: Optional[str]):
    start, end = month_window(month)
    criteria = [LaboOrder.return_date >= start, LaboOrder.return_date < end]
    if clinic_id:
        criteria.append(LaboOrder.clinic_id == clinic_id)
    return criteria


def query_month_orders(month: str, clinic_id: Optional[str] = None) -> List[ReportOrderRow]:
    with app_session() as session:
        orders = (
            session.query(LaboOrder)
            .filter(*_month_filter(month, clinic_id))
            .order_by(LaboOrder.return_date.asc(), LaboOrder.id.asc())
            .all()
        )
        return [_row(o) for o in orders]


def month_totals(month: str, clinic_id: Optional[str] = None) -> Tuple[int, int]:
    """(order count, total cost) for a month, without loading rows."""
    with app_session() as session:
        count, cost = (
            session.query(func.count(LaboOrder.id), func.coalesce(func.sum(LaboOrder.total_cost), 0))
            .filter(*_month_filter(month, clinic_id))
            .one()
        )
    return int(count or 0), int(cost or 0)


def growth(current: int, previous: Optional[int]) -> Optional[float]:
    if not previous or previous <= 0:
        return None
    return (current - previous) / previous * 100


def compute_kpi(
    rows: Iterable[ReportOrderRow],
    previous_month_orders: Optional[int],
    previous_month_cost: Optional[int],
) -> KpiData:
    rows = list(rows)
    total_orders = len(rows)
    total_cost = sum(r.total_cost for r in rows)
    return KpiData(
        total_orders=total_orders,
        total_cost=total_cost,
        previous_month_orders=previous_month_orders,
        previous_month_cost=previous_month_cost,
        total_orders_growth_mom=growth(total_orders, previous_month_orders),
        total_cost_growth_mom=growth(total_cost, previous_month_cost),
    )


def compute_daily(rows: Iterable[ReportOrderRow]) -> List[Dict[str, object]]:
    """Group by local return day, chronological, no rank."""
    grouped: Dict[date, Dict[str, int]] = {}
    for row in rows:
        day = row.return_day
        if day is None:
            continue
        bucket = grouped.setdefault(day, {"order_count": 0, "total_cost": 0})
        bucket["order_count"] += 1
        bucket["total_cost"] += row.total_cost
    return [{"date": day, **grouped[day]} for day in sorted(grouped)]


def _ranked(grouped: "OrderedDict[str, Dict[str, object]]") -> List[Dict[str, object]]:
    items = list(grouped.values())
    # stable sort keeps first-seen order for equal costs
    items.sort(key=lambda item: item["total_cost"], reverse=True)  # type: ignore[arg-type,return-value]
    for index, item in enumerate(items, start=1):
        item["rank"] = index
    return items


def compute_by_supplier(rows: Iterable[ReportOrderRow]) -> List[Dict[str, object]]:
    grouped: "OrderedDict[str, Dict[str, object]]" = OrderedDict()
    for row in rows:
        bucket = grouped.setdefault(
            row.supplier_id,
            {"supplier_id": row.supplier_id, "supplier_name": row.supplier_name, "order_count": 0, "total_cost": 0},
        )
        bucket["order_count"] += 1  # type: ignore[operator]
        bucket["total_cost"] += row.total_cost  # type: ignore[operator]
    for bucket in grouped.values():
        count = bucket["order_count"]
        bucket["avg_cost"] = bucket["total_cost"] / count if count else 0  # type: ignore[operator]
    return _ranked(grouped)


def compute_by_doctor(rows: Iterable[ReportOrderRow]) -> List[Dict[str, object]]:
    grouped: "OrderedDict[str, Dict[str, object]]" = OrderedDict()
    for row in rows:
        bucket = grouped.setdefault(
            row.doctor_id,
            {"doctor_id": row.doctor_id, "doctor_name": row.doctor_name, "order_count": 0, "total_cost": 0},
        )
        bucket["order_count"] += 1  # type: ignore[operator]
        bucket["total_cost"] += row.total_cost  # type: ignore[operator]
    return _ranked(grouped)


def compute_by_service(rows: Iterable[ReportOrderRow]) -> List[Dict[str, object]]:
    """Group by price-list entry; orders without one are left out."""
    grouped: "OrderedDict[str, Dict[str, object]]" = OrderedDict()
    for row in rows:
        if not row.labo_service_id:
            continue
        bucket = grouped.setdefault(
            row.labo_service_id,
            {
                "service_id": row.labo_service_id,
                "service_name": row.service_item_name,
                "supplier_name": row.service_supplier_name,
                "item_name": row.service_item_name,
                "order_count": 0,
                "total_cost": 0,
            },
        )
        bucket["order_count"] += 1  # type: ignore[operator]
        bucket["total_cost"] += row.total_cost  # type: ignore[operator]
    return _ranked(grouped)


def filter_details(rows: Iterable[ReportOrderRow], tab: str, key: str) -> List[ReportOrderRow]:
    if tab == "daily":
        try:
            target = date.fromisoformat(key[:10])
        except ValueError:
            return []
        return [r for r in rows if r.return_day == target]
    if tab == "supplier":
        return [r for r in rows if r.supplier_id == key]
    if tab == "doctor":
        return [r for r in rows if r.doctor_id == key]
    if tab == "service":
        return [r for r in rows if r.labo_service_id is not None and r.labo_service_id == key]
    return []


__all__ = [
    "ReportOrderRow",
    "KpiData",
    "query_month_orders",
    "month_totals",
    "growth",
    "compute_kpi",
    "compute_daily",
    "compute_by_supplier",
    "compute_by_doctor",
    "compute_by_service",
    "filter_details",
]

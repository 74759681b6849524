"""Monthly labo report: KPI, four summary tabs and drill-down records.

All figures come from orders returned from the lab within the month. The
percentages are shares of the month's total cost.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from flask_babel import gettext as _
from pydantic import BaseModel, ValidationError

from clinic_admin.db.repositories import labo_report_repo
from clinic_admin.db.repositories.labo_report_repo import KpiData, ReportOrderRow
from clinic_admin.schemas.labo_report import LaboReportDetailQuery, LaboReportSummaryQuery
from clinic_admin.services.errors import ServiceError
from clinic_admin.utils.dates import display_date, previous_month
from clinic_admin.utils.identity import SessionUser, is_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("labo_report_service")

Q = TypeVar("Q", bound=BaseModel)


def _percentage(cost: int, total: int) -> float:
    return cost / total * 100 if total > 0 else 0


def _parse_query(model: Type[Q], query: Optional[Mapping[str, Any]]) -> Q:
    try:
        return model.model_validate(dict(query or {}))
    except ValidationError as exc:
        raise ServiceError("INVALID_QUERY", _("Invalid query parameters."), 400) from exc


def _require_report_access(user: Optional[SessionUser]) -> None:
    if not is_admin(user):
        raise ServiceError("PERMISSION_DENIED", _("Only administrators can view the labo report."), 403)


# mappers


def map_kpi(kpi: KpiData) -> Dict[str, Any]:
    return asdict(kpi)


def map_daily(items: List[Dict[str, Any]], total_cost: int) -> List[Dict[str, Any]]:
    return [
        {
            "id": item["date"].isoformat(),
            "date": display_date(item["date"]),
            "order_count": item["order_count"],
            "total_cost": item["total_cost"],
            "percentage": _percentage(item["total_cost"], total_cost),
        }
        for item in items
    ]


def map_ranked(items: List[Dict[str, Any]], id_field: str, total_cost: int) -> List[Dict[str, Any]]:
    """Supplier, doctor and service rows share one shape plus their own fields."""
    mapped = []
    for item in items:
        row = {"id": item[id_field]}
        row.update(item)
        row["percentage"] = _percentage(item["total_cost"], total_cost)
        mapped.append(row)
    return mapped


def map_detail(row: ReportOrderRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "send_date": row.sent_date.isoformat() if row.sent_date else None,
        "send_date_display": display_date(row.sent_date),
        "return_date": row.return_date.isoformat() if row.return_date else None,
        "return_date_display": display_date(row.return_date),
        "customer_id": row.customer_id,
        "customer_name": row.customer_name,
        "customer_code": row.customer_code,
        "doctor_name": row.doctor_name,
        "service_name": row.service_item_name or "N/A",
        "supplier_name": row.supplier_name,
        "item_name": row.labo_item_name,
        "order_type": row.order_type,
        "quantity": row.quantity,
        "total_cost": row.total_cost,
        "treatment_date": row.treatment_date.isoformat() if row.treatment_date else None,
        "treatment_date_display": display_date(row.treatment_date),
    }


def summary(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    require_auth(user)
    params = _parse_query(LaboReportSummaryQuery, query)
    _require_report_access(user)

    rows = labo_report_repo.query_month_orders(params.month, params.clinic_id)
    prev_orders, prev_cost = labo_report_repo.month_totals(previous_month(params.month), params.clinic_id)
    kpi = labo_report_repo.compute_kpi(rows, prev_orders, prev_cost)
    total = kpi.total_cost
    LOG.info("Labo report %s (clinic=%s): %s orders", params.month, params.clinic_id or "*", kpi.total_orders)
    return {
        "kpi": map_kpi(kpi),
        "summary_tabs": {
            "by_date": map_daily(labo_report_repo.compute_daily(rows), total),
            "by_supplier": map_ranked(labo_report_repo.compute_by_supplier(rows), "supplier_id", total),
            "by_doctor": map_ranked(labo_report_repo.compute_by_doctor(rows), "doctor_id", total),
            "by_service": map_ranked(labo_report_repo.compute_by_service(rows), "service_id", total),
        },
    }


def detail(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    require_auth(user)
    params = _parse_query(LaboReportDetailQuery, query)
    _require_report_access(user)

    rows = labo_report_repo.query_month_orders(params.month, params.clinic_id)
    matched = labo_report_repo.filter_details(rows, params.tab, params.key)
    offset = (params.page - 1) * params.page_size
    page = matched[offset:offset + params.page_size]
    return {
        "records": [map_detail(r) for r in page],
        "total_records": len(matched),
        "total_cost": sum(r.total_cost for r in matched),
    }


__all__ = ["map_kpi", "map_daily", "map_ranked", "map_detail", "summary", "detail"]

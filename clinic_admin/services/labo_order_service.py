"""Labo orders: price snapshot on create, daily views, receive from lab."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import (
    clinic_repo,
    customer_repo,
    employee_repo,
    labo_order_repo,
    labo_service_repo,
)
from clinic_admin.schemas.common import changes, parse
from clinic_admin.schemas.labo import (
    CreateLaboOrderRequest,
    LaboOrderDailyQuery,
    UpdateLaboOrderRequest,
    check_fit_date,
)
from clinic_admin.services.errors import ERR
from clinic_admin.services.permissions import labo_order_permissions
from clinic_admin.utils.constants import ORDER_TYPE_NEW, ORDER_TYPE_WARRANTY
from clinic_admin.utils.dates import day_window, local_today, parse_day, to_utc_naive, utcnow
from clinic_admin.utils.identity import SessionUser, is_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("labo_order_service")


def _require_order(order_id: str):
    order = labo_order_repo.get_order(order_id)
    if order is None:
        raise ERR.not_found(_("Labo order not found."))
    return order


def _require_employee(employee_id: str, label: str) -> None:
    if employee_repo.get_employee(employee_id) is None:
        raise ERR.invalid(_("%(label)s does not exist.", label=label))


def statistics(orders: Iterable[Any], window=None) -> Dict[str, int]:
    """Counters shown above the daily tables."""
    orders = list(orders)
    sent = returned = 0
    if window is not None:
        start, end = window
        sent = sum(1 for o in orders if o.sent_date and start <= o.sent_date < end)
        returned = sum(1 for o in orders if o.return_date and start <= o.return_date < end)
    return {
        "total": len(orders),
        "sent": sent,
        "returned": returned,
        "total_cost": sum(o.total_cost or 0 for o in orders),
        "warranty_orders": sum(1 for o in orders if o.order_type == ORDER_TYPE_WARRANTY),
        "new_orders": sum(1 for o in orders if o.order_type == ORDER_TYPE_NEW),
    }


def create_order(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    labo_order_permissions.validate_create(user)
    data = parse(CreateLaboOrderRequest, payload)

    entry = labo_service_repo.find_by_supplier_item(data.supplier_id, data.labo_item_id)
    if entry is None:
        raise ERR.not_found(_("This supplier has no price for the selected labo item."))
    customer = customer_repo.get_customer(data.customer_id)
    if customer is None:
        raise ERR.invalid(_("Customer does not exist."))
    _require_employee(data.doctor_id, _("Doctor"))
    _require_employee(data.sent_by_id, _("Sender"))

    if is_admin(user):
        clinic_id = data.clinic_id or user.clinic_id or customer.clinic_id  # type: ignore[union-attr]
    else:
        clinic_id = user.clinic_id  # type: ignore[union-attr]
    if not clinic_id or clinic_repo.get_clinic(clinic_id) is None:
        raise ERR.invalid(_("Clinic does not exist."))

    values = data.model_dump(exclude={"clinic_id"})
    values.update(
        clinic_id=clinic_id,
        labo_service_id=entry.id,
        unit_price=entry.price,
        total_cost=entry.price * data.quantity,
        warranty=entry.warranty,
        sent_date=to_utc_naive(data.sent_date) or utcnow(),
        created_by_id=user.employee_id,  # type: ignore[union-attr]
        updated_by_id=user.employee_id,  # type: ignore[union-attr]
    )
    order = labo_order_repo.create_order(values)
    LOG.info("Labo order %s created for customer %s (%s)", order.id, order.customer_id, order.total_cost)
    return order.as_dict()


def daily_orders(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Orders sent or returned on a local day, or all orders of one customer."""
    user = require_auth(user)
    params = parse(LaboOrderDailyQuery, query)
    clinic_id = params.clinic_id if is_admin(user) else user.clinic_id

    window = None
    if params.customer_id:
        if params.date:
            window = day_window(parse_day(params.date))
        orders: List[Any] = labo_order_repo.list_for_customer(
            params.customer_id, clinic_id=clinic_id, window=window, by=params.type
        )
    else:
        day = parse_day(params.date) if params.date else local_today()
        window = day_window(day)
        if params.type == "sent":
            orders = labo_order_repo.list_sent_between(*window, clinic_id=clinic_id)
        else:
            orders = labo_order_repo.list_returned_between(*window, clinic_id=clinic_id)
    return {
        "items": [o.as_dict() for o in orders],
        "count": len(orders),
        "statistics": statistics(orders, window),
    }


def get_order(user: Optional[SessionUser], order_id: str) -> Dict[str, Any]:
    order = _require_order(order_id)
    labo_order_permissions.validate_view(user, order)
    return order.as_dict()


def update_order(user: Optional[SessionUser], order_id: str, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_auth(user)
    data = parse(UpdateLaboOrderRequest, payload)
    existing = _require_order(order_id)
    values = changes(data)
    labo_order_permissions.validate_update(user, existing, values.keys())

    for field, label in (("doctor_id", _("Doctor")), ("sent_by_id", _("Sender")), ("received_by_id", _("Receiver"))):
        if values.get(field):
            _require_employee(values[field], label)
    try:
        check_fit_date(
            values.get("treatment_date", existing.treatment_date),
            values.get("expected_fit_date", existing.expected_fit_date),
        )
    except ValueError as exc:
        raise ERR.invalid(str(exc)) from exc

    for field in ("sent_date", "return_date"):
        if field in values:
            values[field] = to_utc_naive(values[field])
    if "quantity" in values:
        values["total_cost"] = existing.unit_price * values["quantity"]
    values["updated_by_id"] = user.employee_id
    order = labo_order_repo.update_order(order_id, values)
    LOG.info("Labo order %s updated by %s", order_id, user.employee_id)
    return order.as_dict()  # type: ignore[union-attr]


def receive_order(user: Optional[SessionUser], order_id: str) -> Dict[str, Any]:
    """Mark an order as returned from the lab, received by the acting employee."""
    user = require_auth(user)
    order = _require_order(order_id)
    labo_order_permissions.validate_view(user, order)
    if order.return_date is not None or not labo_order_repo.mark_received(order_id, user.employee_id, utcnow()):
        raise ERR.conflict(_("This labo order has already been received."))
    LOG.info("Labo order %s received by %s", order_id, user.employee_id)
    return _require_order(order_id).as_dict()


def remove_order(user: Optional[SessionUser], order_id: str) -> Dict[str, Any]:
    labo_order_permissions.validate_delete(user)
    order = _require_order(order_id)
    labo_order_repo.delete_order(order_id)
    LOG.info("Labo order %s deleted", order_id)
    return order.as_dict()


__all__ = [
    "statistics",
    "create_order",
    "daily_orders",
    "get_order",
    "update_order",
    "receive_order",
    "remove_order",
]

"""Supplier price list: one price per (supplier, labo item)."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import labo_item_repo, labo_service_repo, supplier_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.common import parse
from clinic_admin.schemas.labo import CreateLaboServiceRequest, LaboServiceListQuery, UpdateLaboServiceRequest
from clinic_admin.services.errors import ERR
from clinic_admin.utils.identity import SessionUser, require_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("labo_services_service")


def _require_entry(service_id: str):
    entry = labo_service_repo.get_service(service_id)
    if entry is None:
        raise ERR.not_found(_("Price list entry not found."))
    return entry


def list_entries(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_auth(user)
    params = parse(LaboServiceListQuery, query)
    rows = labo_service_repo.list_services(
        supplier_id=params.supplier_id, sort_by=params.sort_by, sort_order=params.sort_order
    )
    return [row.as_dict() for row in rows]


def get_entry(user: Optional[SessionUser], service_id: str) -> Dict[str, Any]:
    require_auth(user)
    return _require_entry(service_id).as_dict()


def create_entry(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_admin(user)
    data = parse(CreateLaboServiceRequest, payload)
    if supplier_repo.get_supplier(data.supplier_id) is None:
        raise ERR.invalid(_("Supplier does not exist."))
    if labo_item_repo.get_item(data.labo_item_id) is None:
        raise ERR.invalid(_("Labo item does not exist."))
    if labo_service_repo.find_by_supplier_item(data.supplier_id, data.labo_item_id) is not None:
        raise ERR.conflict(_("This item is already in the supplier's price list."))
    values = data.model_dump()
    values.update(created_by_id=user.employee_id, updated_by_id=user.employee_id)
    try:
        entry = labo_service_repo.create_service(values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("This item is already in the supplier's price list.")) from exc
    LOG.info("Price list entry %s created (%s / %s)", entry.id, data.supplier_id, data.labo_item_id)
    return entry.as_dict()


def update_entry(user: Optional[SessionUser], service_id: str, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Only price and warranty change; existing orders keep their snapshot."""
    user = require_admin(user)
    _require_entry(service_id)
    data = parse(UpdateLaboServiceRequest, payload)
    values = data.model_dump()
    values["updated_by_id"] = user.employee_id
    entry = labo_service_repo.update_service(service_id, values)
    return entry.as_dict()  # type: ignore[union-attr]


def remove_entry(user: Optional[SessionUser], service_id: str) -> Dict[str, Any]:
    require_admin(user)
    entry = _require_entry(service_id)
    if labo_service_repo.count_orders(service_id) > 0:
        raise ERR.has_linked_data(_("This price list entry is used by labo orders."))
    labo_service_repo.delete_service(service_id)
    LOG.info("Price list entry %s deleted", service_id)
    return entry.as_dict()


__all__ = ["list_entries", "get_entry", "create_entry", "update_entry", "remove_entry"]

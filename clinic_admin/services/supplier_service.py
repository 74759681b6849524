"""Labo supplier management (admin writes, any employee reads)."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import supplier_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.common import IncludeArchivedQuery, parse
from clinic_admin.schemas.supplier import SupplierRequest
from clinic_admin.services.errors import ERR
from clinic_admin.utils.dates import utcnow
from clinic_admin.utils.identity import SessionUser, require_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("supplier_service")


def _require_supplier(supplier_id: str):
    supplier = supplier_repo.get_supplier(supplier_id)
    if supplier is None:
        raise ERR.not_found(_("Supplier not found."))
    return supplier


def list_suppliers(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_auth(user)
    params = parse(IncludeArchivedQuery, query)
    return [s.as_dict() for s in supplier_repo.list_suppliers(include_archived=params.flag)]


def get_supplier(user: Optional[SessionUser], supplier_id: str) -> Dict[str, Any]:
    require_auth(user)
    return _require_supplier(supplier_id).as_dict()


def create_supplier(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_admin(user)
    data = parse(SupplierRequest, payload)
    if supplier_repo.name_taken(data.name):
        raise ERR.conflict(_("Supplier name already exists."))
    values = data.model_dump()
    values.update(created_by_id=user.employee_id, updated_by_id=user.employee_id)
    try:
        supplier = supplier_repo.create_supplier(values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Supplier name already exists.")) from exc
    LOG.info("Supplier %s created", supplier.id)
    return supplier.as_dict()


def update_supplier(
    user: Optional[SessionUser], supplier_id: str, payload: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    user = require_admin(user)
    _require_supplier(supplier_id)
    data = parse(SupplierRequest, payload)
    if supplier_repo.name_taken(data.name, exclude_id=supplier_id):
        raise ERR.conflict(_("Supplier name already exists."))
    values = data.model_dump()
    values["updated_by_id"] = user.employee_id
    try:
        supplier = supplier_repo.update_supplier(supplier_id, values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Supplier name already exists.")) from exc
    return supplier.as_dict()  # type: ignore[union-attr]


def remove_supplier(user: Optional[SessionUser], supplier_id: str) -> Dict[str, Any]:
    require_admin(user)
    supplier = _require_supplier(supplier_id)
    if supplier_repo.count_linked(supplier_id)["total"] > 0:
        raise ERR.has_linked_data(_("Supplier is used by the price list or labo orders; archive it instead."))
    supplier_repo.delete_supplier(supplier_id)
    LOG.info("Supplier %s deleted", supplier_id)
    return supplier.as_dict()


def archive_supplier(user: Optional[SessionUser], supplier_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_supplier(supplier_id)
    return supplier_repo.set_archived(supplier_id, utcnow()).as_dict()  # type: ignore[union-attr]


def unarchive_supplier(user: Optional[SessionUser], supplier_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_supplier(supplier_id)
    return supplier_repo.set_archived(supplier_id, None).as_dict()  # type: ignore[union-attr]


__all__ = [
    "list_suppliers",
    "get_supplier",
    "create_supplier",
    "update_supplier",
    "remove_supplier",
    "archive_supplier",
    "unarchive_supplier",
]

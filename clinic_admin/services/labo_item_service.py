"""Labo item catalog (admin only)."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import labo_item_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.common import IncludeArchivedQuery, parse
from clinic_admin.schemas.labo import LaboItemRequest
from clinic_admin.services.errors import ERR
from clinic_admin.utils.dates import utcnow
from clinic_admin.utils.identity import SessionUser, require_admin
from clinic_admin.utils.logging import get_logger

LOG = get_logger("labo_item_service")


def _require_item(item_id: str):
    item = labo_item_repo.get_item(item_id)
    if item is None:
        raise ERR.not_found(_("Labo item not found."))
    return item


def list_items(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_admin(user)
    params = parse(IncludeArchivedQuery, query)
    return [i.as_dict() for i in labo_item_repo.list_items(include_archived=params.flag)]


def get_item(user: Optional[SessionUser], item_id: str) -> Dict[str, Any]:
    require_admin(user)
    return _require_item(item_id).as_dict()


def create_item(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_admin(user)
    data = parse(LaboItemRequest, payload)
    if labo_item_repo.name_taken(data.name):
        raise ERR.conflict(_("Labo item name already exists."))
    values = data.model_dump()
    values.update(created_by_id=user.employee_id, updated_by_id=user.employee_id)
    try:
        item = labo_item_repo.create_item(values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Labo item name already exists.")) from exc
    LOG.info("Labo item %s created", item.id)
    return item.as_dict()


def update_item(user: Optional[SessionUser], item_id: str, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_admin(user)
    _require_item(item_id)
    data = parse(LaboItemRequest, payload)
    if labo_item_repo.name_taken(data.name, exclude_id=item_id):
        raise ERR.conflict(_("Labo item name already exists."))
    values = data.model_dump()
    values["updated_by_id"] = user.employee_id
    try:
        item = labo_item_repo.update_item(item_id, values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Labo item name already exists.")) from exc
    return item.as_dict()  # type: ignore[union-attr]


def remove_item(user: Optional[SessionUser], item_id: str) -> Dict[str, Any]:
    require_admin(user)
    item = _require_item(item_id)
    if labo_item_repo.count_linked(item_id)["total"] > 0:
        raise ERR.has_linked_data(_("Labo item is used by the price list or labo orders; archive it instead."))
    labo_item_repo.delete_item(item_id)
    LOG.info("Labo item %s deleted", item_id)
    return item.as_dict()


def archive_item(user: Optional[SessionUser], item_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_item(item_id)
    return labo_item_repo.set_archived(item_id, utcnow()).as_dict()  # type: ignore[union-attr]


def unarchive_item(user: Optional[SessionUser], item_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_item(item_id)
    return labo_item_repo.set_archived(item_id, None).as_dict()  # type: ignore[union-attr]


__all__ = [
    "list_items",
    "get_item",
    "create_item",
    "update_item",
    "remove_item",
    "archive_item",
    "unarchive_item",
]

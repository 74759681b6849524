"""Clinic management."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import clinic_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.clinic import ClinicRequest
from clinic_admin.schemas.common import IncludeArchivedQuery, parse
from clinic_admin.services.errors import ERR
from clinic_admin.utils.dates import utcnow
from clinic_admin.utils.identity import SessionUser, require_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("clinic_service")


def _duplicate_message(field: str) -> str:
    return {
        "clinic_code": _("Clinic code already exists."),
        "name": _("Clinic name already exists."),
        "short_name": _("Clinic short name already exists."),
    }.get(field, _("Clinic already exists."))


def _require_clinic(clinic_id: str):
    clinic = clinic_repo.get_clinic(clinic_id)
    if clinic is None:
        raise ERR.not_found(_("Clinic not found."))
    return clinic


def list_clinics(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_auth(user)
    params = parse(IncludeArchivedQuery, query)
    return [c.as_dict() for c in clinic_repo.list_clinics(include_archived=params.flag)]


def get_clinic(user: Optional[SessionUser], clinic_id: str) -> Dict[str, Any]:
    require_auth(user)
    return _require_clinic(clinic_id).as_dict()


def _check_unique(data: ClinicRequest, exclude_id: Optional[str] = None) -> None:
    field = clinic_repo.find_duplicate_field(data.clinic_code, data.name, data.short_name, exclude_id=exclude_id)
    if field:
        raise ERR.conflict(_duplicate_message(field))


def create_clinic(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    require_admin(user)
    data = parse(ClinicRequest, payload)
    _check_unique(data)
    try:
        clinic = clinic_repo.create_clinic(data.model_dump())
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Clinic already exists.")) from exc
    LOG.info("Clinic %s created (%s)", clinic.id, clinic.clinic_code)
    return clinic.as_dict()


def update_clinic(user: Optional[SessionUser], clinic_id: str, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    require_admin(user)
    _require_clinic(clinic_id)
    data = parse(ClinicRequest, payload)
    _check_unique(data, exclude_id=clinic_id)
    try:
        clinic = clinic_repo.update_clinic(clinic_id, data.model_dump())
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Clinic already exists.")) from exc
    if clinic is None:
        raise ERR.not_found(_("Clinic not found."))
    LOG.info("Clinic %s updated", clinic_id)
    return clinic.as_dict()


def remove_clinic(user: Optional[SessionUser], clinic_id: str) -> Dict[str, Any]:
    require_admin(user)
    clinic = _require_clinic(clinic_id)
    linked = clinic_repo.count_linked(clinic_id)
    if linked["total"] > 0:
        raise ERR.has_linked_data(_("Clinic has linked employees or customers; archive it instead."))
    clinic_repo.delete_clinic(clinic_id)
    LOG.info("Clinic %s deleted", clinic_id)
    return clinic.as_dict()


def archive_clinic(user: Optional[SessionUser], clinic_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_clinic(clinic_id)
    return clinic_repo.set_archived(clinic_id, utcnow()).as_dict()  # type: ignore[union-attr]


def unarchive_clinic(user: Optional[SessionUser], clinic_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_clinic(clinic_id)
    return clinic_repo.set_archived(clinic_id, None).as_dict()  # type: ignore[union-attr]


__all__ = [
    "list_clinics",
    "get_clinic",
    "create_clinic",
    "update_clinic",
    "remove_clinic",
    "archive_clinic",
    "unarchive_clinic",
]

"""Dental service catalog and its CSV bulk update."""
from __future__ import annotations

import csv
import json
from typing import IO, Any, Dict, List, Mapping, Optional

from flask_babel import gettext as _
from pydantic import ValidationError

from clinic_admin.db.repositories import dental_service_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.common import IncludeArchivedQuery, parse
from clinic_admin.schemas.dental_service import DentalServiceRequest
from clinic_admin.services.errors import ERR, first_issue
from clinic_admin.utils.dates import utcnow
from clinic_admin.utils.identity import SessionUser, require_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("dental_services_service")

_TRUE_VALUES = {"1", "true", "yes", "y", "x"}


def _require_service(service_id: str):
    service = dental_service_repo.get_service(service_id)
    if service is None:
        raise ERR.not_found(_("Dental service not found."))
    return service


def list_services(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_auth(user)
    params = parse(IncludeArchivedQuery, query)
    return [s.as_dict() for s in dental_service_repo.list_services(include_archived=params.flag)]


def get_service(user: Optional[SessionUser], service_id: str) -> Dict[str, Any]:
    require_auth(user)
    return _require_service(service_id).as_dict()


def create_service(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_admin(user)
    data = parse(DentalServiceRequest, payload)
    if dental_service_repo.name_taken(data.name):
        raise ERR.conflict(_("Dental service name already exists."))
    values = data.model_dump()
    values.update(created_by_id=user.employee_id, updated_by_id=user.employee_id)
    try:
        service = dental_service_repo.create_service(values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Dental service name already exists.")) from exc
    LOG.info("Dental service %s created", service.id)
    return service.as_dict()


def update_service(user: Optional[SessionUser], service_id: str, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    user = require_admin(user)
    _require_service(service_id)
    data = parse(DentalServiceRequest, payload)
    if dental_service_repo.name_taken(data.name, exclude_id=service_id):
        raise ERR.conflict(_("Dental service name already exists."))
    values = data.model_dump()
    values["updated_by_id"] = user.employee_id
    try:
        service = dental_service_repo.update_service(service_id, values)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Dental service name already exists.")) from exc
    return service.as_dict()  # type: ignore[union-attr]


def remove_service(user: Optional[SessionUser], service_id: str) -> Dict[str, Any]:
    require_admin(user)
    service = _require_service(service_id)
    dental_service_repo.delete_service(service_id)
    LOG.info("Dental service %s deleted", service_id)
    return service.as_dict()


def archive_service(user: Optional[SessionUser], service_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_service(service_id)
    return dental_service_repo.set_archived(service_id, utcnow()).as_dict()  # type: ignore[union-attr]


def unarchive_service(user: Optional[SessionUser], service_id: str) -> Dict[str, Any]:
    require_admin(user)
    _require_service(service_id)
    return dental_service_repo.set_archived(service_id, None).as_dict()  # type: ignore[union-attr]


# CSV import


def parse_tags(raw: Optional[str]) -> List[str]:
    """Accept a JSON array (``["a","b"]``) or a comma-separated list."""
    text = (raw or "").strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            values = json.loads(text)
        except ValueError:
            values = None
        if isinstance(values, list):
            return [str(v).strip() for v in values if str(v).strip()]
        text = text.strip("[]")
    return [part.strip().strip("\"'") for part in text.split(",") if part.strip().strip("\"'")]


def _csv_int(raw: Optional[str]) -> Optional[int]:
    text = (raw or "").strip().replace(",", "")
    if not text:
        return None
    return int(float(text))


def _row_payload(row: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    def text(key: str) -> Optional[str]:
        value = (row.get(key) or "").strip()
        return value or None

    return {
        "name": text("name"),
        "description": text("description"),
        "service_group": text("service_group"),
        "department": text("department"),
        "tags": parse_tags(row.get("tags")),
        "unit": text("unit"),
        "price": _csv_int(row.get("price")) or 0,
        "min_price": _csv_int(row.get("min_price")),
        "official_warranty": text("official_warranty"),
        "clinic_warranty": text("clinic_warranty"),
        "origin": text("origin"),
        "avg_treatment_minutes": _csv_int(row.get("avg_treatment_minutes")),
        "avg_treatment_sessions": _csv_int(row.get("avg_treatment_sessions")),
        "requires_follow_up": (row.get("requires_follow_up") or "").strip().lower() in _TRUE_VALUES,
        "payment_account_type": text("payment_account_type") or "COMPANY",
    }


def import_from_csv(stream: IO[str], updated_by_id: Optional[str] = None) -> Dict[str, Any]:
    """Update existing services by id from CSV rows.

    Rows without id or name and rows with unknown ids are skipped. Returns
    ``{"updated": n, "errors": [...], "total": rows}``.
    """
    reader = csv.DictReader(stream)
    updated = 0
    total = 0
    errors: List[str] = []
    for line_no, row in enumerate(reader, start=2):
        total += 1
        service_id = (row.get("id") or "").strip()
        if not service_id or not (row.get("name") or "").strip():
            errors.append(_("Line %(line)s: missing id or name.", line=line_no))
            continue
        if dental_service_repo.get_service(service_id) is None:
            errors.append(_("Line %(line)s: unknown service %(id)s.", line=line_no, id=service_id))
            continue
        try:
            data = DentalServiceRequest.model_validate(_row_payload(row))
        except (ValidationError, ValueError) as exc:
            message = first_issue(exc) if isinstance(exc, ValidationError) else str(exc)
            errors.append(_("Line %(line)s: %(error)s", line=line_no, error=message))
            continue
        values = data.model_dump()
        values["updated_by_id"] = updated_by_id
        try:
            dental_service_repo.update_service(service_id, values)
        except DuplicateRecordError:
            errors.append(_("Line %(line)s: name already exists.", line=line_no))
            continue
        updated += 1
    LOG.info("Dental service import: %s/%s updated, %s errors", updated, total, len(errors))
    return {"updated": updated, "errors": errors, "total": total}


__all__ = [
    "list_services",
    "get_service",
    "create_service",
    "update_service",
    "remove_service",
    "archive_service",
    "unarchive_service",
    "parse_tags",
    "import_from_csv",
]

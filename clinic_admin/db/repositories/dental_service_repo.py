"""Repository helpers for the dental service catalog."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from clinic_admin.db import app_session
from clinic_admin.db.models import DentalService
from clinic_admin.db.repositories import _common


def _columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(fields)
    if "tags" in data:
        data["tags"] = list(data["tags"] or [])
    return data


def list_services(include_archived: bool = False) -> List[DentalService]:
    with app_session() as session:
        query = session.query(DentalService)
        if not include_archived:
            query = query.filter(DentalService.archived_at.is_(None))
        return query.order_by(DentalService.name.asc()).all()


def get_service(service_id: str) -> Optional[DentalService]:
    return _common.get_by_id(DentalService, service_id)


def name_taken(name: str, exclude_id: Optional[str] = None) -> bool:
    return _common.exists(DentalService, func.lower(DentalService.name) == name.lower(), exclude_id=exclude_id)


def create_service(fields: Dict[str, Any]) -> DentalService:
    return _common.insert(DentalService, _columns(fields))


def update_service(service_id: str, fields: Dict[str, Any]) -> Optional[DentalService]:
    return _common.update_fields(DentalService, service_id, _columns(fields))


def delete_service(service_id: str) -> bool:
    return _common.delete_by_id(DentalService, service_id)


def set_archived(service_id: str, archived_at: Optional[datetime]) -> Optional[DentalService]:
    return _common.set_archived(DentalService, service_id, archived_at)


__all__ = [
    "list_services",
    "get_service",
    "name_taken",
    "create_service",
    "update_service",
    "delete_service",
    "set_archived",
]

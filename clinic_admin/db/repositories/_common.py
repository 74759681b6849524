"""CRUD helpers shared by the per-aggregate repository modules."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError

from clinic_admin.db import app_session

T = TypeVar("T")


class DuplicateRecordError(Exception):
    """Raised when a unique constraint rejects an insert or update."""

    def mentions(self, column: str) -> bool:
        return column in str(self)


def get_by_id(model: Type[T], record_id: str) -> Optional[T]:
    with app_session() as session:
        return session.query(model).filter(model.id == record_id).one_or_none()  # type: ignore[attr-defined]


def exists(model: Type[Any], *criteria, exclude_id: Optional[str] = None) -> bool:
    with app_session() as session:
        query = session.query(model.id).filter(*criteria)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        return query.first() is not None


def insert(model: Type[T], fields: Dict[str, Any]) -> T:
    record = model(**fields)  # type: ignore[call-arg]
    try:
        with app_session() as session:
            session.add(record)
    except IntegrityError as exc:
        raise DuplicateRecordError(str(exc.orig)) from exc
    return get_by_id(model, record.id)  # type: ignore[attr-defined,return-value]


def update_fields(model: Type[T], record_id: str, fields: Dict[str, Any]) -> Optional[T]:
    try:
        with app_session() as session:
            record = session.query(model).filter(model.id == record_id).one_or_none()  # type: ignore[attr-defined]
            if record is None:
                return None
            for key, value in fields.items():
                setattr(record, key, value)
    except IntegrityError as exc:
        raise DuplicateRecordError(str(exc.orig)) from exc
    return get_by_id(model, record_id)


def delete_by_id(model: Type[Any], record_id: str) -> bool:
    with app_session() as session:
        record = session.query(model).filter(model.id == record_id).one_or_none()
        if record is None:
            return False
        session.delete(record)
        return True


def set_archived(model: Type[T], record_id: str, archived_at: Optional[datetime]) -> Optional[T]:
    return update_fields(model, record_id, {"archived_at": archived_at})


__all__ = [
    "DuplicateRecordError",
    "get_by_id",
    "exists",
    "insert",
    "update_fields",
    "delete_by_id",
    "set_archived",
]

"""Helpers shared by the JSON API blueprints."""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import jsonify, request

from clinic_admin.services import auth_service
from clinic_admin.services.errors import ServiceError
from clinic_admin.utils.identity import SessionUser
from clinic_admin.utils.logging import get_logger
from clinic_admin.utils.messages import common_message

LOG = get_logger("routes.api")

API_PREFIX = "/api/v1"


def _json_error(code: str, status: int = 400, *, message: Optional[str] = None):
    payload: Dict[str, Any] = {"error": message or common_message(code), "code": code}
    return jsonify(payload), status


def session_user() -> Optional[SessionUser]:
    return auth_service.current_user()


def json_body() -> Dict[str, Any]:
    """Request JSON object; malformed or non-object bodies raise VALIDATION_INVALID."""
    if not request.get_data():
        return {}
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ServiceError("VALIDATION_INVALID", common_message("VALIDATION_INVALID"), 400)
    return payload


def query_args() -> Dict[str, Any]:
    return request.args.to_dict()


def api_endpoint(func: Callable[..., Any]) -> Callable[..., Any]:
    """Map ServiceError to its JSON payload and anything else to a logged 500."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ServiceError as exc:
            return jsonify(exc.as_dict()), exc.http_status
        except Exception:
            LOG.exception("Unhandled error in %s %s", request.method, request.path)
            return _json_error("SERVER_ERROR", 500)

    return wrapper


__all__ = ["API_PREFIX", "session_user", "json_body", "query_args", "api_endpoint"]

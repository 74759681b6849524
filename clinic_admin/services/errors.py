"""Service-layer error type and constructors.

Every expected failure surfaces as `ServiceError(code, message, http_status)`;
routes turn it into `{"error": message, "code": code}` with that status.
"""
from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from clinic_admin.utils.messages import common_message


class ServiceError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status

    def as_dict(self) -> dict:
        return {"error": self.message, "code": self.code}

    def __repr__(self) -> str:  # pragma: no cover
        return "<ServiceError {0} {1}: {2}>".format(self.http_status, self.code, self.message)


class ERR:
    """Shorthand constructors for the common error codes."""

    @staticmethod
    def not_found(message: Optional[str] = None) -> ServiceError:
        return ServiceError("NOT_FOUND", message or common_message("NOT_FOUND"), 404)

    @staticmethod
    def invalid(message: Optional[str] = None) -> ServiceError:
        return ServiceError("INVALID", message or common_message("VALIDATION_INVALID"), 400)

    @staticmethod
    def conflict(message: str) -> ServiceError:
        return ServiceError("CONFLICT", message, 409)

    @staticmethod
    def unauthorized(message: Optional[str] = None) -> ServiceError:
        return ServiceError("UNAUTHORIZED", message or common_message("UNAUTHORIZED"), 401)

    @staticmethod
    def forbidden(message: Optional[str] = None) -> ServiceError:
        return ServiceError("FORBIDDEN", message or common_message("FORBIDDEN"), 403)

    @staticmethod
    def has_linked_data(message: str) -> ServiceError:
        return ServiceError("HAS_LINKED_DATA", message, 409)

    @staticmethod
    def permission_denied(message: Optional[str] = None) -> ServiceError:
        return ServiceError("PERMISSION_DENIED", message or common_message("FORBIDDEN"), 403)

    @staticmethod
    def validation(exc: ValidationError) -> ServiceError:
        return ServiceError("VALIDATION_ERROR", first_issue(exc), 400)


def first_issue(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return common_message("VALIDATION_INVALID")
    issue = errors[0]
    message = str(issue.get("msg") or "")
    # pydantic prefixes custom ValueError messages
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    loc = ".".join(str(part) for part in issue.get("loc", ()) if part != "__root__")
    if issue.get("type") == "value_error" or not loc:
        return message or common_message("VALIDATION_INVALID")
    return f"{loc}: {message}"


__all__ = ["ServiceError", "ERR", "first_issue"]

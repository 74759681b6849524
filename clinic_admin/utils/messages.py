"""User-facing message table shared by routes and services.

Values are English msgids; `common_message()` returns the translation for the
active locale via Flask-Babel.
"""
from __future__ import annotations

from types import MappingProxyType

from flask_babel import gettext as _

COMMON_MESSAGES = MappingProxyType(
    {
        "SERVER_ERROR": "A server error occurred. Please try again later.",
        "UNKNOWN_ERROR": "An unknown error occurred.",
        "VALIDATION_INVALID": "Submitted data is invalid.",
        "ACTION_FAILED": "The action could not be completed.",
        "NOT_FOUND": "The requested record was not found.",
        "UNAUTHORIZED": "Please sign in to continue.",
        "FORBIDDEN": "You do not have permission to perform this action.",
    }
)


def common_message(key: str) -> str:
    msgid = COMMON_MESSAGES.get(key, COMMON_MESSAGES["UNKNOWN_ERROR"])
    return _(msgid)


__all__ = ["COMMON_MESSAGES", "common_message"]

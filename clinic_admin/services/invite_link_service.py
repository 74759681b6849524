"""Encrypted invite tokens for the employee complete-profile flow.

An admin creates a PENDING employee and receives a token; the invitee
presents it back with their profile and password. Tokens are Fernet
encrypted with a key derived from the Flask SECRET_KEY.
"""
from __future__ import annotations

import base64
import hashlib
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app

from clinic_admin.utils.identity import normalize_email
from clinic_admin.utils.logging import get_logger

LOG = get_logger("invite_link_service")
INVITE_TTL = timedelta(days=7)


class InviteLinkError(RuntimeError):
    """Base error for invite token failures."""


class SecretKeyUnavailableError(InviteLinkError):
    """Raised when the Flask SECRET_KEY is missing."""


class TokenDecodeError(InviteLinkError):
    """Raised when a provided token cannot be decoded."""


class TokenExpiredError(InviteLinkError):
    """Raised when a token exceeded INVITE_TTL."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()


def _parse_timestamp(raw: str) -> datetime:
    candidate = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise TokenDecodeError("invalid_timestamp") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _derive_fernet_key(secret_value: Any) -> bytes:
    if not secret_value:
        raise SecretKeyUnavailableError("secret_key_missing")
    secret_bytes = secret_value if isinstance(secret_value, bytes) else str(secret_value).encode("utf-8")
    return base64.urlsafe_b64encode(hashlib.sha256(secret_bytes).digest())


def _fernet() -> Fernet:
    return Fernet(_derive_fernet_key(current_app.config.get("SECRET_KEY")))


def encode_invite(employee_id: str, email: str, issued_at: datetime | None = None) -> str:
    normalized_email = normalize_email(email)
    if not employee_id or not normalized_email:
        raise InviteLinkError("employee_required")
    document = {
        "employee_id": employee_id,
        "email": normalized_email,
        "issued_at": _format_timestamp(issued_at or _utcnow()),
    }
    token = _fernet().encrypt(json.dumps(document, sort_keys=True, separators=(",", ":")).encode("utf-8"))
    return token.decode("utf-8")


def decode_invite(token: str) -> Dict[str, Any]:
    """Return ``{employee_id, email, issued_at}`` or raise InviteLinkError."""
    if not token or not isinstance(token, str):
        raise TokenDecodeError("token_required")
    try:
        decrypted = _fernet().decrypt(token.encode("utf-8"))
    except InvalidToken as exc:
        LOG.warning("Rejected invalid invite token")
        raise TokenDecodeError("invalid_token") from exc
    try:
        payload = json.loads(decrypted.decode("utf-8"))
    except json.JSONDecodeError as exc:  # pragma: no cover - encrypted payloads are ours
        raise TokenDecodeError("invalid_payload") from exc

    employee_id = payload.get("employee_id")
    email = normalize_email(payload.get("email"))
    issued_raw = payload.get("issued_at")
    if not isinstance(employee_id, str) or not email or not isinstance(issued_raw, str):
        raise TokenDecodeError("invalid_payload")
    if _utcnow() - _parse_timestamp(issued_raw) > INVITE_TTL:
        raise TokenExpiredError("invite_expired")
    return {"employee_id": employee_id, "email": email, "issued_at": issued_raw}


__all__ = [
    "INVITE_TTL",
    "encode_invite",
    "decode_invite",
    "InviteLinkError",
    "SecretKeyUnavailableError",
    "TokenDecodeError",
    "TokenExpiredError",
]

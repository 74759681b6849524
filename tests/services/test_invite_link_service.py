"""Tests for encrypted invite tokens."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from flask import Flask

from clinic_admin.services import invite_link_service as links


@pytest.fixture
def app_ctx():
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "invite-secret"
    with app.app_context():
        yield app


def test_roundtrip_normalizes_email(app_ctx):
    token = links.encode_invite("emp-1", "  New.Hire@Example.COM ")
    decoded = links.decode_invite(token)
    assert decoded["employee_id"] == "emp-1"
    assert decoded["email"] == "new.hire@example.com"


def test_expired_token(app_ctx):
    issued = datetime.now(timezone.utc) - links.INVITE_TTL - timedelta(minutes=1)
    token = links.encode_invite("emp-1", "a@example.com", issued_at=issued)
    with pytest.raises(links.TokenExpiredError):
        links.decode_invite(token)


def test_token_from_other_secret_is_rejected(app_ctx):
    token = links.encode_invite("emp-1", "a@example.com")
    app_ctx.config["SECRET_KEY"] = "rotated"
    with pytest.raises(links.TokenDecodeError):
        links.decode_invite(token)


@pytest.mark.parametrize("token", ["", "not-a-token"])
def test_garbage_tokens(app_ctx, token):
    with pytest.raises(links.TokenDecodeError):
        links.decode_invite(token)


def test_missing_secret(app_ctx):
    app_ctx.config["SECRET_KEY"] = None
    with pytest.raises(links.SecretKeyUnavailableError):
        links.encode_invite("emp-1", "a@example.com")


def test_employee_and_email_required(app_ctx):
    with pytest.raises(links.InviteLinkError):
        links.encode_invite("", "a@example.com")
    with pytest.raises(links.InviteLinkError):
        links.encode_invite("emp-1", "   ")

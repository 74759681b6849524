"""Session login, logout and current-user endpoints."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, json_body, session_user
from clinic_admin.services import auth_service
from clinic_admin.utils.identity import require_auth

bp = Blueprint("auth_api", __name__, url_prefix=f"{API_PREFIX}/auth")


@bp.route("/login", methods=["POST"])
@api_endpoint
def api_login():
    user = auth_service.login(json_body())
    return jsonify({"user": user.as_dict()})


@bp.route("/logout", methods=["POST"])
@api_endpoint
def api_logout():
    auth_service.logout()
    return jsonify({"status": "ok"})


@bp.route("/me", methods=["GET"])
@api_endpoint
def api_me():
    user = require_auth(session_user())
    return jsonify({"user": user.as_dict()})


__all__ = ["bp"]

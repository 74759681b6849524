"""Labo report API (admin only)."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, query_args, session_user
from clinic_admin.services import labo_report_service

bp = Blueprint("reports_api", __name__, url_prefix=f"{API_PREFIX}/reports")


@bp.route("/labo/summary", methods=["GET"])
@api_endpoint
def api_labo_summary():
    return jsonify(labo_report_service.summary(session_user(), query_args()))


@bp.route("/labo/detail", methods=["GET"])
@api_endpoint
def api_labo_detail():
    return jsonify(labo_report_service.detail(session_user(), query_args()))


__all__ = ["bp"]

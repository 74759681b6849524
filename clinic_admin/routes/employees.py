"""Employee API, including the invite-based complete-profile flow."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, json_body, query_args, session_user
from clinic_admin.services import employee_service

bp = Blueprint("employees_api", __name__, url_prefix=f"{API_PREFIX}/employees")


@bp.route("", methods=["GET"])
@api_endpoint
def api_list():
    return jsonify({"items": employee_service.list_employees(session_user(), query_args())})


@bp.route("/working", methods=["GET"])
@api_endpoint
def api_working():
    return jsonify({"items": employee_service.list_working(session_user(), query_args())})


@bp.route("", methods=["POST"])
@api_endpoint
def api_create():
    return jsonify(employee_service.create_employee(session_user(), json_body())), 201


@bp.route("/complete-profile", methods=["POST"])
@api_endpoint
def api_complete_profile():
    payload = json_body()
    token = payload.pop("token", None) or request.args.get("token")
    return jsonify(employee_service.complete_profile(token, payload))


@bp.route("/<employee_id>", methods=["GET"])
@api_endpoint
def api_get(employee_id: str):
    return jsonify(employee_service.get_employee(session_user(), employee_id))


@bp.route("/<employee_id>", methods=["PATCH", "PUT"])
@api_endpoint
def api_update(employee_id: str):
    return jsonify(employee_service.update_employee(session_user(), employee_id, json_body()))


@bp.route("/<employee_id>/status", methods=["POST"])
@api_endpoint
def api_status(employee_id: str):
    return jsonify(employee_service.set_employee_status(session_user(), employee_id, json_body()))


@bp.route("/<employee_id>/invite", methods=["POST"])
@api_endpoint
def api_invite(employee_id: str):
    return jsonify(employee_service.issue_invite(session_user(), employee_id))


@bp.route("/<employee_id>", methods=["DELETE"])
@api_endpoint
def api_delete(employee_id: str):
    return jsonify(employee_service.remove_employee(session_user(), employee_id))


__all__ = ["bp"]

"""Clinic API."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, json_body, query_args, session_user
from clinic_admin.services import clinic_service

bp = Blueprint("clinics_api", __name__, url_prefix=f"{API_PREFIX}/clinics")


@bp.route("", methods=["GET"])
@api_endpoint
def api_list():
    return jsonify({"items": clinic_service.list_clinics(session_user(), query_args())})


@bp.route("", methods=["POST"])
@api_endpoint
def api_create():
    return jsonify(clinic_service.create_clinic(session_user(), json_body())), 201


@bp.route("/<clinic_id>", methods=["GET"])
@api_endpoint
def api_get(clinic_id: str):
    return jsonify(clinic_service.get_clinic(session_user(), clinic_id))


@bp.route("/<clinic_id>", methods=["PUT"])
@api_endpoint
def api_update(clinic_id: str):
    return jsonify(clinic_service.update_clinic(session_user(), clinic_id, json_body()))


@bp.route("/<clinic_id>", methods=["DELETE"])
@api_endpoint
def api_delete(clinic_id: str):
    return jsonify(clinic_service.remove_clinic(session_user(), clinic_id))


@bp.route("/<clinic_id>/archive", methods=["POST"])
@api_endpoint
def api_archive(clinic_id: str):
    return jsonify(clinic_service.archive_clinic(session_user(), clinic_id))


@bp.route("/<clinic_id>/unarchive", methods=["POST"])
@api_endpoint
def api_unarchive(clinic_id: str):
    return jsonify(clinic_service.unarchive_clinic(session_user(), clinic_id))


__all__ = ["bp"]

"""Dental service catalog API."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, json_body, query_args, session_user
from clinic_admin.services import dental_services_service

bp = Blueprint("dental_services_api", __name__, url_prefix=f"{API_PREFIX}/dental-services")


@bp.route("", methods=["GET"])
@api_endpoint
def api_list():
    return jsonify({"items": dental_services_service.list_services(session_user(), query_args())})


@bp.route("", methods=["POST"])
@api_endpoint
def api_create():
    return jsonify(dental_services_service.create_service(session_user(), json_body())), 201


@bp.route("/<service_id>", methods=["GET"])
@api_endpoint
def api_get(service_id: str):
    return jsonify(dental_services_service.get_service(session_user(), service_id))


@bp.route("/<service_id>", methods=["PUT"])
@api_endpoint
def api_update(service_id: str):
    return jsonify(dental_services_service.update_service(session_user(), service_id, json_body()))


@bp.route("/<service_id>", methods=["DELETE"])
@api_endpoint
def api_delete(service_id: str):
    return jsonify(dental_services_service.remove_service(session_user(), service_id))


@bp.route("/<service_id>/archive", methods=["POST"])
@api_endpoint
def api_archive(service_id: str):
    return jsonify(dental_services_service.archive_service(session_user(), service_id))


@bp.route("/<service_id>/unarchive", methods=["POST"])
@api_endpoint
def api_unarchive(service_id: str):
    return jsonify(dental_services_service.unarchive_service(session_user(), service_id))


__all__ = ["bp"]

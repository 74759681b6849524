"""Customer API."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, json_body, query_args, session_user
from clinic_admin.services import customer_service

bp = Blueprint("customers_api", __name__, url_prefix=f"{API_PREFIX}/customers")


@bp.route("", methods=["GET"])
@api_endpoint
def api_list():
    return jsonify(customer_service.list_customers(session_user(), query_args()))


@bp.route("/daily", methods=["GET"])
@api_endpoint
def api_daily():
    return jsonify(customer_service.daily_customers(session_user(), query_args()))


@bp.route("/search", methods=["GET"])
@api_endpoint
def api_search():
    return jsonify({"items": customer_service.search_customers(session_user(), query_args())})


@bp.route("", methods=["POST"])
@api_endpoint
def api_create():
    return jsonify(customer_service.create_customer(session_user(), json_body())), 201


@bp.route("/<customer_id>", methods=["GET"])
@api_endpoint
def api_get(customer_id: str):
    return jsonify(customer_service.get_customer(session_user(), customer_id))


@bp.route("/<customer_id>", methods=["PATCH", "PUT"])
@api_endpoint
def api_update(customer_id: str):
    return jsonify(customer_service.update_customer(session_user(), customer_id, json_body()))


@bp.route("/<customer_id>", methods=["DELETE"])
@api_endpoint
def api_delete(customer_id: str):
    return jsonify(customer_service.remove_customer(session_user(), customer_id))


__all__ = ["bp"]

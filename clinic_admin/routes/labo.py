"""Labo API: suppliers, labo items, the supplier price list and labo orders."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, json_body, query_args, session_user
from clinic_admin.services import (
    labo_item_service,
    labo_order_service,
    labo_services_service,
    supplier_service,
)

suppliers_bp = Blueprint("suppliers_api", __name__, url_prefix=f"{API_PREFIX}/suppliers")
items_bp = Blueprint("labo_items_api", __name__, url_prefix=f"{API_PREFIX}/labo-items")
prices_bp = Blueprint("labo_services_api", __name__, url_prefix=f"{API_PREFIX}/labo-services")
orders_bp = Blueprint("labo_orders_api", __name__, url_prefix=f"{API_PREFIX}/labo-orders")


# ------------------- Suppliers --------------------
@suppliers_bp.route("", methods=["GET"])
@api_endpoint
def api_suppliers_list():
    return jsonify({"items": supplier_service.list_suppliers(session_user(), query_args())})


@suppliers_bp.route("", methods=["POST"])
@api_endpoint
def api_suppliers_create():
    return jsonify(supplier_service.create_supplier(session_user(), json_body())), 201


@suppliers_bp.route("/<supplier_id>", methods=["GET"])
@api_endpoint
def api_suppliers_get(supplier_id: str):
    return jsonify(supplier_service.get_supplier(session_user(), supplier_id))


@suppliers_bp.route("/<supplier_id>", methods=["PUT"])
@api_endpoint
def api_suppliers_update(supplier_id: str):
    return jsonify(supplier_service.update_supplier(session_user(), supplier_id, json_body()))


@suppliers_bp.route("/<supplier_id>", methods=["DELETE"])
@api_endpoint
def api_suppliers_delete(supplier_id: str):
    return jsonify(supplier_service.remove_supplier(session_user(), supplier_id))


@suppliers_bp.route("/<supplier_id>/archive", methods=["POST"])
@api_endpoint
def api_suppliers_archive(supplier_id: str):
    return jsonify(supplier_service.archive_supplier(session_user(), supplier_id))


@suppliers_bp.route("/<supplier_id>/unarchive", methods=["POST"])
@api_endpoint
def api_suppliers_unarchive(supplier_id: str):
    return jsonify(supplier_service.unarchive_supplier(session_user(), supplier_id))


# ------------------- Labo items --------------------
@items_bp.route("", methods=["GET"])
@api_endpoint
def api_items_list():
    return jsonify({"items": labo_item_service.list_items(session_user(), query_args())})


@items_bp.route("", methods=["POST"])
@api_endpoint
def api_items_create():
    return jsonify(labo_item_service.create_item(session_user(), json_body())), 201


@items_bp.route("/<item_id>", methods=["GET"])
@api_endpoint
def api_items_get(item_id: str):
    return jsonify(labo_item_service.get_item(session_user(), item_id))


@items_bp.route("/<item_id>", methods=["PUT"])
@api_endpoint
def api_items_update(item_id: str):
    return jsonify(labo_item_service.update_item(session_user(), item_id, json_body()))


@items_bp.route("/<item_id>", methods=["DELETE"])
@api_endpoint
def api_items_delete(item_id: str):
    return jsonify(labo_item_service.remove_item(session_user(), item_id))


@items_bp.route("/<item_id>/archive", methods=["POST"])
@api_endpoint
def api_items_archive(item_id: str):
    return jsonify(labo_item_service.archive_item(session_user(), item_id))


@items_bp.route("/<item_id>/unarchive", methods=["POST"])
@api_endpoint
def api_items_unarchive(item_id: str):
    return jsonify(labo_item_service.unarchive_item(session_user(), item_id))


# ------------------- Price list --------------------
@prices_bp.route("", methods=["GET"])
@api_endpoint
def api_prices_list():
    return jsonify({"items": labo_services_service.list_entries(session_user(), query_args())})


@prices_bp.route("", methods=["POST"])
@api_endpoint
def api_prices_create():
    return jsonify(labo_services_service.create_entry(session_user(), json_body())), 201


@prices_bp.route("/<service_id>", methods=["GET"])
@api_endpoint
def api_prices_get(service_id: str):
    return jsonify(labo_services_service.get_entry(session_user(), service_id))


@prices_bp.route("/<service_id>", methods=["PUT"])
@api_endpoint
def api_prices_update(service_id: str):
    return jsonify(labo_services_service.update_entry(session_user(), service_id, json_body()))


@prices_bp.route("/<service_id>", methods=["DELETE"])
@api_endpoint
def api_prices_delete(service_id: str):
    return jsonify(labo_services_service.remove_entry(session_user(), service_id))


# ------------------- Orders --------------------
@orders_bp.route("/daily", methods=["GET"])
@api_endpoint
def api_orders_daily():
    return jsonify(labo_order_service.daily_orders(session_user(), query_args()))


@orders_bp.route("", methods=["POST"])
@api_endpoint
def api_orders_create():
    return jsonify(labo_order_service.create_order(session_user(), json_body())), 201


@orders_bp.route("/<order_id>", methods=["GET"])
@api_endpoint
def api_orders_get(order_id: str):
    return jsonify(labo_order_service.get_order(session_user(), order_id))


@orders_bp.route("/<order_id>", methods=["PATCH", "PUT"])
@api_endpoint
def api_orders_update(order_id: str):
    return jsonify(labo_order_service.update_order(session_user(), order_id, json_body()))


@orders_bp.route("/<order_id>/receive", methods=["POST"])
@api_endpoint
def api_orders_receive(order_id: str):
    return jsonify(labo_order_service.receive_order(session_user(), order_id))


@orders_bp.route("/<order_id>", methods=["DELETE"])
@api_endpoint
def api_orders_delete(order_id: str):
    return jsonify(labo_order_service.remove_order(session_user(), order_id))


BLUEPRINTS = (suppliers_bp, items_bp, prices_bp, orders_bp)

__all__ = ["BLUEPRINTS"]

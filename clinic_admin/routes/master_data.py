"""Option lists for form selects."""
from __future__ import annotations

from flask import Blueprint, jsonify

from clinic_admin.routes.api_common import API_PREFIX, api_endpoint, session_user
from clinic_admin.utils import constants
from clinic_admin.utils.identity import require_auth

bp = Blueprint("master_data_api", __name__, url_prefix=f"{API_PREFIX}/master-data")


def master_data() -> dict:
    return {
        "employee_roles": list(constants.EMPLOYEE_ROLES),
        "employee_statuses": list(constants.EMPLOYEE_STATUSES),
        "customer_types": list(constants.CUSTOMER_TYPES),
        "customer_sources": [dict(s) for s in constants.CUSTOMER_SOURCES],
        "services_of_interest": [dict(s) for s in constants.SERVICES_OF_INTEREST],
        "primary_contact_roles": [dict(r) for r in constants.PRIMARY_CONTACT_ROLES],
        "genders": list(constants.GENDERS),
        "order_types": list(constants.ORDER_TYPES),
        "payment_account_types": list(constants.PAYMENT_ACCOUNT_TYPES),
    }


@bp.route("", methods=["GET"])
@api_endpoint
def api_master_data():
    require_auth(session_user())
    return jsonify(master_data())


__all__ = ["bp", "master_data"]

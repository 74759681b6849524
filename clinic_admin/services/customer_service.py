"""Customer management: codes, clinic scoping and referral lookups."""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from flask_babel import gettext as _

from clinic_admin.db.repositories import clinic_repo, customer_repo, employee_repo
from clinic_admin.db.repositories._common import DuplicateRecordError
from clinic_admin.schemas.common import changes, parse
from clinic_admin.schemas.customer import (
    CreateCustomerRequest,
    CustomerDailyQuery,
    CustomerListQuery,
    CustomerSearchQuery,
    UpdateCustomerRequest,
    check_contact_rules,
    check_source_notes,
)
from clinic_admin.services.errors import ERR, ServiceError
from clinic_admin.services.permissions import customer_permissions
from clinic_admin.utils.constants import CLINIC_CODE_PREFIXES
from clinic_admin.utils.dates import day_window, local_today, parse_day, to_local, to_utc_naive, utcnow
from clinic_admin.utils.identity import SessionUser, is_admin, require_auth
from clinic_admin.utils.logging import get_logger

LOG = get_logger("customer_service")

_LETTERS_RE = re.compile(r"[^A-Za-z]")
_SEARCH_FIELDS = ("id", "customer_code", "full_name", "phone", "type", "clinic_id")


def code_prefix(clinic_code: str) -> str:
    for marker, prefix in CLINIC_CODE_PREFIXES:
        if marker in clinic_code:
            return prefix
    letters = _LETTERS_RE.sub("", clinic_code).upper()
    return letters or clinic_code.upper()


def generate_customer_code(clinic_id: str) -> str:
    """Next ``{PREFIX}-{YYMM}-{NNN}`` code for the clinic in the current local month."""
    clinic = clinic_repo.get_clinic(clinic_id)
    if clinic is None:
        raise ServiceError("INVALID_CLINIC", _("Clinic does not exist."), 400)
    base = "{0}-{1}-".format(code_prefix(clinic.clinic_code), to_local(utcnow()).strftime("%y%m"))
    highest = 0
    for code in customer_repo.codes_with_prefix(base):
        suffix = code[len(base):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return "{0}{1:03d}".format(base, highest + 1)


def _write_with_code(write: Callable[[Dict[str, Any]], Any], values: Dict[str, Any], clinic_id: str):
    """Run `write(values)`, regenerating a freshly assigned code once if another row took it."""
    try:
        return write(values)
    except DuplicateRecordError as exc:
        if not values.get("customer_code") or not exc.mentions("customer_code"):
            raise
        LOG.warning("Customer code %s taken concurrently; regenerating", values["customer_code"])
        values["customer_code"] = generate_customer_code(clinic_id)
        return write(values)


def _require_customer_record(customer_id: str):
    customer = customer_repo.get_customer(customer_id)
    if customer is None:
        raise ERR.not_found(_("Customer not found."))
    return customer


def _taken_message(field: str) -> str:
    if field == "phone":
        return _("Phone already exists.")
    return _("Email already exists.")


def _check_unique(values: Dict[str, Any], exclude_id: Optional[str] = None) -> None:
    field = customer_repo.find_taken_field(values, exclude_id=exclude_id)
    if field:
        raise ERR.conflict(_taken_message(field))


def _check_primary_contact(contact_id: Optional[str], customer_id: Optional[str] = None) -> None:
    if not contact_id:
        return
    if contact_id == customer_id:
        raise ERR.invalid(_("A customer cannot be their own primary contact."))
    contact = customer_repo.get_customer(contact_id)
    if contact is None:
        raise ERR.invalid(_("Primary contact does not exist."))
    if not contact.phone:
        raise ERR.invalid(_("The primary contact must have a phone number."))


def _check_cross_fields(record: Mapping[str, Any]) -> None:
    try:
        check_contact_rules(
            record.get("phone"),
            record.get("primary_contact_id"),
            record.get("primary_contact_role"),
            record.get("city"),
            record.get("district"),
        )
        check_source_notes(record.get("source"), record.get("source_notes"))
    except ValueError as exc:
        raise ERR.invalid(str(exc)) from exc


def _resolve_clinic(user: SessionUser, requested: Optional[str]) -> str:
    if not is_admin(user):
        return user.clinic_id  # type: ignore[return-value]
    if not requested:
        raise ERR.invalid(_("Please select a clinic."))
    return requested


def create_customer(user: Optional[SessionUser], payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    customer_permissions.validate_create(user)
    data = parse(CreateCustomerRequest, payload)
    values = data.model_dump()
    clinic_id = _resolve_clinic(user, data.clinic_id)  # type: ignore[arg-type]
    _check_unique(values)
    _check_primary_contact(data.primary_contact_id)

    values["clinic_id"] = clinic_id
    values["first_visit_date"] = to_utc_naive(data.first_visit_date)
    if data.type == "CUSTOMER":
        values["customer_code"] = generate_customer_code(clinic_id)
        values["first_visit_date"] = values["first_visit_date"] or utcnow()
    elif clinic_repo.get_clinic(clinic_id) is None:
        raise ServiceError("INVALID_CLINIC", _("Clinic does not exist."), 400)
    values["created_by_id"] = user.employee_id  # type: ignore[union-attr]
    values["updated_by_id"] = user.employee_id  # type: ignore[union-attr]
    try:
        customer = _write_with_code(customer_repo.create_customer, values, clinic_id)
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Customer already exists.")) from exc
    LOG.info("Customer %s created (%s)", customer.id, customer.customer_code)
    return customer.as_dict()


def list_customers(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    user = require_auth(user)
    params = parse(CustomerListQuery, query)
    clinic_id = params.clinic_id if is_admin(user) else user.clinic_id
    items, total = customer_repo.list_customers(
        page=params.page,
        page_size=params.page_size,
        search=params.search,
        clinic_id=clinic_id,
        source=params.source,
        service_of_interest=params.service_of_interest,
        sort_field=params.sort_field,
        sort_desc=params.sort_desc,
    )
    return {
        "items": [c.as_dict() for c in items],
        "count": total,
        "page": params.page,
        "page_size": params.page_size,
    }


def daily_customers(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Customers whose first visit falls on the given local day."""
    user = require_auth(user)
    params = parse(CustomerDailyQuery, query)
    clinic_id = _resolve_clinic(user, params.clinic_id)
    day = parse_day(params.date) if params.date else local_today()
    start, end = day_window(day)
    items = [c.as_dict() for c in customer_repo.list_first_visits(start, end, clinic_id)]
    return {"items": items, "count": len(items)}


def search_customers(user: Optional[SessionUser], query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    require_auth(user)
    params = parse(CustomerSearchQuery, query)
    rows = customer_repo.search_customers(params.q, limit=params.limit, require_phone=params.require_phone)
    return [{field: getattr(c, field) for field in _SEARCH_FIELDS} for c in rows]


def get_customer(user: Optional[SessionUser], customer_id: str) -> Dict[str, Any]:
    user = require_auth(user)
    customer = _require_customer_record(customer_id)
    customer_permissions.validate_view(user, customer)
    result = customer.as_dict()

    result["primary_contact"] = None
    if customer.primary_contact_id:
        contact = customer_repo.get_customer(customer.primary_contact_id)
        if contact is not None:
            result["primary_contact"] = {"id": contact.id, "full_name": contact.full_name, "phone": contact.phone}

    result["source_employee"] = None
    result["source_customer"] = None
    if customer.source == "employee_referral" and customer.source_notes:
        employee = employee_repo.get_employee(customer.source_notes)
        if employee is not None:
            result["source_employee"] = {"id": employee.id, "full_name": employee.full_name}
    elif customer.source == "customer_referral" and customer.source_notes:
        referrer = customer_repo.get_customer(customer.source_notes)
        if referrer is not None:
            result["source_customer"] = {
                "id": referrer.id,
                "full_name": referrer.full_name,
                "customer_code": referrer.customer_code,
            }
    return result


def update_customer(
    user: Optional[SessionUser], customer_id: str, payload: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    user = require_auth(user)
    data = parse(UpdateCustomerRequest, payload)
    existing = _require_customer_record(customer_id)
    customer_permissions.validate_edit(user, existing)

    values = changes(data)
    if "clinic_id" in values:
        if not values["clinic_id"]:
            values.pop("clinic_id")
        elif values["clinic_id"] != existing.clinic_id:
            if not is_admin(user):
                raise ERR.forbidden(_("You cannot move a customer to another clinic."))
            if clinic_repo.get_clinic(values["clinic_id"]) is None:
                raise ServiceError("INVALID_CLINIC", _("Clinic does not exist."), 400)
    if "first_visit_date" in values:
        values["first_visit_date"] = to_utc_naive(values["first_visit_date"])

    merged = existing.as_dict()
    merged.update(values)
    _check_cross_fields(merged)
    _check_unique(
        {k: v for k, v in values.items() if k in ("phone", "email") and v != getattr(existing, k)},
        exclude_id=customer_id,
    )
    if "primary_contact_id" in values:
        _check_primary_contact(values["primary_contact_id"], customer_id)

    # LEAD -> CUSTOMER conversion
    if existing.type == "LEAD" and merged.get("type") == "CUSTOMER":
        if not existing.customer_code:
            values["customer_code"] = generate_customer_code(merged["clinic_id"])
        if not merged.get("first_visit_date"):
            values["first_visit_date"] = utcnow()

    values["updated_by_id"] = user.employee_id
    try:
        customer = _write_with_code(
            lambda fields: customer_repo.update_customer(customer_id, fields), values, merged["clinic_id"]
        )
    except DuplicateRecordError as exc:
        raise ERR.conflict(_("Customer already exists.")) from exc
    LOG.info("Customer %s updated by %s", customer_id, user.employee_id)
    return customer.as_dict()  # type: ignore[union-attr]


def remove_customer(user: Optional[SessionUser], customer_id: str) -> Dict[str, Any]:
    user = require_auth(user)
    existing = _require_customer_record(customer_id)
    customer_permissions.validate_delete(user, existing)
    linked = customer_repo.count_linked(customer_id)
    if linked["total"] > 0:
        raise ERR.has_linked_data(_("Customer has labo orders or dependents and cannot be deleted."))
    customer_repo.delete_customer(customer_id)
    LOG.info("Customer %s deleted by %s", customer_id, user.employee_id)
    return existing.as_dict()


__all__ = [
    "code_prefix",
    "generate_customer_code",
    "create_customer",
    "list_customers",
    "daily_customers",
    "search_customers",
    "get_customer",
    "update_customer",
    "remove_customer",
]

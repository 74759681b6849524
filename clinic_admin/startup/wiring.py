"""Application initialization / wiring.

Orchestrates: Flask app creation, Babel, DB init, route registration and the
optional bootstrap admin employee.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask

from clinic_admin import config as app_config
from clinic_admin.db import init_engine_once
from clinic_admin.db.repositories import employee_repo
from clinic_admin.i18n import init_babel
from clinic_admin.routes.inject import register_all as register_routes
from clinic_admin.services.auth_service import hash_password
from clinic_admin.utils.identity import ROLE_ADMIN, normalize_email
from clinic_admin.utils.logging import get_logger

LOG = get_logger("clinic_admin.startup")

BOOTSTRAP_PHONE = "0000000000"


def _maybe_bootstrap_admin() -> None:
    if not app_config.admin_bootstrap_enabled():
        return
    email = normalize_email(app_config.admin_bootstrap_email())
    password = app_config.admin_bootstrap_password()
    if not email or not password:
        LOG.warning("Admin bootstrap skipped (missing email/password)")
        return
    existing = employee_repo.get_by_email(email)
    if existing is not None:
        if not existing.password_hash:
            employee_repo.update_employee(existing.id, {"password_hash": hash_password(password), "status": "WORKING"})
            LOG.info("Admin bootstrap set password for existing employee email=%s", email)
        else:
            LOG.debug("Admin bootstrap skipped (employee exists) email=%s", email)
        return
    employee_repo.create_employee(
        {
            "full_name": "Administrator",
            "email": email,
            "phone": BOOTSTRAP_PHONE,
            "role": ROLE_ADMIN,
            "status": "WORKING",
            "password_hash": hash_password(password),
        }
    )
    LOG.info("Admin bootstrap created employee email=%s", email)


def init_app(app: Flask) -> None:
    LOG.debug("init_app starting")
    init_engine_once()
    LOG.debug("DB engine initialized")
    init_babel(app)
    register_routes(app)
    _maybe_bootstrap_admin()
    LOG.info("App startup wiring complete (%s)", app_config.summarize_runtime_config())


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask("clinic_admin", template_folder="templates")
    app.config.update(
        SECRET_KEY=app_config.secret_key(),
        JSON_SORT_KEYS=False,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
    )
    if config:
        app.config.update(config)
    init_app(app)
    return app


__all__ = ["init_app", "create_app"]

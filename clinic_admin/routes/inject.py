"""Blueprint registration, called once from startup wiring."""
from __future__ import annotations

from typing import Any

from clinic_admin.routes import (
    auth,
    clinics,
    customers,
    dental_services,
    employees,
    labo,
    master_data,
    pages,
    reports,
)
from clinic_admin.routes.health import register_health
from clinic_admin.utils.logging import get_logger

LOG = get_logger("routes.inject")


def register_all(app: Any) -> None:
    if getattr(app, "_clinic_admin_routes", False):
        return
    app.register_blueprint(pages.bp)
    for module in (auth, clinics, employees, customers, reports, dental_services, master_data):
        app.register_blueprint(module.bp)
    for blueprint in labo.BLUEPRINTS:
        app.register_blueprint(blueprint)
    register_health(app)
    setattr(app, "_clinic_admin_routes", True)
    LOG.debug("Registered %s blueprints", len(app.blueprints))


__all__ = ["register_all"]

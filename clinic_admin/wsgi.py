"""WSGI entry point.

Production: ``gunicorn clinic_admin.wsgi:application``
Development: ``python -m clinic_admin.wsgi``
"""
from __future__ import annotations

import os

from clinic_admin.config import env_bool
from clinic_admin.startup.wiring import create_app
from clinic_admin.utils.logging import get_logger

LOG = get_logger("clinic_admin.wsgi")

_APP_SINGLETON = None  # module-level cache


def main():
    """Create and return the Flask application (idempotent)."""
    global _APP_SINGLETON
    if _APP_SINGLETON is None:
        _APP_SINGLETON = create_app()
    return _APP_SINGLETON


application = main()


if __name__ == "__main__":  # Development server only (Flask built-in)
    host = os.getenv("CLINIC_ADMIN_HOST", "0.0.0.0")
    port_raw = os.getenv("CLINIC_ADMIN_PORT") or os.getenv("PORT") or "8080"
    try:
        port = int(port_raw)
    except ValueError:
        LOG.warning("Invalid port value %r, falling back to 8080", port_raw)
        port = 8080
    application.run(host=host, port=port, debug=env_bool("CLINIC_ADMIN_DEBUG"))

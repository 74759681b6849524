"""Clinic administration backend.

Flask blueprints under `routes/`, business rules under `services/`, SQLAlchemy
models and repositories under `db/`. `startup.wiring.create_app` builds the
application.
"""

__all__ = [
]

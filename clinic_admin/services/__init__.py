"""Service layer: validation, permissions and orchestration over repositories.

Import modules directly, e.g. ``from clinic_admin.services import clinic_service``.
`services.errors` is imported by utils, so this package re-exports nothing.
"""

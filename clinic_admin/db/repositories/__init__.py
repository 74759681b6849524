"""Per-aggregate repository modules (module-level functions over app_session)."""

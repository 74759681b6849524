"""Application logging helpers.

Every module logger lives under the ``clinic_admin`` namespace
(``get_logger("customer_service")`` is ``clinic_admin.customer_service``).
Only the package logger carries a handler; module loggers propagate to it.
The level comes from `clinic_admin.config.log_level_name()`.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from clinic_admin import config as app_config

ROOT_NAME = "clinic_admin"

_LOCK = threading.Lock()
_ROOT: Optional[logging.Logger] = None
_FORMAT = "[clinic_admin] %(asctime)s %(levelname)s %(name)s %(message)s"


def _configure_root() -> logging.Logger:
    global _ROOT
    with _LOCK:
        if _ROOT is not None:
            return _ROOT
        root = logging.getLogger(ROOT_NAME)
        root.setLevel(getattr(logging, app_config.log_level_name(), logging.INFO))
        if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_FORMAT))
            root.addHandler(handler)
        root.propagate = False
        _ROOT = root
        return root


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    root = _ROOT or _configure_root()
    if name == ROOT_NAME:
        return root
    if name.startswith(ROOT_NAME + "."):
        return logging.getLogger(name)
    return root.getChild(name)


__all__ = ["ROOT_NAME", "get_logger"]

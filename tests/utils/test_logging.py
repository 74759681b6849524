"""Tests for the package logger namespace."""
from __future__ import annotations

import logging

from clinic_admin.utils.logging import ROOT_NAME, get_logger


def test_module_loggers_share_the_package_handler():
    log = get_logger("customer_service")
    assert log.name == "clinic_admin.customer_service"
    assert log.handlers == []
    assert log.propagate is True
    assert log.parent is get_logger()


def test_package_logger_has_a_single_stream_handler():
    for _ in range(3):
        get_logger()
        get_logger("routes.api")
    root = logging.getLogger(ROOT_NAME)
    assert len([h for h in root.handlers if isinstance(h, logging.StreamHandler)]) == 1
    assert root.propagate is False


def test_qualified_names_are_not_nested_twice():
    assert get_logger("clinic_admin.i18n").name == "clinic_admin.i18n"

"""Tests for the Vietnamese message catalog."""
from __future__ import annotations

from pathlib import Path

import polib
import pytest
from babel.messages.extract import extract_from_dir
from flask_babel import gettext as _

from clinic_admin.db.engine import init_engine_once, reset_for_tests
from clinic_admin.i18n import configure_translations
from clinic_admin.startup.wiring import create_app
from clinic_admin.utils.messages import COMMON_MESSAGES, common_message

REPO_ROOT = Path(__file__).resolve().parents[2]
VI_CATALOG = REPO_ROOT / "translations" / "vi" / "LC_MESSAGES" / "messages.po"
METHOD_MAP = [
    ("clinic_admin/**.py", "python"),
    ("clinic_admin/templates/**.html", "jinja2.ext:babel_extract"),
]


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("CLINIC_ADMIN_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _extracted_msgids() -> set:
    return {message for _f, _l, message, _c, _ctx in extract_from_dir(str(REPO_ROOT), METHOD_MAP) if message}


def test_catalog_has_no_untranslated_entries():
    po = polib.pofile(str(VI_CATALOG))
    assert [entry.msgid for entry in po.untranslated_entries() if entry.msgid] == []


def test_catalog_covers_every_source_message():
    catalog = {entry.msgid for entry in polib.pofile(str(VI_CATALOG))}
    extracted = _extracted_msgids()
    assert "Clinic already exists." in extracted
    assert sorted(extracted - catalog) == []


def test_catalog_covers_common_messages():
    catalog = {entry.msgid for entry in polib.pofile(str(VI_CATALOG))}
    assert set(COMMON_MESSAGES.values()) <= catalog


def test_vietnamese_is_served_from_compiled_catalog(tmp_path):
    target = tmp_path / "vi" / "LC_MESSAGES"
    target.mkdir(parents=True)
    polib.pofile(str(VI_CATALOG)).save_as_mofile(str(target / "messages.mo"))

    app = create_app({"TESTING": True, "SECRET_KEY": "test-secret", "BABEL_DEFAULT_LOCALE": "vi"})
    configure_translations(app, extra_roots=[tmp_path])
    with app.test_request_context("/"):
        assert _("Clinic already exists.") == "Phòng khám đã tồn tại."
        assert common_message("NOT_FOUND") == "Không tìm thấy dữ liệu."
    with app.test_request_context("/?lang=en"):
        assert _("Clinic already exists.") == "Clinic already exists."

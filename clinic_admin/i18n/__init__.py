"""Flask-Babel setup and translation directory registration."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from flask import current_app, has_request_context, request
from flask_babel import Babel, get_babel

from clinic_admin import config as app_config
from clinic_admin.utils.logging import get_logger

LOG = get_logger("i18n")

_APP_ROOT = Path(__file__).resolve().parents[1]
_REPO_ROOT = _APP_ROOT.parent
_DEFAULT_TRANSLATION_ROOTS: Sequence[Path] = (_REPO_ROOT / "translations",)
SUPPORTED_LOCALES = ("vi", "en")


def _normalize_paths(paths: Iterable[Path | str]) -> List[str]:
    seen: List[str] = []
    for candidate in paths:
        path = Path(candidate).resolve()
        if not path.is_dir():
            LOG.debug("Translation directory missing; skipping: %s", path)
            continue
        as_str = str(path)
        if as_str not in seen:
            seen.append(as_str)
    return seen


def select_locale() -> Optional[str]:
    """`?lang=` wins, then Accept-Language, then the configured default."""
    default = current_app.config.get("BABEL_DEFAULT_LOCALE") or app_config.default_locale()
    if not has_request_context():
        return default
    requested = (request.args.get("lang") or "").strip().lower()
    if requested in SUPPORTED_LOCALES:
        return requested
    return request.accept_languages.best_match(SUPPORTED_LOCALES) or default


def init_babel(app) -> Babel:
    app.config.setdefault("BABEL_DEFAULT_LOCALE", app_config.default_locale())
    babel = Babel(app, locale_selector=select_locale)
    configure_translations(app)
    return babel


def configure_translations(app, extra_roots: Iterable[Path | str] | None = None) -> None:
    """Register first-party translation directories in Babel's search path.

    Our roots go first so they win over any pre-existing directories.
    """
    babel_cfg = get_babel(app)
    candidates: List[Path | str] = list(_DEFAULT_TRANSLATION_ROOTS)
    if extra_roots:
        candidates.extend(extra_roots)

    desired = _normalize_paths(candidates)
    existing = list(getattr(babel_cfg, "translation_directories", []))

    merged: List[str] = []
    for directory in desired + existing:
        if directory not in merged:
            merged.append(directory)

    if merged == existing:
        return

    babel_cfg.translation_directories = merged
    app.config["BABEL_TRANSLATION_DIRECTORIES"] = ";".join(merged)
    LOG.info("Registered %s custom translation directories", len(desired))


__all__ = ["SUPPORTED_LOCALES", "select_locale", "init_babel", "configure_translations"]

"""Server-rendered pages: login and the private customers list."""
from __future__ import annotations

from urllib.parse import urlencode, urlparse

from flask import Blueprint, redirect, render_template, request, url_for

from clinic_admin.config import app_title
from clinic_admin.services import auth_service, customer_service
from clinic_admin.services.errors import ServiceError
from clinic_admin.utils.logging import get_logger

bp = Blueprint("pages", __name__)
LOG = get_logger("routes.pages")


def _login_redirect():
    target = request.full_path or request.path or "/"
    if target.endswith("?"):
        target = target[:-1]
    return redirect(f"{url_for('pages.login')}?{urlencode({'next': target})}")


def _safe_next(raw: str) -> str:
    """Same-site absolute paths only; anything else falls back to the customers list."""
    fallback = url_for("pages.customers")
    if not raw or not raw.startswith("/") or raw.startswith("//"):
        return fallback
    if "\\" in raw or any(ord(ch) < 32 or ord(ch) == 127 for ch in raw):
        return fallback
    parsed = urlparse(raw)
    if parsed.scheme or parsed.netloc:
        return fallback
    return raw


@bp.route("/", methods=["GET"])
def index():
    return redirect(url_for("pages.customers"))


@bp.route("/customers", methods=["GET"])
def customers():
    user = auth_service.current_user()
    if user is None:
        return _login_redirect()
    try:
        listing = customer_service.list_customers(user, request.args.to_dict())
        error = None
    except ServiceError as exc:
        listing = {"items": [], "count": 0, "page": 1, "page_size": 20}
        error = exc.message
    return render_template(
        "customers/list.html",
        app_title=app_title(),
        user=user,
        listing=listing,
        error=error,
    )


@bp.route("/login", methods=["GET", "POST"])
def login():
    next_url = _safe_next(request.values.get("next", ""))
    error = None
    if request.method == "POST":
        try:
            auth_service.login({"email": request.form.get("email"), "password": request.form.get("password")})
        except ServiceError as exc:
            error = exc.message
        else:
            return redirect(next_url)
    status = 401 if error else 200
    return render_template("login.html", app_title=app_title(), next_url=next_url, error=error), status


@bp.route("/logout", methods=["POST"])
def logout():
    auth_service.logout()
    return redirect(url_for("pages.login"))


__all__ = ["bp"]

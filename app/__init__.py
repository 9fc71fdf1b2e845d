import os
import secrets
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, jsonify, render_template, request
from flask_caching import Cache
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from flask_wtf.csrf import CSRFError

load_dotenv()
db = SQLAlchemy()
cache = Cache()
csrf = CSRFProtect()

DEFAULT_CACHE_TIMEOUT = 300
NAV_LINKS = {
    "invoice.view_invoices": "Invoices",
    "invoice.create_invoice": "Create Invoice",
}


def _get_bool_env(var_name: str, default: bool = False) -> bool:
    """Return a boolean environment variable value."""

    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(var_name: str, default: int) -> int:
    value = os.getenv(var_name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def resolve_database_uri(base_dir: str) -> str:
    """Return the SQLAlchemy URL configured for this process.

    ``DATABASE_URL`` (or ``POSTGRES_URL`` as exported by hosted Postgres
    providers) wins.  Otherwise a SQLite file is used, located by
    ``DATABASE_PATH`` which may point at a file or a directory.
    """

    url = os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL")
    if url:
        # SQLAlchemy dropped the legacy "postgres" scheme alias.
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://") :]
        return url

    default_db_path = os.path.join(base_dir, "invoices.db")
    db_path = os.getenv("DATABASE_PATH", default_db_path)
    if os.path.isdir(db_path):
        db_path = os.path.join(db_path, "invoices.db")
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return f"sqlite:///{db_path}"


def create_app(args: list, config: Optional[dict] = None):
    """Application factory used by Flask."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY") or secrets.token_hex(32)
    default_secure_cookies = "--demo" not in args
    session_cookie_secure = _get_bool_env(
        "SESSION_COOKIE_SECURE", default=default_secure_cookies
    )
    app.config.update(
        SESSION_COOKIE_SECURE=session_cookie_secure,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
    )
    app.config["DEMO"] = "--demo" in args

    # Build the database path from the directory the app was created in so
    # that later changes of the working directory do not move the database.
    base_dir = os.getcwd()
    app.config["SQLALCHEMY_DATABASE_URI"] = resolve_database_uri(base_dir)
    app.config["CACHE_TYPE"] = os.getenv("CACHE_TYPE", "SimpleCache")
    app.config["CACHE_DEFAULT_TIMEOUT"] = _get_int_env(
        "CACHE_DEFAULT_TIMEOUT", DEFAULT_CACHE_TIMEOUT
    )
    if config:
        app.config.update(config)

    app.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    db.init_app(app)
    cache.init_app(app)
    csrf.init_app(app)

    @app.context_processor
    def inject_nav_links():
        """Provide navigation labels to templates."""
        return dict(NAV_LINKS=NAV_LINKS)

    @app.before_request
    def set_csp_nonce():
        """Generate a nonce for inline scripts allowed by the CSP."""

        g.csp_nonce = secrets.token_urlsafe(16)

    @app.after_request
    def apply_security_headers(response):
        """Attach standard security headers to every response."""
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        nonce = getattr(g, "csp_nonce", "")
        response.headers.setdefault(
            "Content-Security-Policy",
            f"default-src 'self'; script-src 'self' 'nonce-{nonce}'; "
            "form-action 'self'; object-src 'none'; base-uri 'self'",
        )
        return response

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        """Reject form posts whose CSRF token is missing or stale."""
        app.logger.warning("CSRF validation failed: %s", error.description)
        if request.accept_mimetypes.best == "application/json":
            return jsonify({"message": error.description}), 400
        return (
            render_template("errors/csrf_error.html", reason=error.description),
            400,
        )

    with app.app_context():
        # Create the invoices table on start so a fresh database works
        # without a separate setup step.
        from . import models  # noqa: F401

        db.create_all()

        from app.routes.invoice_routes import invoice

        app.register_blueprint(invoice)

    return app

import os
import subprocess
from pathlib import Path

import click
from flask import Flask, g, jsonify, request
from sqlalchemy import text
from werkzeug.exceptions import HTTPException

from app.extensions import cors, db, migrate
from app.models import Community, User
from app.segments.segment_feature_flags import flags_bp
from app.segments.segment_homepage import homepage_bp
from app.segments.segment_listing_shapes import listing_shapes_bp
from app.utils.observability import init_sentry, install_request_observers


PROD_ENVS = ("prod", "production")
DEV_ENVS = ("dev", "development", "local", "test")
BACKEND_DIR = Path(__file__).resolve().parents[1]


def _env_name() -> str:
    return (os.getenv("MARKETPLACE_ENV") or os.getenv("FLASK_ENV") or "dev").strip().lower()


def _env_int(name: str, default: int, *, minimum: int = 1, maximum: int = 100000) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        value = int(raw) if raw else int(default)
    except ValueError:
        value = int(default)
    return max(minimum, min(value, maximum))


def _alembic_head() -> str:
    try:
        from alembic.config import Config
        from alembic.script import ScriptDirectory

        migrations_dir = BACKEND_DIR / "migrations"
        cfg = Config(str(migrations_dir / "alembic.ini"))
        cfg.set_main_option("script_location", str(migrations_dir))
        heads = ScriptDirectory.from_config(cfg).get_heads()
    except Exception:
        return "unknown"
    return heads[0] if heads else "unknown"


def _git_sha() -> str:
    configured = (os.getenv("GIT_SHA") or "").strip()
    if configured:
        return configured
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], cwd=str(BACKEND_DIR), stderr=subprocess.DEVNULL)
    except Exception:
        return "unknown"
    return out.decode().strip()


def _database_url(env: str) -> str:
    url = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL")
    if url:
        return url
    if env in PROD_ENVS:
        raise RuntimeError("DATABASE_URL (or SQLALCHEMY_DATABASE_URI) must be set in production")
    instance_dir = BACKEND_DIR / "instance"
    instance_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(instance_dir / 'marketplace.db').as_posix()}"


def _engine_options(app: Flask, database_url: str) -> dict:
    options = {
        "pool_pre_ping": True,
        "pool_recycle": _env_int("DB_POOL_RECYCLE_SECONDS", 1800, minimum=60, maximum=86400),
    }
    if database_url.startswith("sqlite://"):
        return options
    options["pool_size"] = _env_int("DB_POOL_SIZE", 10, minimum=1, maximum=200)
    options["max_overflow"] = _env_int("DB_MAX_OVERFLOW", 20, minimum=0, maximum=500)
    options["pool_timeout"] = _env_int("DB_POOL_TIMEOUT_SECONDS", 30, minimum=1, maximum=300)
    app.logger.info(
        "db_pooling_enabled pool_size=%s max_overflow=%s pool_timeout=%s pool_recycle=%s",
        options["pool_size"],
        options["max_overflow"],
        options["pool_timeout"],
        options["pool_recycle"],
    )
    return options


def _configure(app: Flask, env: str) -> None:
    secret = (os.getenv("SECRET_KEY") or "").strip()
    if env in PROD_ENVS and len(secret) < 16:
        raise RuntimeError("SECRET_KEY must be set and at least 16 chars in production")

    database_url = _database_url(env)
    app.config.update(
        SECRET_KEY=secret or "dev-secret",
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_DATABASE_URI=database_url,
        SQLALCHEMY_ENGINE_OPTIONS=_engine_options(app, database_url),
        MARKETPLACE_ENV=env,
    )

    origins = [o.strip() for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip()]
    if not origins and env not in PROD_ENVS:
        origins = ["*"]
    cors.init_app(app, resources={r"/api/*": {"origins": origins}})


def _error_payload(name: str, message: str, status: int) -> dict:
    payload = {"ok": False, "error": name, "message": message, "status": status}
    rid = (getattr(g, "request_id", "") or "").strip()
    if rid:
        payload["trace_id"] = rid
    return payload


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _api_http_exception(error: HTTPException):
        # /api routes answer in JSON only.
        if not request.path.startswith("/api/"):
            return error
        status = int(error.code or 500)
        return jsonify(_error_payload(error.name, error.description or error.name, status)), status

    @app.errorhandler(Exception)
    def _api_unhandled_exception(error: Exception):
        app.logger.exception("unhandled_exception path=%s", request.path)
        return jsonify(_error_payload("InternalServerError", "Internal server error", 500)), 500

    @app.teardown_request
    def _cleanup_db_session(exc):
        try:
            if exc is not None:
                db.session.rollback()
        finally:
            db.session.remove()


def _register_ops_routes(app: Flask) -> None:
    @app.get("/api/health")
    def health():
        payload = {
            "ok": True,
            "service": "marketplace-backend",
            "env": app.config.get("MARKETPLACE_ENV"),
            "db": "ok",
            "git_sha": _git_sha(),
            "alembic_head": _alembic_head(),
        }
        try:
            with db.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            payload["db"] = "fail"
            payload["db_error"] = str(e)[:300]
        return jsonify(payload)

    @app.get("/api/version")
    def version():
        return jsonify({"ok": True, "alembic_head": _alembic_head(), "git_sha": _git_sha()})


def _register_cli(app: Flask) -> None:
    @app.cli.command("bootstrap-admin")
    @click.option("--community-id", "community_id", type=int, default=None, help="Limit admin rights to one community")
    def bootstrap_admin(community_id):
        """Create or reset an admin from ADMIN_EMAIL / ADMIN_PASSWORD."""
        allowed = _env_name() in DEV_ENVS or (os.getenv("ALLOW_ADMIN_BOOTSTRAP") or "").strip() == "1"
        if not allowed:
            raise click.ClickException("Admin bootstrap disabled. Set ALLOW_ADMIN_BOOTSTRAP=1 or MARKETPLACE_ENV=dev.")

        email = (os.getenv("ADMIN_EMAIL") or "").strip().lower()
        password = (os.getenv("ADMIN_PASSWORD") or "").strip()
        if not email or not password:
            raise click.ClickException("ADMIN_EMAIL and ADMIN_PASSWORD must be set.")
        if community_id is not None and db.session.get(Community, community_id) is None:
            raise click.ClickException(f"Community {community_id} not found.")

        user = User.query.filter_by(email=email).first()
        if user is None:
            user = User(name=email.split("@")[0], email=email)
            db.session.add(user)
        user.role = "admin"
        user.community_id = community_id
        user.set_password(password)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise click.ClickException("Failed to bootstrap admin.")
        click.echo(f"admin_bootstrap_ok {user.email} community_id={community_id}")


def create_app():
    app = Flask(__name__)
    init_sentry(app)
    _configure(app, _env_name())

    db.init_app(app)
    migrate.init_app(app, db)
    install_request_observers(app)
    _register_error_handlers(app)

    app.register_blueprint(listing_shapes_bp)
    app.register_blueprint(flags_bp)
    app.register_blueprint(homepage_bp)

    _register_ops_routes(app)
    _register_cli(app)
    return app

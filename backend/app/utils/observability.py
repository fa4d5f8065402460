from __future__ import annotations

import hashlib
import json
import os
import time
import uuid
from datetime import datetime

from flask import g, has_request_context, request


REQUEST_ID_HEADER = "X-Request-Id"
REDACTED_HEADERS = ("authorization", "cookie", "set-cookie", "x-api-key")


def get_request_id() -> str:
    if not has_request_context():
        return ""
    return getattr(g, "request_id", "") or ""


def _sample_rate(raw: str | None) -> float:
    try:
        rate = float((raw or "0").strip())
    except ValueError:
        return 0.0
    return max(0.0, min(rate, 1.0))


def init_sentry(app) -> None:
    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        app.logger.info("sentry_disabled_no_dsn")
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=dsn,
            environment=os.getenv("SENTRY_ENVIRONMENT") or os.getenv("MARKETPLACE_ENV") or "dev",
            release=os.getenv("GIT_SHA") or "unknown",
            integrations=[FlaskIntegration()],
            send_default_pii=False,
            traces_sample_rate=_sample_rate(os.getenv("SENTRY_TRACES_SAMPLE_RATE")),
            before_send=_before_send_scrub,
        )
    except Exception as e:
        app.logger.warning("sentry_init_failed err=%s", e)
        return
    app.logger.info("sentry_enabled")


def _before_send_scrub(event, hint):
    headers = (event.get("request") or {}).get("headers")
    if isinstance(headers, dict):
        for key in headers:
            if key.lower() in REDACTED_HEADERS:
                headers[key] = "[REDACTED]"
    return event


def _client_hash(salt: str) -> str:
    ip = request.headers.get("X-Forwarded-For", request.remote_addr or "")
    return hashlib.sha256(f"{salt}:{ip}".encode("utf-8")).hexdigest()[:16]


def _access_log_line(app, response) -> str:
    started = getattr(g, "request_started_at", None)
    return json.dumps(
        {
            "ts": datetime.utcnow().isoformat(),
            "request_id": get_request_id(),
            "method": request.method,
            "path": request.path,
            "status": int(response.status_code),
            "latency_ms": round((time.perf_counter() - started) * 1000.0, 2) if started is not None else None,
            "user_id": getattr(g, "auth_user_id", None),
            "community_id": getattr(g, "community_id", None),
            "ip_hash": _client_hash(app.config.get("SECRET_KEY") or "marketplace"),
        }
    )


def install_request_observers(app) -> None:
    """Request id propagation plus one JSON access log line per request."""

    @app.before_request
    def _request_observer_begin():
        g.request_id = (request.headers.get(REQUEST_ID_HEADER) or "").strip() or uuid.uuid4().hex
        g.request_started_at = time.perf_counter()

    @app.after_request
    def _request_observer_end(response):
        if not getattr(g, "request_id", ""):
            g.request_id = uuid.uuid4().hex
        response.headers[REQUEST_ID_HEADER] = g.request_id
        app.logger.info(_access_log_line(app, response))
        return response

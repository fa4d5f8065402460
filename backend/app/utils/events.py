from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

from app.extensions import db
from app.models import PlatformEvent
from app.utils.observability import get_request_id


def _json_default(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def _clip(value, limit: int) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text[:limit] or None


def log_event(
    event_type: str,
    *,
    community_id: int | None = None,
    actor_user_id: int | None = None,
    subject_type: str | None = None,
    subject_id: int | str | None = None,
    metadata: dict | None = None,
) -> PlatformEvent | None:
    """Queue an audit row on the current session.

    The row is committed (or rolled back) together with the caller's change.
    Building it never raises.
    """
    try:
        event = PlatformEvent(
            event_type=_clip(event_type, 80) or "unknown",
            community_id=int(community_id) if community_id is not None else None,
            actor_user_id=int(actor_user_id) if actor_user_id is not None else None,
            subject_type=_clip(subject_type, 80),
            subject_id=_clip(subject_id, 120),
            request_id=_clip(get_request_id(), 80),
            metadata_json=json.dumps(metadata or {}, default=_json_default, separators=(",", ":"), ensure_ascii=False),
        )
    except (TypeError, ValueError):
        return None
    db.session.add(event)
    return event

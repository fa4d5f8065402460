from __future__ import annotations

import json

from app.extensions import db
from app.models import Community
from app.utils.events import log_event


# Per-community switches; unknown keys are stored but default to off.
DEFAULT_FLAGS: dict[str, bool] = {
    "shape_ui": False,
    "homepage_map_view": True,
}


def _coerce_bool(value, default: bool = False) -> bool:
    if value is None:
        return bool(default)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return int(value) == 1
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "on")
    return bool(default)


def _stored_flags(community: Community) -> dict[str, bool]:
    raw = getattr(community, "feature_flags_json", None) or "{}"
    try:
        parsed = json.loads(raw)
    except Exception:
        parsed = {}
    if not isinstance(parsed, dict):
        parsed = {}
    return {str(key): _coerce_bool(val) for key, val in parsed.items()}


def get_all_flags(community: Community) -> dict[str, bool]:
    flags = dict(DEFAULT_FLAGS)
    flags.update(_stored_flags(community))
    return flags


def is_enabled(key: str, community: Community, *, default: bool = False) -> bool:
    flags = get_all_flags(community)
    if key not in flags:
        return bool(default)
    return _coerce_bool(flags.get(key), default)


def update_flags(community: Community, updates: dict[str, object], *, updated_by: int | None = None) -> dict[str, bool]:
    before = get_all_flags(community)
    stored = _stored_flags(community)
    for key, value in updates.items():
        k = str(key).strip()
        if k:
            stored[k] = _coerce_bool(value, before.get(k, False))
    community.feature_flags_json = json.dumps(stored, sort_keys=True)
    db.session.add(community)

    after = get_all_flags(community)
    changed = {k: v for k, v in after.items() if before.get(k) != v}
    if changed:
        log_event(
            "community_flags_updated",
            community_id=community.id,
            actor_user_id=updated_by,
            subject_type="community",
            subject_id=community.id,
            metadata={"changed": changed},
        )
    db.session.commit()
    return after

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from app.extensions import db
from app.models import Community, User
from app.utils.feature_flags import get_all_flags, update_flags
from app.utils.jwt_utils import user_id_from_auth_header


flags_bp = Blueprint("flags_bp", __name__, url_prefix="/api/admin/communities/<int:community_id>")


def _current_user() -> User | None:
    uid = user_id_from_auth_header(request.headers.get("Authorization", ""))
    if uid is None:
        return None
    return db.session.get(User, uid)


def _admin_community(community_id: int):
    community = db.session.get(Community, community_id)
    if community is None:
        return None, (jsonify({"message": "Community not found"}), 404)
    user = _current_user()
    if user is None or not user.has_admin_rights_in(community_id):
        return None, (jsonify({"message": "Forbidden"}), 403)
    g.auth_user_id = int(user.id)
    g.community_id = community_id
    return community, None


@flags_bp.get("/flags")
def admin_get_flags(community_id: int):
    community, denied = _admin_community(community_id)
    if denied:
        return denied
    return jsonify({"ok": True, "flags": get_all_flags(community)}), 200


@flags_bp.put("/flags")
def admin_put_flags(community_id: int):
    community, denied = _admin_community(community_id)
    if denied:
        return denied
    payload = request.get_json(silent=True) or {}
    updates = payload.get("flags") if isinstance(payload.get("flags"), dict) else payload
    if not isinstance(updates, dict):
        return jsonify({"ok": False, "message": "flags payload must be an object"}), 400
    flags = update_flags(community, updates, updated_by=g.auth_user_id)
    current_app.logger.info("community_flags_updated community_id=%s keys=%s", community_id, ",".join(sorted(updates)))
    return jsonify({"ok": True, "flags": flags}), 200

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from app.extensions import db
from app.models import Category, Community, PaymentGateway, User
from app.services.shapes import (
    ReorderPreconditionError,
    ShapeSchemaError,
    ShapeService,
    ShapeTemplates,
    build_shape,
    filter_uneditable_fields,
    params_to_shape,
    pick_translation,
    shape_to_locals,
    shapes_api,
    uneditable_fields,
    validate_shape,
)
from app.services.shapes.editability import Capabilities, capabilities_from_processes
from app.services.shapes.listings import close_listings, count_open_listings, detach_listings
from app.services.shapes.service import reorder_shapes
from app.services.transaction_process_service import processes as community_processes
from app.utils.events import log_event
from app.utils.feature_flags import is_enabled
from app.utils.jwt_utils import user_id_from_auth_header


listing_shapes_bp = Blueprint(
    "listing_shapes_bp",
    __name__,
    url_prefix="/api/admin/communities/<int:community_id>/listing_shapes",
)


def _current_user() -> User | None:
    uid = user_id_from_auth_header(request.headers.get("Authorization", ""))
    if uid is None:
        return None
    return db.session.get(User, uid)


@listing_shapes_bp.before_request
def _ensure_admin_access():
    community_id = int((request.view_args or {}).get("community_id") or 0)
    community = db.session.get(Community, community_id)
    if community is None:
        return jsonify({"message": "Community not found"}), 404

    user = _current_user()
    if user is None or not user.has_admin_rights_in(community_id):
        return jsonify({"message": "Forbidden"}), 403
    g.auth_user_id = int(user.id)
    g.community_id = community_id

    if not is_enabled("shape_ui", community):
        return jsonify({"message": "Not found"}), 404

    gateway = PaymentGateway.query.filter_by(community_id=community_id).first()
    if gateway is not None:
        return jsonify({"message": f"Not available for your payment gateway: {gateway.type}"}), 409

    g.community = community
    return None


def _processes() -> list[dict]:
    if "shape_processes" not in g:
        g.shape_processes = community_processes(g.community.id)
    return g.shape_processes


def _capabilities() -> Capabilities:
    return capabilities_from_processes(_processes())


def _locales() -> list[str]:
    return [loc for _, loc in g.community.available_locales()]


def _locale() -> str:
    requested = (request.args.get("locale") or "").strip()
    return requested if requested in _locales() else g.community.default_locale


def _form_payload(form: dict, count: int, **extra) -> dict:
    return {
        "ok": True,
        "shape": shape_to_locals(form, _locale()),
        "uneditable_fields": uneditable_fields(_capabilities()),
        "count": int(count),
        "locale_name_mapping": {loc: name for name, loc in g.community.available_locales()},
        **extra,
    }


def _invalid_form(form: dict, message: str, errors=None, status: int = 422):
    return jsonify(
        {
            "ok": False,
            "message": message,
            "errors": list(errors or [message]),
            "shape": shape_to_locals(form, _locale()),
            "uneditable_fields": uneditable_fields(_capabilities()),
        }
    ), status


def _shape_from_request() -> dict:
    payload = request.get_json(silent=True) or {}
    return filter_uneditable_fields(params_to_shape(payload.get("shape", payload)), _capabilities())


def _order_ids(raw_order) -> list[int] | None:
    """Shape ids from an order payload, or None when it is not a list of integers."""
    if not isinstance(raw_order, list):
        return None
    ids = []
    for item in raw_order:
        if isinstance(item, bool):
            return None
        try:
            ids.append(int(item))
        except (TypeError, ValueError):
            return None
    return ids


@listing_shapes_bp.get("")
def index(community_id: int):
    shapes = shapes_api.get(community_id=community_id, include_categories=True).or_else([])
    return jsonify(
        {
            "ok": True,
            "listing_shapes": shapes,
            "templates": ShapeTemplates(_capabilities()).label_key_list(),
            "category_count": Category.query.filter_by(community_id=community_id).count(),
        }
    ), 200


@listing_shapes_bp.get("/new")
def new(community_id: int):
    template = ShapeTemplates(_capabilities()).find(request.args.get("template"), _locales())
    if template is None:
        return jsonify({"message": "Unknown listing shape template"}), 404
    return jsonify(_form_payload(template, 0)), 200


@listing_shapes_bp.get("/<int:shape_id>")
def edit(community_id: int, shape_id: int):
    result = ShapeService(_processes()).get(
        community_id=community_id,
        listing_shape_id=shape_id,
        locales=_locales(),
    )
    if not result.success:
        return jsonify({"message": result.error_msg}), 404
    shape = result.data
    return jsonify(
        _form_payload(
            shape,
            count_open_listings(shape_id),
            id=shape_id,
            name=pick_translation(shape.get("name"), _locale()),
        )
    ), 200


@listing_shapes_bp.post("")
def create(community_id: int):
    try:
        shape = _shape_from_request()
    except ShapeSchemaError as e:
        return jsonify({"message": str(e)}), 400

    candidate = build_shape(shape)
    try:
        result = validate_shape(candidate).and_then(
            lambda valid: ShapeService(_processes()).create(
                community_id=community_id,
                default_locale=g.community.default_locale,
                opts=valid,
            )
        )
        if not result.success:
            db.session.rollback()
            return _invalid_form(candidate, f"Can not create listing shape: {result.error_msg}", result.errors)

        created = result.data
        log_event(
            "listing_shape_created",
            community_id=community_id,
            actor_user_id=g.auth_user_id,
            subject_type="listing_shape",
            subject_id=created["id"],
            metadata={"shape": created},
        )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("listing_shape_create_failed community_id=%s", community_id)
        return jsonify({"message": "Failed", "error": str(e)}), 500

    current_app.logger.info("listing_shape_created community_id=%s shape_id=%s", community_id, created["id"])
    name = pick_translation(created.get("name"), _locale())
    return jsonify({"ok": True, "listing_shape": created, "message": f"Listing shape {name} created"}), 201


@listing_shapes_bp.route("/<int:shape_id>", methods=["PUT", "PATCH"])
def update(community_id: int, shape_id: int):
    current = shapes_api.get(community_id=community_id, listing_shape_id=shape_id)
    if not current.success:
        return jsonify({"message": current.error_msg}), 404
    try:
        shape = _shape_from_request()
    except ShapeSchemaError as e:
        return jsonify({"message": str(e)}), 400

    # Locked fields keep their stored values and are judged with the rest.
    candidate = build_shape({**current.data, **shape})
    try:
        result = validate_shape(candidate).and_then(
            lambda _valid: ShapeService(_processes()).update(
                community_id=community_id,
                listing_shape_id=shape_id,
                opts=shape,
            )
        )
        if not result.success:
            db.session.rollback()
            return _invalid_form(candidate, f"Can not update listing shape: {result.error_msg}", result.errors)

        updated = result.data
        log_event(
            "listing_shape_updated",
            community_id=community_id,
            actor_user_id=g.auth_user_id,
            subject_type="listing_shape",
            subject_id=shape_id,
            metadata={"changes": shape},
        )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("listing_shape_update_failed community_id=%s shape_id=%s", community_id, shape_id)
        return jsonify({"message": "Failed", "error": str(e)}), 500

    current_app.logger.info("listing_shape_updated community_id=%s shape_id=%s", community_id, shape_id)
    name = pick_translation(updated.get("name"), _locale())
    return jsonify({"ok": True, "listing_shape": updated, "message": f"Listing shape {name} updated"}), 200


@listing_shapes_bp.post("/order")
def order(community_id: int):
    payload = request.get_json(silent=True) or {}
    raw_order = payload.get("order")
    ordered_ids = _order_ids(raw_order)
    if ordered_ids is None:
        return jsonify({"message": "order must be a list of listing shape ids"}), 400

    try:
        updates = reorder_shapes(community_id=community_id, ordered_ids=ordered_ids)
        log_event(
            "listing_shapes_reordered",
            community_id=community_id,
            actor_user_id=g.auth_user_id,
            subject_type="community",
            subject_id=community_id,
            metadata={"order": ordered_ids, "updates": updates},
        )
        db.session.commit()
    except ReorderPreconditionError as e:
        db.session.rollback()
        current_app.logger.warning("listing_shapes_order_rejected community_id=%s err=%s", community_id, e)
        return jsonify({"message": str(e)}), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("listing_shapes_order_failed community_id=%s", community_id)
        return jsonify({"message": "Failed", "error": str(e)}), 500

    current_app.logger.info("listing_shapes_reordered community_id=%s changed=%s", community_id, len(updates))
    return jsonify(
        {
            "ok": True,
            "updated": [{"id": shape_id, "sort_priority": priority} for shape_id, priority in updates],
        }
    ), 200


@listing_shapes_bp.post("/<int:shape_id>/close_listings")
def close_shape_listings(community_id: int, shape_id: int):
    shape_res = shapes_api.get(community_id=community_id, listing_shape_id=shape_id)
    if not shape_res.success:
        return jsonify({"message": f"Can not find listing shape with id {shape_id}"}), 404
    try:
        closed = close_listings(shape_id)
        log_event(
            "listing_shape_listings_closed",
            community_id=community_id,
            actor_user_id=g.auth_user_id,
            subject_type="listing_shape",
            subject_id=shape_id,
            metadata={"closed": closed},
        )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("listing_shape_close_failed shape_id=%s", shape_id)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "closed": closed, "message": "Successfully closed listings"}), 200


@listing_shapes_bp.delete("/<int:shape_id>")
def destroy(community_id: int, shape_id: int):
    shape_res = shapes_api.get(community_id=community_id, listing_shape_id=shape_id)
    if not shape_res.success:
        return jsonify({"message": f"Can not find listing shape with id {shape_id}"}), 404
    try:
        detached = detach_listings(shape_id)
        deleted = shapes_api.delete(community_id=community_id, listing_shape_id=shape_id).data
        log_event(
            "listing_shape_deleted",
            community_id=community_id,
            actor_user_id=g.auth_user_id,
            subject_type="listing_shape",
            subject_id=shape_id,
            metadata={"detached_listings": detached},
        )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("listing_shape_delete_failed shape_id=%s", shape_id)
        return jsonify({"message": "Failed", "error": str(e)}), 500

    current_app.logger.info("listing_shape_deleted community_id=%s shape_id=%s", community_id, shape_id)
    name = pick_translation(deleted.get("name"), _locale())
    return jsonify({"ok": True, "listing_shape": deleted, "message": f"Successfully deleted order type {name}"}), 200

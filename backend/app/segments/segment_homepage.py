from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from app.extensions import db
from app.models import Community
from app.services.homepage_service import (
    APP_DEFAULT_VIEW_TYPE,
    category_tree,
    descendant_ids,
    embed_shapes,
    listings_limit,
    mark_open_categories,
    more_than_one,
    price_range,
    search_listings,
    select_category,
    select_shape,
    selected_view_type,
)
from app.services.shapes import pick_translation, shapes_api
from app.utils.feature_flags import is_enabled


homepage_bp = Blueprint("homepage_bp", __name__, url_prefix="/api/communities/<int:community_id>")


def _page() -> int:
    try:
        return max(1, int(request.args.get("page") or 1))
    except (TypeError, ValueError):
        return 1


@homepage_bp.get("/homepage")
def index(community_id: int):
    community = db.session.get(Community, community_id)
    if community is None:
        return jsonify({"message": "Community not found"}), 404
    g.community_id = community_id

    locale = (request.args.get("locale") or "").strip() or community.default_locale
    view_type = selected_view_type(request.args.get("view"), community.default_browse_view)
    if view_type == "map" and not is_enabled("homepage_map_view", community):
        view_type = APP_DEFAULT_VIEW_TYPE

    all_shapes = shapes_api.get(community_id=community_id, include_categories=True).or_else([])
    tree = embed_shapes(category_tree(community_id), all_shapes, locale)

    # A single shape makes the shape menu pointless.
    transaction_type_menu_enabled = len(all_shapes) > 1
    show_categories = more_than_one(tree)
    filters_enabled = bool(community.show_price_filter)

    # Old links use share_type for the shape parameter.
    shape_param = request.args.get("transaction_type") or request.args.get("share_type")
    selected_shape = select_shape(all_shapes, shape_param)
    selected_category = select_category(tree, request.args.get("category"))

    listings = search_listings(
        community_id,
        shape_id=selected_shape["id"] if selected_shape else None,
        category_ids=descendant_ids(selected_category) if selected_category else None,
        q=(request.args.get("q") or "").strip(),
        price_cents=price_range(community, request.args.get("price_min"), request.args.get("price_max")),
        page=_page(),
        per_page=listings_limit(view_type),
    )

    return jsonify(
        {
            "ok": True,
            "view_type": view_type,
            "shapes": [
                {"id": s["id"], "name": pick_translation(s.get("name"), locale), "sort_priority": s["sort_priority"]}
                for s in all_shapes
            ],
            "selected_shape": selected_shape["id"] if selected_shape else None,
            "selected_category": selected_category["id"] if selected_category else None,
            "category_tree": mark_open_categories(tree, selected_category["id"] if selected_category else None),
            "transaction_type_menu_enabled": transaction_type_menu_enabled,
            "show_categories": show_categories,
            "category_menu_enabled": show_categories or filters_enabled,
            "listings": listings,
        }
    ), 200

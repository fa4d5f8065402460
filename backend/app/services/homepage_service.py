from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable

from sqlalchemy import or_

from app.models import Category, Community, Listing
from app.services.shapes.schema import pick_translation


APP_DEFAULT_VIEW_TYPE = "grid"
VIEW_TYPES = ("grid", "list", "map")


def _env_int(name: str, default: int, *, minimum: int = 1, maximum: int = 1000) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        value = int(raw) if raw else int(default)
    except Exception:
        value = int(default)
    return max(minimum, min(value, maximum))


def listings_limit(view_type: str) -> int:
    if view_type == "map":
        return _env_int("MAP_LISTINGS_LIMIT", 100)
    return _env_int("GRID_LISTINGS_LIMIT", 24)


def selected_view_type(
    view_param: str | None,
    community_default: str | None,
    app_default: str = APP_DEFAULT_VIEW_TYPE,
    all_types=VIEW_TYPES,
) -> str:
    if view_param and view_param in all_types:
        return view_param
    if community_default and community_default in all_types:
        return community_default
    return app_default


def category_tree(community_id: int) -> list[dict]:
    rows = (
        Category.query.filter_by(community_id=int(community_id))
        .order_by(Category.sort_priority.asc(), Category.id.asc())
        .all()
    )
    nodes = {int(row.id): {**row.to_dict(), "children": []} for row in rows}
    roots = []
    for node in nodes.values():
        parent = nodes.get(node["parent_id"]) if node["parent_id"] is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent["children"].append(node)
    return roots


def embed_shapes(tree: list[dict], shapes: list[dict], locale: str | None) -> list[dict]:
    """Attach to every category the shapes that are available in it."""

    def embed(node: dict) -> dict:
        node_shapes = [
            {"id": s["id"], "name": pick_translation(s.get("name"), locale)}
            for s in shapes
            if node["id"] in (s.get("categories") or [])
        ]
        return {**node, "listing_shapes": node_shapes, "children": [embed(c) for c in node["children"]]}

    return [embed(node) for node in tree]


def more_than_one(tree: list[dict]) -> bool:
    if len(tree) > 1:
        return True
    return len(tree) == 1 and len(tree[0].get("children") or []) > 1


def find_category_by(tree: list[dict], predicate: Callable[[dict], bool]) -> dict | None:
    for node in tree:
        if predicate(node):
            return node
        hit = find_category_by(node.get("children") or [], predicate)
        if hit is not None:
            return hit
    return None


def descendant_ids(node: dict) -> list[int]:
    ids = [node["id"]]
    for child in node.get("children") or []:
        ids.extend(descendant_ids(child))
    return ids


def mark_open_categories(tree: list[dict], selected_id: int | None) -> list[dict]:
    def mark(node: dict) -> dict:
        children = [mark(c) for c in node.get("children") or []]
        is_open = selected_id is not None and (node["id"] == selected_id or any(c["open"] for c in children))
        return {**node, "children": children, "open": bool(is_open)}

    return [mark(node) for node in tree]


def select_shape(shapes: list[dict], param: Any) -> dict | None:
    text = str(param or "").strip()
    if not text:
        return None
    low = text.lower()
    by_name = next(
        (s for s in shapes if any(str(n or "").strip().lower() == low for n in (s.get("name") or {}).values())),
        None,
    )
    if by_name is not None:
        return by_name
    return next((s for s in shapes if str(s.get("id")) == text), None)


def select_category(tree: list[dict], param: Any) -> dict | None:
    text = str(param or "").strip()
    if not text:
        return None
    by_url = find_category_by(tree, lambda c: c.get("url") == text)
    if by_url is not None:
        return by_url
    return find_category_by(tree, lambda c: str(c.get("id")) == text)


def _to_cents(raw_value: Any) -> int | None:
    text = str(raw_value or "").strip().replace(",", ".")
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price_range(community: Community, price_min: Any, price_max: Any) -> tuple[int, int] | None:
    """Price filter in cents, or None when absent or equal to the community's full range."""
    low = _to_cents(price_min)
    high = _to_cents(price_max)
    if low is None or high is None:
        return None
    if (low, high) == (int(community.price_filter_min or 0), int(community.price_filter_max or 0)):
        return None
    return low, high


def search_listings(
    community_id: int,
    *,
    shape_id: int | None = None,
    category_ids: list[int] | None = None,
    q: str = "",
    price_cents: tuple[int, int] | None = None,
    page: int = 1,
    per_page: int = 24,
) -> dict:
    query = Listing.currently_open(Listing.query.filter_by(community_id=int(community_id)))
    if shape_id is not None:
        query = query.filter(Listing.listing_shape_id == int(shape_id))
    if category_ids:
        query = query.filter(Listing.category_id.in_(category_ids))
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(Listing.title.ilike(like), Listing.description.ilike(like)))
    if price_cents is not None:
        query = query.filter(Listing.price_cents >= price_cents[0], Listing.price_cents <= price_cents[1])

    page = max(1, int(page or 1))
    total = query.count()
    rows = (
        query.order_by(Listing.created_at.desc(), Listing.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return {
        "items": [row.to_dict() for row in rows],
        "page": page,
        "per_page": per_page,
        "total": int(total),
    }

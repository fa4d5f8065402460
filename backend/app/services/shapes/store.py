from __future__ import annotations

import json
import uuid

from sqlalchemy import func

from app.extensions import db
from app.models import Category, ListingShape


def _query(community_id: int):
    return ListingShape.query.filter_by(community_id=int(community_id), deleted=False)


def _find(community_id: int, listing_shape_id) -> ListingShape | None:
    try:
        shape_id = int(listing_shape_id)
    except (TypeError, ValueError):
        return None
    return _query(community_id).filter(ListingShape.id == shape_id).first()


def _next_sort_priority(community_id: int) -> int:
    current = (
        db.session.query(func.max(ListingShape.sort_priority))
        .filter(ListingShape.community_id == int(community_id), ListingShape.deleted.is_(False))
        .scalar()
    )
    return 0 if current is None else int(current) + 1


def _apply_opts(row: ListingShape, community_id: int, opts: dict) -> None:
    if "name" in opts:
        row.name_json = json.dumps(opts["name"] or {}, ensure_ascii=False)
    if "units" in opts:
        row.units_json = json.dumps(opts["units"] or [], ensure_ascii=False)
    for key in ("shipping_enabled", "online_payments", "price_enabled"):
        if key in opts:
            setattr(row, key, bool(opts[key]))
    if opts.get("sort_priority") is not None:
        row.sort_priority = int(opts["sort_priority"])
    if "transaction_process_id" in opts:
        row.transaction_process_id = opts["transaction_process_id"]
    if "categories" in opts:
        ids = [int(c) for c in (opts["categories"] or [])]
        row.categories = (
            Category.query.filter(Category.community_id == int(community_id), Category.id.in_(ids)).all()
            if ids
            else []
        )


def get(*, community_id: int, listing_shape_id, include_categories: bool = False) -> dict | None:
    row = _find(community_id, listing_shape_id)
    return row.to_dict(include_categories=include_categories) if row else None


def get_all(*, community_id: int, include_categories: bool = False) -> list[dict]:
    rows = _query(community_id).order_by(ListingShape.sort_priority.asc(), ListingShape.id.asc()).all()
    return [row.to_dict(include_categories=include_categories) for row in rows]


def create(*, community_id: int, opts: dict) -> dict:
    row = ListingShape(
        community_id=int(community_id),
        name_tr_key=f"listing_shape.{uuid.uuid4().hex[:16]}",
        sort_priority=_next_sort_priority(community_id),
    )
    _apply_opts(row, community_id, opts)
    db.session.add(row)
    db.session.flush()
    return row.to_dict(include_categories="categories" in opts)


def update(*, community_id: int, listing_shape_id, opts: dict) -> dict | None:
    row = _find(community_id, listing_shape_id)
    if row is None:
        return None
    _apply_opts(row, community_id, opts)
    db.session.add(row)
    db.session.flush()
    return row.to_dict(include_categories="categories" in opts)


def delete(*, community_id: int, listing_shape_id) -> dict | None:
    row = _find(community_id, listing_shape_id)
    if row is None:
        return None
    row.deleted = True
    db.session.add(row)
    db.session.flush()
    return row.to_dict()

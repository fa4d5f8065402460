from __future__ import annotations

from app.extensions import db
from app.models import Listing


def count_open_listings(listing_shape_id: int) -> int:
    return Listing.currently_open(Listing.query.filter_by(listing_shape_id=int(listing_shape_id))).count()


def close_listings(listing_shape_id: int) -> int:
    updated = Listing.query.filter_by(listing_shape_id=int(listing_shape_id)).update(
        {"open": False}, synchronize_session=False
    )
    db.session.flush()
    return int(updated or 0)


def detach_listings(listing_shape_id: int) -> int:
    """Close the shape's listings and unlink them from it."""
    updated = Listing.query.filter_by(listing_shape_id=int(listing_shape_id)).update(
        {"open": False, "listing_shape_id": None}, synchronize_session=False
    )
    db.session.flush()
    return int(updated or 0)

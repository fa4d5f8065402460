from datetime import datetime
import json

import sqlalchemy as sa

from app.extensions import db


listing_shape_categories = db.Table(
    "listing_shape_categories",
    db.Column("listing_shape_id", db.Integer, db.ForeignKey("listing_shapes.id"), primary_key=True),
    db.Column("category_id", db.Integer, db.ForeignKey("categories.id"), primary_key=True),
)


class ListingShape(db.Model):
    __tablename__ = "listing_shapes"

    id = db.Column(db.Integer, primary_key=True)
    community_id = db.Column(db.Integer, db.ForeignKey("communities.id"), nullable=False, index=True)
    transaction_process_id = db.Column(db.Integer, db.ForeignKey("transaction_processes.id"), nullable=True)

    name_tr_key = db.Column(db.String(64), nullable=False)
    # {locale: display name}
    name_json = db.Column(db.Text, nullable=False, default="{}", server_default="{}")

    # Ordering key, not unique at rest.
    sort_priority = db.Column(db.Integer, nullable=False, default=0, server_default="0", index=True)

    shipping_enabled = db.Column(db.Boolean, nullable=False, default=False, server_default=sa.text("false"))
    online_payments = db.Column(db.Boolean, nullable=False, default=False, server_default=sa.text("false"))
    price_enabled = db.Column(db.Boolean, nullable=False, default=False, server_default=sa.text("false"))
    # [{"type": ..., "enabled": ...}, ...]
    units_json = db.Column(db.Text, nullable=False, default="[]", server_default="[]")

    deleted = db.Column(db.Boolean, nullable=False, default=False, server_default=sa.text("false"), index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    categories = db.relationship("Category", secondary=listing_shape_categories, lazy="selectin")

    @staticmethod
    def _parse_json(raw_value, fallback):
        text_value = str(raw_value or "").strip()
        if not text_value:
            return fallback
        try:
            parsed = json.loads(text_value)
        except Exception:
            return fallback
        return parsed if isinstance(parsed, type(fallback)) else fallback

    def names(self) -> dict:
        return {str(k): str(v or "") for k, v in self._parse_json(self.name_json, {}).items()}

    def units(self) -> list[dict]:
        return [u for u in self._parse_json(self.units_json, []) if isinstance(u, dict)]

    def to_dict(self, *, include_categories: bool = False) -> dict:
        payload = {
            "id": int(self.id),
            "community_id": int(self.community_id),
            "transaction_process_id": int(self.transaction_process_id) if self.transaction_process_id is not None else None,
            "name_tr_key": self.name_tr_key or "",
            "name": self.names(),
            "sort_priority": int(self.sort_priority or 0),
            "shipping_enabled": bool(self.shipping_enabled),
            "online_payments": bool(self.online_payments),
            "price_enabled": bool(self.price_enabled),
            "units": self.units(),
        }
        if include_categories:
            payload["categories"] = sorted(int(c.id) for c in (self.categories or []))
        return payload

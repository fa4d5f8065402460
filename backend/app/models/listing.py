from datetime import datetime

import sqlalchemy as sa

from app.extensions import db


class Listing(db.Model):
    __tablename__ = "listings"

    id = db.Column(db.Integer, primary_key=True)

    community_id = db.Column(db.Integer, db.ForeignKey("communities.id"), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    title = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)

    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True, index=True)
    # Nulled when the shape is deleted
    listing_shape_id = db.Column(db.Integer, db.ForeignKey("listing_shapes.id"), nullable=True, index=True)

    price_cents = db.Column(db.Integer, nullable=True)
    currency = db.Column(db.String(8), nullable=True)
    unit_type = db.Column(db.String(16), nullable=True)

    open = db.Column(db.Boolean, nullable=False, default=True, server_default=sa.text("true"), index=True)
    valid_until = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, server_default=sa.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def currently_open(cls, query=None, *, now: datetime | None = None):
        q = query if query is not None else cls.query
        now = now or datetime.utcnow()
        return q.filter(cls.open.is_(True)).filter(sa.or_(cls.valid_until.is_(None), cls.valid_until > now))

    def to_dict(self) -> dict:
        return {
            "id": int(self.id),
            "community_id": int(self.community_id),
            "author_id": int(self.author_id) if self.author_id is not None else None,
            "title": self.title,
            "description": self.description or "",
            "category_id": int(self.category_id) if self.category_id is not None else None,
            "listing_shape_id": int(self.listing_shape_id) if self.listing_shape_id is not None else None,
            "price_cents": int(self.price_cents) if self.price_cents is not None else None,
            "currency": self.currency or "",
            "unit_type": self.unit_type or "",
            "open": bool(self.open),
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

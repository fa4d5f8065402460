from datetime import datetime
import json

from app.extensions import db


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    community_id = db.Column(db.Integer, db.ForeignKey("communities.id"), nullable=False, index=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True, index=True)

    url = db.Column(db.String(140), nullable=False, index=True)
    # {locale: display name}
    name_json = db.Column(db.Text, nullable=False, default="{}", server_default="{}")
    sort_priority = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def names(self) -> dict:
        raw = str(self.name_json or "").strip()
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except Exception:
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def to_dict(self) -> dict:
        return {
            "id": int(self.id),
            "community_id": int(self.community_id),
            "parent_id": int(self.parent_id) if self.parent_id is not None else None,
            "url": self.url or "",
            "name": self.names(),
            "sort_priority": int(self.sort_priority or 0),
        }

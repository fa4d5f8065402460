from datetime import datetime
import json

from app.extensions import db


class PlatformEvent(db.Model):
    """Audit trail of admin changes to community configuration."""

    __tablename__ = "platform_events"

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    event_type = db.Column(db.String(80), nullable=False, index=True)
    community_id = db.Column(db.Integer, nullable=True, index=True)
    actor_user_id = db.Column(db.Integer, nullable=True, index=True)

    subject_type = db.Column(db.String(80), nullable=True)
    subject_id = db.Column(db.String(120), nullable=True, index=True)

    request_id = db.Column(db.String(80), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    def metadata_dict(self) -> dict:
        if not self.metadata_json:
            return {}
        try:
            parsed = json.loads(self.metadata_json)
        except Exception:
            return {"raw": str(self.metadata_json)}
        return parsed if isinstance(parsed, dict) else {"value": parsed}

    def to_dict(self) -> dict:
        return {
            "id": int(self.id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "event_type": self.event_type or "",
            "community_id": int(self.community_id) if self.community_id is not None else None,
            "actor_user_id": int(self.actor_user_id) if self.actor_user_id is not None else None,
            "subject_type": self.subject_type or "",
            "subject_id": self.subject_id or "",
            "request_id": self.request_id or "",
            "metadata": self.metadata_dict(),
        }

from datetime import datetime

import sqlalchemy as sa

from app.extensions import db


PROCESS_NONE = "none"
PROCESS_PREAUTHORIZE = "preauthorize"
PROCESS_POSTPAY = "postpay"

PROCESS_KINDS = (PROCESS_NONE, PROCESS_PREAUTHORIZE, PROCESS_POSTPAY)


class TransactionProcess(db.Model):
    __tablename__ = "transaction_processes"

    id = db.Column(db.Integer, primary_key=True)
    community_id = db.Column(db.Integer, db.ForeignKey("communities.id"), nullable=False, index=True)
    process = db.Column(db.String(24), nullable=False, default=PROCESS_NONE, server_default=PROCESS_NONE)
    author_is_seller = db.Column(db.Boolean, nullable=False, default=True, server_default=sa.text("true"))

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": int(self.id),
            "community_id": int(self.community_id),
            "process": (self.process or PROCESS_NONE),
            "author_is_seller": bool(self.author_is_seller),
        }

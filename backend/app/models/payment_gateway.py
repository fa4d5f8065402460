from datetime import datetime

from app.extensions import db


class PaymentGateway(db.Model):
    """Legacy per-community gateway (braintree, checkout)."""

    __tablename__ = "payment_gateways"

    id = db.Column(db.Integer, primary_key=True)
    community_id = db.Column(db.Integer, db.ForeignKey("communities.id"), nullable=False, index=True)
    type = db.Column(db.String(32), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

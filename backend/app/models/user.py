from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash

from app.extensions import db


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(120), nullable=False, default="")
    email = db.Column(db.String(255), unique=True, index=True, nullable=False)

    password_hash = db.Column(db.String(255), nullable=False)

    # Admins without a community are platform admins.
    community_id = db.Column(db.Integer, db.ForeignKey("communities.id"), nullable=True, index=True)
    role = db.Column(db.String(32), nullable=False, default="member")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, raw_password: str) -> None:
        self.password_hash = generate_password_hash(raw_password)

    def has_admin_rights_in(self, community_id: int) -> bool:
        if (self.role or "").strip().lower() != "admin":
            return False
        if self.community_id is None:
            return True
        return int(self.community_id) == int(community_id)

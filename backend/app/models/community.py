from datetime import datetime
import json

import sqlalchemy as sa

from app.extensions import db


LOCALE_NAMES = {
    "en": "English",
    "fi": "Suomi",
    "sv": "Svenska",
    "de": "Deutsch",
    "fr": "Français",
    "es": "Español",
}


class Community(db.Model):
    __tablename__ = "communities"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, default="")

    default_locale = db.Column(db.String(16), nullable=False, default="en", server_default="en")
    # JSON list of locale codes, default locale first.
    locales_json = db.Column(db.Text, nullable=False, default='["en"]', server_default='["en"]')

    default_browse_view = db.Column(db.String(16), nullable=True)
    default_currency = db.Column(db.String(8), nullable=False, default="EUR", server_default="EUR")

    # Price filter bounds in cents
    show_price_filter = db.Column(db.Boolean, nullable=False, default=False, server_default=sa.text("false"))
    price_filter_min = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    price_filter_max = db.Column(db.Integer, nullable=False, default=100000, server_default="100000")

    feature_flags_json = db.Column(db.Text, nullable=False, default="{}", server_default="{}")

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def locales(self) -> list[str]:
        raw = str(self.locales_json or "").strip()
        parsed = []
        if raw:
            try:
                parsed = json.loads(raw)
            except Exception:
                parsed = []
        out = [str(loc).strip() for loc in parsed if str(loc or "").strip()] if isinstance(parsed, list) else []
        default = (self.default_locale or "en").strip()
        if default not in out:
            out.insert(0, default)
        return out

    def available_locales(self) -> list[tuple[str, str]]:
        """(display name, locale code) pairs, in the community's locale order."""
        return [(LOCALE_NAMES.get(loc, loc), loc) for loc in self.locales()]

    def to_dict(self) -> dict:
        return {
            "id": int(self.id),
            "name": self.name or "",
            "default_locale": self.default_locale or "en",
            "locales": self.locales(),
            "default_browse_view": self.default_browse_view or "",
            "default_currency": self.default_currency or "EUR",
            "show_price_filter": bool(self.show_price_filter),
            "price_filter_min": int(self.price_filter_min or 0),
            "price_filter_max": int(self.price_filter_max or 0),
        }

from __future__ import annotations

from app.services.shapes.editability import Capabilities


# online_payments and shipping_enabled are switched on only when the
# community supports pre-authorization.
_TEMPLATES = [
    {
        "key": "selling_products",
        "label": {"en": "Selling products", "fi": "Tuotteiden myynti"},
        "price_enabled": True,
        "online_payments": True,
        "shipping_enabled": True,
        "units": [],
    },
    {
        "key": "renting_products",
        "label": {"en": "Renting products", "fi": "Tuotteiden vuokraus"},
        "price_enabled": True,
        "online_payments": True,
        "shipping_enabled": False,
        "units": ["day", "week", "month"],
    },
    {
        "key": "offering_services",
        "label": {"en": "Offering services", "fi": "Palveluiden tarjoaminen"},
        "price_enabled": True,
        "online_payments": True,
        "shipping_enabled": False,
        "units": ["hour"],
    },
    {
        "key": "giving_things_away",
        "label": {"en": "Giving things away", "fi": "Tavaroiden lahjoittaminen"},
        "price_enabled": False,
        "online_payments": False,
        "shipping_enabled": False,
        "units": [],
    },
    {
        "key": "requesting",
        "label": {"en": "Requesting", "fi": "Pyytäminen"},
        "price_enabled": False,
        "online_payments": False,
        "shipping_enabled": False,
        "units": [],
    },
    {
        "key": "custom",
        "label": {"en": "Custom", "fi": "Oma"},
        "price_enabled": True,
        "online_payments": False,
        "shipping_enabled": False,
        "units": [],
    },
]


class ShapeTemplates:
    def __init__(self, capabilities: Capabilities):
        self.capabilities = capabilities

    def label_key_list(self) -> list[dict]:
        return [{"key": t["key"], "label": t["label"]["en"]} for t in _TEMPLATES]

    def find(self, key: str | None, locales: list[str]) -> dict | None:
        template = next((t for t in _TEMPLATES if t["key"] == (key or "").strip()), None)
        if template is None:
            return None
        preauth = bool(self.capabilities.preauthorize_available)
        labels = template["label"]
        return {
            "name": {loc: labels.get(loc, labels["en"]) for loc in locales},
            "price_enabled": template["price_enabled"],
            "online_payments": template["online_payments"] and preauth,
            "shipping_enabled": template["shipping_enabled"] and preauth,
            "units": [{"type": unit_type, "enabled": True} for unit_type in template["units"]],
        }

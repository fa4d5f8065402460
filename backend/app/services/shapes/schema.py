from __future__ import annotations

from typing import Any


BOOL_FIELDS = ("shipping_enabled", "online_payments", "price_enabled")
SHAPE_FIELDS = ("name", "sort_priority", "units", "categories") + BOOL_FIELDS

# Carried through untouched when a stored shape is normalized again.
_PASSTHROUGH_FIELDS = ("id", "community_id", "name_tr_key", "transaction_process_id")

PREDEFINED_UNIT_TYPES = ("piece", "hour", "day", "night", "week", "month")
CUSTOM_UNIT_TYPE = "custom"
UNIT_TYPES = PREDEFINED_UNIT_TYPES + (CUSTOM_UNIT_TYPE,)


class ShapeSchemaError(ValueError):
    """Payload that does not have the structure of a listing shape."""


def _text(value: Any) -> str:
    return str(value or "").strip()


def _as_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return int(value) == 1
    return str(value).strip().lower() in ("1", "true", "yes", "y", "on")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ShapeSchemaError(f"{field} must be an integer")
    try:
        return int(str(value).strip())
    except Exception:
        raise ShapeSchemaError(f"{field} must be an integer")


def normalize_name(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ShapeSchemaError("name must be a mapping of locale to text")
    out: dict[str, str] = {}
    for locale, text_value in value.items():
        loc = _text(locale)
        if loc:
            out[loc] = _text(text_value)
    return out


def normalize_unit(unit: Any) -> dict:
    if isinstance(unit, str):
        unit = {"type": unit}
    if not isinstance(unit, dict):
        raise ShapeSchemaError("unit must be an object or a unit type")
    unit_type = _text(unit.get("type")).lower()
    if unit_type not in UNIT_TYPES:
        raise ShapeSchemaError(f"Unknown unit type: {unit_type or '<empty>'}")
    out = {
        "type": unit_type,
        "enabled": _as_bool(unit.get("enabled", True)),
    }
    if unit_type == CUSTOM_UNIT_TYPE:
        out["translation_key"] = _text(unit.get("translation_key"))
        if unit.get("name") is not None:
            out["name"] = normalize_name(unit.get("name"))
    return out


def normalize_units(units: Any) -> list[dict]:
    if units is None:
        return []
    if not isinstance(units, (list, tuple)):
        raise ShapeSchemaError("units must be a list")
    return [normalize_unit(u) for u in units]


def normalize_categories(categories: Any) -> list[int]:
    if categories is None:
        return []
    if not isinstance(categories, (list, tuple, set)):
        raise ShapeSchemaError("categories must be a list of ids")
    return sorted({_as_int(c, "categories") for c in categories})


def coerce_shape_fields(raw: dict | None) -> dict:
    """Coerce the shape fields present in ``raw``; absent fields stay absent."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ShapeSchemaError("shape must be an object")
    out: dict[str, Any] = {}
    if "name" in raw:
        out["name"] = normalize_name(raw.get("name"))
    if "sort_priority" in raw and raw.get("sort_priority") not in (None, ""):
        out["sort_priority"] = _as_int(raw.get("sort_priority"), "sort_priority")
    for key in BOOL_FIELDS:
        if key in raw:
            out[key] = _as_bool(raw.get(key))
    if "units" in raw:
        out["units"] = normalize_units(raw.get("units"))
    if "categories" in raw:
        out["categories"] = normalize_categories(raw.get("categories"))
    return out


def build_shape(data: dict | None) -> dict:
    """Complete shape: every field present, defaults for the missing ones."""
    data = data or {}
    shape = {
        "name": {},
        "shipping_enabled": False,
        "online_payments": False,
        "price_enabled": False,
        "units": [],
    }
    shape.update(coerce_shape_fields(data))
    for key in _PASSTHROUGH_FIELDS:
        if key in data:
            shape[key] = data[key]
    return shape


def pick_translation(translations: dict | None, locale: str | None, fallback_locale: str | None = None) -> str:
    translations = translations or {}
    for loc in (locale, fallback_locale):
        if loc and _text(translations.get(loc)):
            return _text(translations.get(loc))
    for value in translations.values():
        if _text(value):
            return _text(value)
    return ""

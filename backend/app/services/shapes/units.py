from __future__ import annotations

from typing import Any

from app.services.shapes.schema import (
    CUSTOM_UNIT_TYPE,
    PREDEFINED_UNIT_TYPES,
    _as_bool,
    normalize_name,
    pick_translation,
)


UNIT_LABELS = {
    "piece": "per piece",
    "hour": "per hour",
    "day": "per day",
    "night": "per night",
    "week": "per week",
    "month": "per month",
}


def expand_units(shape_units: list[dict] | None, locale: str | None = None) -> list[dict]:
    """Unit checkboxes for the admin form.

    One entry per predefined unit type, checked when the shape has it enabled,
    followed by the shape's custom units.
    """
    shape_units = shape_units or []
    enabled_types = {
        u.get("type")
        for u in shape_units
        if u.get("type") != CUSTOM_UNIT_TYPE and u.get("enabled", True)
    }
    views = [
        {"type": unit_type, "enabled": unit_type in enabled_types, "label": UNIT_LABELS.get(unit_type, unit_type)}
        for unit_type in PREDEFINED_UNIT_TYPES
    ]
    for unit in shape_units:
        if unit.get("type") != CUSTOM_UNIT_TYPE:
            continue
        translation_key = unit.get("translation_key") or ""
        names = unit.get("name") or {}
        views.append(
            {
                "type": CUSTOM_UNIT_TYPE,
                "enabled": _as_bool(unit.get("enabled", True)),
                "label": pick_translation(names, locale) or translation_key,
                "translation_key": translation_key,
                "name": dict(names),
            }
        )
    return views


def _selected_unit(item: Any) -> dict | None:
    if isinstance(item, str):
        return {"type": item.strip().lower(), "enabled": True}
    if not isinstance(item, dict):
        return {"type": item, "enabled": True}
    if not _as_bool(item.get("enabled", True)):
        return None
    unit = {"type": str(item.get("type") or "").strip().lower(), "enabled": True}
    if unit["type"] == CUSTOM_UNIT_TYPE:
        unit["translation_key"] = str(item.get("translation_key") or "").strip()
        if isinstance(item.get("name"), dict) and item.get("name"):
            unit["name"] = normalize_name(item.get("name"))
    return unit


def parse_units(selected_units: Any) -> list[dict]:
    """Canonical units from a form submission.

    Accepts the expanded view list (only checked entries are kept), a list of
    unit types, or a mapping of unit type to checkbox value.
    """
    if not selected_units:
        return []
    if isinstance(selected_units, dict):
        return [
            {"type": str(unit_type).strip().lower(), "enabled": True}
            for unit_type, checked in selected_units.items()
            if _as_bool(checked)
        ]
    if not isinstance(selected_units, (list, tuple)):
        return [{"type": selected_units, "enabled": True}]
    units = []
    for item in selected_units:
        unit = _selected_unit(item)
        if unit is not None:
            units.append(unit)
    return units

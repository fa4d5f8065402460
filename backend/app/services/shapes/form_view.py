from __future__ import annotations

from app.services.shapes.schema import build_shape, coerce_shape_fields
from app.services.shapes.units import expand_units, parse_units


def params_to_shape(params: dict | None) -> dict:
    """Shape fields from a request payload, limited to the keys that were sent."""
    form = dict(params or {})
    if "units" in form:
        form["units"] = parse_units(form.get("units"))
    return coerce_shape_fields(form)


def shape_to_locals(shape: dict, locale: str | None = None) -> dict:
    out = build_shape(shape)
    out["units"] = expand_units(out["units"], locale)
    return out

from __future__ import annotations

from app.utils.result import Result, error, success


SHIPPING_WITHOUT_ONLINE_PAYMENTS = "Shipping can not be enabled without online payments"
ONLINE_PAYMENTS_WITHOUT_PRICE = "Online payments can not be enabled without price"
UNITS_WITHOUT_PRICE = "Price units can not be used without price field"


def shape_errors(shape: dict) -> list[str]:
    errors = []

    if shape.get("shipping_enabled") and not shape.get("online_payments"):
        errors.append(SHIPPING_WITHOUT_ONLINE_PAYMENTS)

    if shape.get("online_payments") and not shape.get("price_enabled"):
        errors.append(ONLINE_PAYMENTS_WITHOUT_PRICE)

    if shape.get("units") and not shape.get("price_enabled"):
        errors.append(UNITS_WITHOUT_PRICE)

    return errors


def validate_shape(candidate: dict) -> Result:
    errors = shape_errors(candidate)
    if not errors:
        return success(candidate)
    return error(", ".join(errors), errors=errors, data=candidate)

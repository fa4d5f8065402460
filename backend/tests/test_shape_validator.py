from __future__ import annotations

import unittest

from app.services.shapes import build_shape, validate_shape
from app.services.shapes.validator import (
    ONLINE_PAYMENTS_WITHOUT_PRICE,
    SHIPPING_WITHOUT_ONLINE_PAYMENTS,
    UNITS_WITHOUT_PRICE,
    shape_errors,
)
from app.utils.result import success


def _shape(**overrides) -> dict:
    return build_shape({"name": {"en": "Selling"}, **overrides})


class ShapeValidatorTestCase(unittest.TestCase):
    def test_consistent_shape_passes_unchanged(self):
        candidate = _shape(price_enabled=True, online_payments=True, shipping_enabled=True, units=["day"])
        res = validate_shape(candidate)
        self.assertTrue(res.success)
        self.assertEqual(res.data, candidate)

    def test_all_flags_off_is_valid(self):
        self.assertTrue(validate_shape(_shape()).success)

    def test_shipping_requires_online_payments(self):
        res = validate_shape(_shape(price_enabled=True, shipping_enabled=True))
        self.assertFalse(res.success)
        self.assertEqual(res.error_msg, SHIPPING_WITHOUT_ONLINE_PAYMENTS)
        self.assertEqual(res.errors, (SHIPPING_WITHOUT_ONLINE_PAYMENTS,))

    def test_online_payments_require_price(self):
        res = validate_shape(_shape(online_payments=True))
        self.assertFalse(res.success)
        self.assertEqual(res.error_msg, ONLINE_PAYMENTS_WITHOUT_PRICE)

    def test_units_require_price(self):
        res = validate_shape(_shape(units=[{"type": "hour", "enabled": True}]))
        self.assertFalse(res.success)
        self.assertEqual(res.error_msg, UNITS_WITHOUT_PRICE)

    def test_violations_are_collected_in_rule_order(self):
        candidate = {
            "shipping_enabled": True,
            "online_payments": False,
            "price_enabled": False,
            "units": [{"type": "kg"}],
        }
        res = validate_shape(candidate)
        self.assertFalse(res.success)
        self.assertEqual(
            res.error_msg,
            "Shipping can not be enabled without online payments, Price units can not be used without price field",
        )
        self.assertEqual(res.data, candidate)

    def test_online_payments_and_units_without_price(self):
        errors = shape_errors(
            {"shipping_enabled": True, "online_payments": True, "price_enabled": False, "units": [{"type": "day"}]}
        )
        self.assertEqual(errors, [ONLINE_PAYMENTS_WITHOUT_PRICE, UNITS_WITHOUT_PRICE])

    def test_fixing_one_rule_does_not_affect_the_others(self):
        broken = {"shipping_enabled": True, "online_payments": False, "price_enabled": False, "units": [{"type": "day"}]}
        self.assertEqual(len(shape_errors(broken)), 2)

        with_price = {**broken, "price_enabled": True}
        self.assertEqual(shape_errors(with_price), [SHIPPING_WITHOUT_ONLINE_PAYMENTS])

        without_shipping = {**broken, "shipping_enabled": False}
        self.assertEqual(shape_errors(without_shipping), [UNITS_WITHOUT_PRICE])

    def test_validate_is_pure(self):
        candidate = _shape(online_payments=True)
        snapshot = dict(candidate)
        validate_shape(candidate)
        validate_shape(candidate)
        self.assertEqual(candidate, snapshot)

    def test_maybe_drops_the_error(self):
        candidate = _shape(price_enabled=True)
        self.assertEqual(validate_shape(candidate).maybe(), candidate)
        self.assertIsNone(validate_shape(_shape(shipping_enabled=True)).maybe())

    def test_failure_short_circuits_and_then(self):
        calls = []

        def persist(shape):
            calls.append(shape)
            return success(shape)

        res = validate_shape(_shape(shipping_enabled=True)).and_then(persist)
        self.assertFalse(res.success)
        self.assertEqual(calls, [])

        ok = validate_shape(_shape(price_enabled=True)).and_then(persist)
        self.assertTrue(ok.success)
        self.assertEqual(len(calls), 1)


if __name__ == "__main__":
    unittest.main()

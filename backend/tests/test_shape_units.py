from __future__ import annotations

import unittest

from app.services.shapes import (
    Capabilities,
    ShapeSchemaError,
    ShapeTemplates,
    build_shape,
    expand_units,
    params_to_shape,
    parse_units,
    shape_to_locals,
    validate_shape,
)
from app.services.shapes.schema import PREDEFINED_UNIT_TYPES, pick_translation


class UnitExpansionTestCase(unittest.TestCase):
    def test_expand_lists_every_predefined_type(self):
        views = expand_units([{"type": "day", "enabled": True}, {"type": "week", "enabled": False}])
        self.assertEqual([v["type"] for v in views], list(PREDEFINED_UNIT_TYPES))
        enabled = {v["type"] for v in views if v["enabled"]}
        self.assertEqual(enabled, {"day"})
        self.assertEqual(views[0]["label"], "per piece")

    def test_custom_units_follow_predefined(self):
        views = expand_units(
            [{"type": "custom", "enabled": True, "translation_key": "unit.kg", "name": {"en": "per kg", "fi": "per kilo"}}],
            locale="fi",
        )
        self.assertEqual(len(views), len(PREDEFINED_UNIT_TYPES) + 1)
        custom = views[-1]
        self.assertEqual(custom["type"], "custom")
        self.assertTrue(custom["enabled"])
        self.assertEqual(custom["label"], "per kilo")
        self.assertEqual(custom["translation_key"], "unit.kg")

    def test_round_trip_canonical_units(self):
        canonical = [
            {"type": "hour", "enabled": True},
            {"type": "night", "enabled": True},
            {"type": "custom", "enabled": True, "translation_key": "unit.kg", "name": {"en": "per kg"}},
        ]
        self.assertEqual(parse_units(expand_units(canonical)), canonical)

    def test_disabled_custom_unit_stays_disabled(self):
        units = [
            {"type": "hour", "enabled": True},
            {"type": "custom", "enabled": False, "translation_key": "unit.kg", "name": {"en": "per kg"}},
        ]
        views = expand_units(units)
        self.assertFalse(views[-1]["enabled"])
        self.assertEqual(parse_units(views), [{"type": "hour", "enabled": True}])

    def test_round_trip_custom_unit_without_name(self):
        canonical = [{"type": "custom", "enabled": True, "translation_key": "unit.kg"}]
        self.assertEqual(parse_units(expand_units(canonical)), canonical)

    def test_round_trip_of_empty_units(self):
        self.assertEqual(parse_units(expand_units([])), [])

    def test_parse_list_of_types(self):
        self.assertEqual(
            parse_units(["day", " Week "]),
            [{"type": "day", "enabled": True}, {"type": "week", "enabled": True}],
        )

    def test_parse_checkbox_mapping(self):
        self.assertEqual(parse_units({"day": "1", "week": "0", "month": "on"}), [
            {"type": "day", "enabled": True},
            {"type": "month", "enabled": True},
        ])

    def test_parse_nothing_selected(self):
        self.assertEqual(parse_units(None), [])
        self.assertEqual(parse_units([]), [])
        self.assertEqual(parse_units({}), [])


class ShapeParamsTestCase(unittest.TestCase):
    def test_only_sent_keys_are_returned(self):
        shape = params_to_shape({"price_enabled": "true", "units": ["hour"]})
        self.assertEqual(shape, {"price_enabled": True, "units": [{"type": "hour", "enabled": True}]})

    def test_unknown_unit_type_is_rejected(self):
        with self.assertRaises(ShapeSchemaError):
            params_to_shape({"units": ["kg"]})

    def test_name_must_be_a_mapping(self):
        with self.assertRaises(ShapeSchemaError):
            params_to_shape({"name": "Selling"})

    def test_sort_priority_must_be_an_integer(self):
        with self.assertRaises(ShapeSchemaError):
            params_to_shape({"sort_priority": "first"})
        self.assertEqual(params_to_shape({"sort_priority": "3"}), {"sort_priority": 3})

    def test_build_shape_fills_defaults(self):
        shape = build_shape({"name": {"en": "Rent"}})
        self.assertEqual(shape["units"], [])
        self.assertFalse(shape["shipping_enabled"])
        self.assertFalse(shape["online_payments"])
        self.assertFalse(shape["price_enabled"])

    def test_shape_to_locals_expands_units(self):
        out = shape_to_locals({"name": {"en": "Rent"}, "price_enabled": True, "units": [{"type": "month"}]})
        self.assertEqual(len(out["units"]), len(PREDEFINED_UNIT_TYPES))
        self.assertEqual([u["type"] for u in out["units"] if u["enabled"]], ["month"])

    def test_pick_translation_falls_back(self):
        names = {"en": "Selling", "fi": ""}
        self.assertEqual(pick_translation(names, "fi"), "Selling")
        self.assertEqual(pick_translation(names, "sv", "en"), "Selling")
        self.assertEqual(pick_translation({}, "en"), "")


class ShapeTemplatesTestCase(unittest.TestCase):
    def test_label_key_list(self):
        keys = [t["key"] for t in ShapeTemplates(Capabilities()).label_key_list()]
        self.assertEqual(
            keys,
            ["selling_products", "renting_products", "offering_services", "giving_things_away", "requesting", "custom"],
        )

    def test_payments_need_preauthorize(self):
        locked = ShapeTemplates(Capabilities(preauthorize_available=False)).find("selling_products", ["en", "fi"])
        self.assertFalse(locked["online_payments"])
        self.assertFalse(locked["shipping_enabled"])
        self.assertTrue(locked["price_enabled"])
        self.assertEqual(locked["name"], {"en": "Selling products", "fi": "Tuotteiden myynti"})

        open_ = ShapeTemplates(Capabilities(preauthorize_available=True)).find("selling_products", ["en"])
        self.assertTrue(open_["online_payments"])
        self.assertTrue(open_["shipping_enabled"])

    def test_unknown_template(self):
        self.assertIsNone(ShapeTemplates(Capabilities()).find("auction", ["en"]))

    def test_every_template_is_a_valid_shape(self):
        for preauth in (False, True):
            templates = ShapeTemplates(Capabilities(preauthorize_available=preauth))
            for item in templates.label_key_list():
                shape = build_shape(templates.find(item["key"], ["en"]))
                self.assertTrue(validate_shape(shape).success, item["key"])


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import importlib
import unittest


class ImportsBootTestCase(unittest.TestCase):
    def test_import_create_app(self):
        module = importlib.import_module("app")
        create_app = getattr(module, "create_app", None)
        self.assertTrue(callable(create_app))

    def test_import_main_app(self):
        module = importlib.import_module("main")
        app = getattr(module, "app", None)
        self.assertIsNotNone(app)

    def test_import_segments(self):
        for name in ("segment_listing_shapes", "segment_feature_flags", "segment_homepage"):
            module = importlib.import_module(f"app.segments.{name}")
            self.assertIsNotNone(module)

    def test_blueprints_registered(self):
        app = importlib.import_module("main").app
        self.assertTrue({"listing_shapes_bp", "flags_bp", "homepage_bp"} <= set(app.blueprints))


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import json
import os
import time
import unittest
from datetime import datetime, timedelta

from app import create_app
from app.extensions import db
from app.models import Category, Community, Listing, ListingShape
from app.services.homepage_service import (
    listings_limit,
    more_than_one,
    price_range,
    select_shape,
    selected_view_type,
)


class HomepageHelpersTestCase(unittest.TestCase):
    def test_selected_view_type(self):
        self.assertEqual(selected_view_type("list", "map"), "list")
        self.assertEqual(selected_view_type("bogus", "map"), "map")
        self.assertEqual(selected_view_type(None, None), "grid")
        self.assertEqual(selected_view_type(None, "carousel"), "grid")

    def test_more_than_one(self):
        self.assertFalse(more_than_one([]))
        self.assertFalse(more_than_one([{"id": 1, "children": [{"id": 2, "children": []}]}]))
        self.assertTrue(more_than_one([{"id": 1, "children": []}, {"id": 2, "children": []}]))
        self.assertTrue(
            more_than_one([{"id": 1, "children": [{"id": 2, "children": []}, {"id": 3, "children": []}]}])
        )

    def test_price_range(self):
        community = Community(price_filter_min=0, price_filter_max=100000)
        self.assertIsNone(price_range(community, None, "20"))
        self.assertIsNone(price_range(community, "0", "1000"))
        self.assertEqual(price_range(community, "10", "20,5"), (1000, 2050))

    def test_select_shape_by_name_or_id(self):
        shapes = [{"id": 3, "name": {"en": "Selling", "fi": "Myynti"}}, {"id": 4, "name": {"en": "Renting"}}]
        self.assertEqual(select_shape(shapes, "myynti")["id"], 3)
        self.assertEqual(select_shape(shapes, "4")["id"], 4)
        self.assertIsNone(select_shape(shapes, "lending"))
        self.assertIsNone(select_shape(shapes, ""))

    def test_listings_limit(self):
        self.assertEqual(listings_limit("grid"), 24)
        self.assertEqual(listings_limit("map"), 100)


class HomepageApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._old_db_uri = os.environ.get("SQLALCHEMY_DATABASE_URI")
        os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        cls.app = create_app()
        cls.app.config.update(TESTING=True)
        with cls.app.app_context():
            db.create_all()
        cls.client = cls.app.test_client()

    @classmethod
    def tearDownClass(cls):
        if cls._old_db_uri is None:
            os.environ.pop("SQLALCHEMY_DATABASE_URI", None)
        else:
            os.environ["SQLALCHEMY_DATABASE_URI"] = cls._old_db_uri

    def _seed(self, *, flags: dict | None = None) -> dict:
        """Two roots (tools > drills, garden), two shapes and a handful of listings."""
        with self.app.app_context():
            community = Community(
                name=f"community-{time.time_ns()}",
                default_locale="en",
                locales_json='["en", "fi"]',
                show_price_filter=True,
                feature_flags_json=json.dumps(flags or {}),
            )
            db.session.add(community)
            db.session.commit()
            cid = int(community.id)

            tools = Category(community_id=cid, url="tools", name_json='{"en": "Tools"}', sort_priority=0)
            garden = Category(community_id=cid, url="garden", name_json='{"en": "Garden"}', sort_priority=1)
            db.session.add_all([tools, garden])
            db.session.flush()
            drills = Category(community_id=cid, parent_id=tools.id, url="drills", name_json='{"en": "Drills"}')
            db.session.add(drills)
            db.session.flush()

            selling = ListingShape(
                community_id=cid,
                name_tr_key=f"listing_shape.sell-{cid}",
                name_json='{"en": "Selling", "fi": "Myynti"}',
                sort_priority=0,
                price_enabled=True,
            )
            selling.categories = [tools, drills]
            renting = ListingShape(
                community_id=cid,
                name_tr_key=f"listing_shape.rent-{cid}",
                name_json='{"en": "Renting"}',
                sort_priority=1,
                price_enabled=True,
            )
            renting.categories = [garden]
            db.session.add_all([selling, renting])
            db.session.flush()

            now = datetime.utcnow()
            rows = {
                "drill": Listing(community_id=cid, title="Cordless drill", category_id=drills.id,
                                 listing_shape_id=selling.id, price_cents=1500),
                "hammer": Listing(community_id=cid, title="Hammer", category_id=tools.id,
                                  listing_shape_id=selling.id, price_cents=500),
                "mower": Listing(community_id=cid, title="Lawn mower", category_id=garden.id,
                                 listing_shape_id=renting.id, price_cents=3000),
                "closed": Listing(community_id=cid, title="Old saw", category_id=tools.id,
                                  listing_shape_id=selling.id, open=False),
                "expired": Listing(community_id=cid, title="Rake", category_id=garden.id,
                                   listing_shape_id=renting.id, valid_until=now - timedelta(days=1)),
            }
            db.session.add_all(rows.values())
            db.session.commit()
            return {
                "cid": cid,
                "tools": int(tools.id),
                "drills": int(drills.id),
                "selling": int(selling.id),
                "renting": int(renting.id),
                **{key: int(row.id) for key, row in rows.items()},
            }

    def _get(self, cid: int, query: str = "") -> dict:
        res = self.client.get(f"/api/communities/{cid}/homepage{query}")
        self.assertEqual(res.status_code, 200)
        return res.get_json(force=True) or {}

    @staticmethod
    def _ids(body: dict) -> set[int]:
        return {item["id"] for item in (body.get("listings") or {}).get("items") or []}

    def test_lists_open_listings(self):
        seeded = self._seed()
        body = self._get(seeded["cid"])
        self.assertEqual(body.get("view_type"), "grid")
        self.assertEqual(self._ids(body), {seeded["drill"], seeded["hammer"], seeded["mower"]})
        self.assertEqual([s["name"] for s in body.get("shapes") or []], ["Selling", "Renting"])
        self.assertTrue(body.get("transaction_type_menu_enabled"))
        self.assertTrue(body.get("show_categories"))
        self.assertTrue(body.get("category_menu_enabled"))
        self.assertEqual(body["listings"]["per_page"], 24)
        self.assertEqual(body["listings"]["total"], 3)

    def test_category_tree_carries_shapes(self):
        seeded = self._seed()
        body = self._get(seeded["cid"], "?category=drills")
        tree = body.get("category_tree") or []
        self.assertEqual([node["url"] for node in tree], ["tools", "garden"])
        tools = tree[0]
        self.assertEqual([s["name"] for s in tools["listing_shapes"]], ["Selling"])
        self.assertTrue(tools["open"])
        self.assertTrue(tools["children"][0]["open"])
        self.assertFalse(tree[1]["open"])
        self.assertEqual(body.get("selected_category"), seeded["drills"])

    def test_filter_by_shape_name_and_alias(self):
        seeded = self._seed()
        body = self._get(seeded["cid"], "?transaction_type=myynti&locale=fi")
        self.assertEqual(body.get("selected_shape"), seeded["selling"])
        self.assertEqual(self._ids(body), {seeded["drill"], seeded["hammer"]})
        self.assertEqual(body["shapes"][0]["name"], "Myynti")

        legacy = self._get(seeded["cid"], f"?share_type={seeded['renting']}")
        self.assertEqual(self._ids(legacy), {seeded["mower"]})

    def test_filter_by_category_includes_descendants(self):
        seeded = self._seed()
        body = self._get(seeded["cid"], "?category=tools")
        self.assertEqual(self._ids(body), {seeded["drill"], seeded["hammer"]})

    def test_price_and_text_filters(self):
        seeded = self._seed()
        self.assertEqual(self._ids(self._get(seeded["cid"], "?price_min=10&price_max=20")), {seeded["drill"]})
        self.assertEqual(self._ids(self._get(seeded["cid"], "?q=mower")), {seeded["mower"]})

    def test_map_view_is_flag_gated(self):
        seeded = self._seed()
        body = self._get(seeded["cid"], "?view=map")
        self.assertEqual(body.get("view_type"), "map")
        self.assertEqual(body["listings"]["per_page"], 100)

        hidden = self._seed(flags={"homepage_map_view": False})
        body = self._get(hidden["cid"], "?view=map")
        self.assertEqual(body.get("view_type"), "grid")

    def test_unknown_community(self):
        res = self.client.get("/api/communities/424242/homepage")
        self.assertEqual(res.status_code, 404)


if __name__ == "__main__":
    unittest.main()

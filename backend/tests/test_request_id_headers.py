from __future__ import annotations

import json
import os
import unittest
import uuid

from app import create_app
from app.extensions import db
from app.models import Community


class RequestIdHeadersTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._old_db_uri = os.environ.get("SQLALCHEMY_DATABASE_URI")
        os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        cls.app = create_app()
        cls.app.config.update(TESTING=True)
        with cls.app.app_context():
            db.create_all()
            community = Community(name="request-id")
            db.session.add(community)
            db.session.commit()
            cls.community_id = int(community.id)
        cls.client = cls.app.test_client()

    @classmethod
    def tearDownClass(cls):
        if cls._old_db_uri is None:
            os.environ.pop("SQLALCHEMY_DATABASE_URI", None)
        else:
            os.environ["SQLALCHEMY_DATABASE_URI"] = cls._old_db_uri

    def test_generates_request_id_when_missing(self):
        res = self.client.get("/api/health")
        self.assertEqual(res.status_code, 200)
        rid = (res.headers.get("X-Request-ID") or "").strip()
        self.assertTrue(rid)
        uuid.UUID(rid)

    def test_echoes_request_id_when_provided(self):
        res = self.client.get(f"/api/communities/{self.community_id}/homepage", headers={"X-Request-ID": "rid-home-7"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.headers.get("X-Request-ID"), "rid-home-7")

    def test_error_payload_includes_trace_id(self):
        res = self.client.get("/api/communities/1/missing-page")
        self.assertEqual(res.status_code, 404)
        body = res.get_json(force=True)
        self.assertIsInstance(body, dict)
        self.assertEqual((body.get("trace_id") or "").strip(), (res.headers.get("X-Request-ID") or "").strip())

    def test_access_log_line_names_the_community(self):
        with self.assertLogs(self.app.logger, level="INFO") as captured:
            self.client.get(f"/api/communities/{self.community_id}/homepage", headers={"X-Request-ID": "rid-log-1"})
        lines = [json.loads(r.getMessage()) for r in captured.records if r.getMessage().startswith("{")]
        entry = next(line for line in lines if line.get("request_id") == "rid-log-1")
        self.assertEqual(entry["community_id"], self.community_id)
        self.assertEqual(entry["status"], 200)
        self.assertEqual(entry["path"], f"/api/communities/{self.community_id}/homepage")


if __name__ == "__main__":
    unittest.main()

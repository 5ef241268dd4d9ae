"""Tests for the web JSON API endpoints."""

import asyncio
from pathlib import Path

import pytest

from marketing_planner.config import Config
from marketing_planner.context import AppContext
from marketing_planner.persistence import MemoryPersistence
from marketing_planner.seed import DEMO_TEMPLATE_ID, seed_demo_data

try:
	from starlette.testclient import TestClient

	from marketing_planner.web.app import build_app

	HAS_WEB = True
except ImportError:
	HAS_WEB = False

pytestmark = pytest.mark.skipif(not HAS_WEB, reason="web extras not installed")


@pytest.fixture
def context() -> AppContext:
	"""A memory-backed context holding the demo data."""
	persistence = MemoryPersistence()
	asyncio.run(seed_demo_data(persistence))
	return AppContext.from_persistence(persistence)


@pytest.fixture
def client(context: AppContext) -> "TestClient":
	return TestClient(build_app(context=context))


def test_health(client: "TestClient"):
	resp = client.get("/api/health")
	assert resp.status_code == 200
	assert resp.json() == {"status": "ok"}


def test_templates_list(client: "TestClient"):
	resp = client.get("/api/templates")
	assert resp.status_code == 200
	assert [t["id"] for t in resp.json()] == [DEMO_TEMPLATE_ID]


def test_template_detail_ordered(client: "TestClient"):
	resp = client.get(f"/api/templates/{DEMO_TEMPLATE_ID}")
	assert resp.status_code == 200
	activities = resp.json()["activities"]
	assert [a["order_index"] for a in activities] == [0, 1, 2, 3, 4]


def test_template_not_found(client: "TestClient"):
	resp = client.get("/api/templates/nope")
	assert resp.status_code == 404


def test_reorder(client: "TestClient"):
	first = f"{DEMO_TEMPLATE_ID}-email"
	resp = client.post(
		f"/api/templates/{DEMO_TEMPLATE_ID}/reorder",
		json={"activity_ids": [first, "bogus"]},
	)
	assert resp.status_code == 200
	body = resp.json()
	assert body[0]["id"] == first
	assert [a["order_index"] for a in body] == [0, 1, 2, 3, 4]


def test_reorder_bad_body(client: "TestClient"):
	resp = client.post(f"/api/templates/{DEMO_TEMPLATE_ID}/reorder", json={"activity_ids": "a"})
	assert resp.status_code == 400


def test_toggle_fixed_keeps_template_flag(client: "TestClient"):
	fixed_one = f"{DEMO_TEMPLATE_ID}-landing"
	resp = client.post(f"/api/templates/{DEMO_TEMPLATE_ID}/activities/{fixed_one}/toggle-fixed")
	assert resp.status_code == 200
	body = resp.json()
	assert body["activity"]["fixed"] is False
	assert body["fixed_activities"] is True


def test_toggle_fixed_unknown_activity(client: "TestClient"):
	resp = client.post(f"/api/templates/{DEMO_TEMPLATE_ID}/activities/ghost/toggle-fixed")
	assert resp.status_code == 404


def test_set_template_flag(client: "TestClient"):
	resp = client.put(f"/api/templates/{DEMO_TEMPLATE_ID}/fixed-activities", json={"fixed": False})
	assert resp.status_code == 200
	assert resp.json()["fixed_activities"] is False

	resp = client.put(f"/api/templates/{DEMO_TEMPLATE_ID}/fixed-activities", json={"fixed": "no"})
	assert resp.status_code == 400


def test_plans_and_detail(client: "TestClient"):
	resp = client.get("/api/plans?company_id=company1")
	assert resp.status_code == 200
	assert {p["id"] for p in resp.json()} == {"plan1", "plan2"}

	resp = client.get("/api/plans/plan1")
	assert resp.status_code == 200
	assert [a["id"] for a in resp.json()["activities"]] == ["activity1"]

	assert client.get("/api/plans/ghost").status_code == 404


def test_lifecycle_actions(client: "TestClient"):
	resp = client.post("/api/plans/plan2/send-to-review", json={"reviewer_id": "rev"})
	assert resp.json()["status"] == "internal_review"

	resp = client.post("/api/plans/plan2/review", json={"status": "rejected", "comments": "redo"})
	body = resp.json()
	assert body["status"] == "draft"
	assert body["review_progress"] == 0
	assert body["review_comments"] == "redo"

	resp = client.post("/api/plans/plan2/review", json={"status": "maybe"})
	assert resp.status_code == 400

	resp = client.post("/api/plans/plan2/teleport")
	assert resp.status_code == 404


def test_activity_dependencies(client: "TestClient"):
	resp = client.get("/api/plans/plan1/activities/activity1/dependencies")
	assert resp.status_code == 200
	assert resp.json() == {"activity_id": "activity1", "ready": True, "blocking": []}

	resp = client.get("/api/plans/plan1/activities/ghost/dependencies")
	assert resp.status_code == 404


def test_build_app_requires_context_or_config():
	with pytest.raises(ValueError):
		build_app()


def test_lifespan_opens_context(tmp_path: Path):
	config = Config(config_dir=tmp_path / "c", data_dir=tmp_path / "d", backend="memory")
	with TestClient(build_app(config=config)) as client:
		resp = client.get("/api/plans")
		assert resp.status_code == 200
		assert resp.json() == []

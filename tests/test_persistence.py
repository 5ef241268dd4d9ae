"""Tests for the memory and SQLite persistence backends."""

from pathlib import Path

import pytest

from marketing_planner.errors import PersistenceError
from marketing_planner.persistence import MemoryPersistence, SqlitePersistence


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path: Path):
	if request.param == "memory":
		return MemoryPersistence()
	return SqlitePersistence(str(tmp_path / "planner.db"))


@pytest.mark.asyncio
async def test_insert_assigns_id_and_select_filters(backend):
	await backend.init()
	try:
		row = await backend.insert("plans", {"title": "A", "company_id": "acme"})
		await backend.insert("plans", {"id": "p2", "title": "B", "company_id": "other"})

		assert row["id"]
		rows = await backend.select("plans", {"company_id": "acme"})
		assert [r["title"] for r in rows] == ["A"]
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_filters_on_bool_and_none(backend):
	await backend.init()
	try:
		await backend.insert("activities", {"id": "x", "is_template": True, "thread_id": None})
		await backend.insert("activities", {"id": "y", "is_template": False, "thread_id": "t"})

		assert [r["id"] for r in await backend.select("activities", {"is_template": False})] == ["y"]
		assert [r["id"] for r in await backend.select("activities", {"thread_id": None})] == ["x"]
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_order_by_puts_missing_first(backend):
	await backend.init()
	try:
		await backend.insert("template_activities", {"id": "b", "order_index": 1})
		await backend.insert("template_activities", {"id": "none", "order_index": None})
		await backend.insert("template_activities", {"id": "a", "order_index": 0})

		rows = await backend.select("template_activities", order_by="order_index")
		assert [r["id"] for r in rows] == ["none", "a", "b"]

		rows = await backend.select("template_activities", order_by="order_index", ascending=False)
		assert [r["id"] for r in rows][0] == "b"
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_update_and_delete_counts(backend):
	await backend.init()
	try:
		await backend.insert("tasks", {"id": "t1", "plan_id": "p", "status": "todo"})
		await backend.insert("tasks", {"id": "t2", "plan_id": "p", "status": "todo"})

		assert await backend.update("tasks", {"plan_id": "p"}, {"status": "completed", "id": "ignored"}) == 2
		rows = await backend.select("tasks", order_by="id")
		assert [(r["id"], r["status"]) for r in rows] == [("t1", "completed"), ("t2", "completed")]

		assert await backend.delete("tasks", {"id": "t1"}) == 1
		assert [r["id"] for r in await backend.select("tasks")] == ["t2"]
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_upsert_merges_and_inserts(backend):
	await backend.init()
	try:
		await backend.insert("template_activities", {"id": "a", "title": "A", "order_index": 0})

		await backend.upsert("template_activities", [
			{"id": "a", "order_index": 3},
			{"id": "b", "title": "B", "order_index": 4},
		])

		rows = {r["id"]: r for r in await backend.select("template_activities")}
		assert rows["a"] == {"id": "a", "title": "A", "order_index": 3}
		assert rows["b"]["title"] == "B"
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_upsert_requires_ids(backend):
	await backend.init()
	try:
		await backend.insert("template_activities", {"id": "a", "order_index": 0})
		with pytest.raises(PersistenceError):
			await backend.upsert("template_activities", [{"id": "a", "order_index": 5}, {"order_index": 1}])

		rows = await backend.select("template_activities")
		assert rows[0]["order_index"] == 0
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_duplicate_insert_rejected(backend):
	await backend.init()
	try:
		await backend.insert("plans", {"id": "same"})
		with pytest.raises(PersistenceError):
			await backend.insert("plans", {"id": "same"})
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_unknown_table_rejected(backend):
	with pytest.raises(PersistenceError, match="Unknown table"):
		await backend.select("ideas")


@pytest.mark.asyncio
async def test_unserializable_row_rejected(backend):
	await backend.init()
	try:
		with pytest.raises(PersistenceError):
			await backend.insert("plans", {"id": "p", "when": object()})
	finally:
		await backend.close()


@pytest.mark.asyncio
async def test_memory_rows_are_copies():
	backend = MemoryPersistence()
	row = {"id": "p", "team_members": ["a"]}
	await backend.insert("plans", row)
	row["team_members"].append("b")

	selected = await backend.select("plans")
	selected[0]["team_members"].append("c")

	assert (await backend.select("plans"))[0]["team_members"] == ["a"]


@pytest.mark.asyncio
async def test_sqlite_survives_reopen(tmp_path: Path):
	db_path = str(tmp_path / "planner.db")
	first = SqlitePersistence(db_path)
	await first.init()
	await first.insert("templates", {"id": "t", "title": "Kept"})
	await first.close()

	second = SqlitePersistence(db_path)
	await second.init()
	try:
		assert (await second.select("templates"))[0]["title"] == "Kept"
	finally:
		await second.close()

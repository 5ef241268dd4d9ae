"""Shared test fixtures and helpers for marketing-planner tests."""

import asyncio
from typing import Optional

from marketing_planner.errors import PersistenceError
from marketing_planner.persistence import MemoryPersistence
from marketing_planner.plans import PlanActivity, Subtask
from marketing_planner.templates import (
	PlanTemplate,
	TemplateActivity,
	TemplateActivityCreate,
	TemplateCreate,
	TemplateStore,
)


class FailingPersistence(MemoryPersistence):
	"""Memory backend that raises on chosen operations.

	``fail_on`` holds operation names ("insert", "update", "upsert", ...),
	optionally narrowed to one table with ``fail_table``.
	"""

	def __init__(self):
		super().__init__()
		self.fail_on: set[str] = set()
		self.fail_table: Optional[str] = None
		self.calls: list[tuple[str, str]] = []

	def _maybe_fail(self, op: str, table: str) -> None:
		self.calls.append((op, table))
		if op in self.fail_on and (self.fail_table is None or self.fail_table == table):
			raise PersistenceError(f"{op} failed on {table}")

	async def select(self, table, filters=None, order_by=None, ascending=True):
		self._maybe_fail("select", table)
		return await super().select(table, filters, order_by, ascending)

	async def insert(self, table, row):
		self._maybe_fail("insert", table)
		return await super().insert(table, row)

	async def update(self, table, filters, patch):
		self._maybe_fail("update", table)
		return await super().update(table, filters, patch)

	async def delete(self, table, filters):
		self._maybe_fail("delete", table)
		return await super().delete(table, filters)

	async def upsert(self, table, rows):
		self._maybe_fail("upsert", table)
		return await super().upsert(table, rows)


class GatedPersistence(MemoryPersistence):
	"""Memory backend that parks one chosen write until the test releases it.

	``hold("update", "plans")`` makes the next update on ``plans`` wait after
	setting ``entered``; ``release()`` lets it apply. Later calls pass straight
	through, so other operations can run while the held one is parked.
	"""

	def __init__(self):
		super().__init__()
		self._gate: Optional[tuple[str, str]] = None
		self.entered = asyncio.Event()
		self._released = asyncio.Event()

	def hold(self, op: str, table: str) -> None:
		self._gate = (op, table)
		self.entered.clear()
		self._released.clear()

	def release(self) -> None:
		self._released.set()

	async def _wait(self, op: str, table: str) -> None:
		if self._gate == (op, table):
			self._gate = None
			self.entered.set()
			await self._released.wait()

	async def insert(self, table, row):
		await self._wait("insert", table)
		return await super().insert(table, row)

	async def update(self, table, filters, patch):
		await self._wait("update", table)
		return await super().update(table, filters, patch)

	async def delete(self, table, filters):
		await self._wait("delete", table)
		return await super().delete(table, filters)

	async def upsert(self, table, rows):
		await self._wait("upsert", table)
		return await super().upsert(table, rows)


def make_activity(
	activity_id: str,
	template_id: str = "tpl-1",
	order_index: Optional[int] = None,
	fixed: bool = False,
	dependencies: Optional[list[str]] = None,
	duration: int = 3,
) -> TemplateActivity:
	return TemplateActivity(
		id=activity_id,
		template_id=template_id,
		title=f"Activity {activity_id}",
		order_index=order_index,
		fixed=fixed,
		dependencies=dependencies or [],
		duration=duration,
	)


def make_template(
	template_id: str = "tpl-1",
	fixed_activities: bool = False,
	activities: Optional[list[TemplateActivity]] = None,
) -> PlanTemplate:
	"""Create a template with three indexed activities unless told otherwise."""
	if activities is None:
		activities = [make_activity(f"a{i}", template_id, order_index=i) for i in range(3)]
	return PlanTemplate(
		id=template_id,
		title="Launch playbook",
		is_public=True,
		fixed_activities=fixed_activities,
		activities=activities,
	)


def make_plan_activity(
	activity_id: str,
	status: str = "not_started",
	dependencies: Optional[list[str]] = None,
	subtasks: Optional[list[Subtask]] = None,
	plan_id: str = "plan-1",
) -> PlanActivity:
	return PlanActivity(
		id=activity_id,
		plan_id=plan_id,
		title=f"Activity {activity_id}",
		status=status,
		dependencies=dependencies or [],
		subtasks=subtasks or [],
	)


async def store_with_template(
	persistence: MemoryPersistence,
	fixed_activities: bool = False,
	activity_titles: tuple[str, ...] = ("Research", "Write", "Publish"),
) -> tuple[TemplateStore, PlanTemplate]:
	"""A TemplateStore holding one public template with indexed activities."""
	store = TemplateStore(persistence)
	template = await store.create_template(TemplateCreate(
		title="Launch playbook", is_public=True, fixed_activities=fixed_activities,
	))
	for index, title in enumerate(activity_titles):
		await store.add_activity(template.id, TemplateActivityCreate(title=title, order_index=index))
	return store, store.get_template(template.id)

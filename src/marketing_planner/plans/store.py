"""
Plan Store - cached plans, tasks, documents and activities.

Features:
- Plan CRUD, optionally seeded from a template's activities
- Review/approval lifecycle transitions
- Task, document and activity CRUD, subtask updates
- Synchronous dependency checks over the cached activities

Mutations go to persistence first; the cache is replaced only on success.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from pydantic import BaseModel

from ..activity_types import default_subtasks, get_activity_type_info
from ..errors import NotFoundError
from ..persistence import Persistence
from ..state import StoreState, new_id, now_iso
from ..templates.models import PlanTemplate
from . import dependencies, lifecycle
from .models import (
	ActivityStatus,
	Document,
	DocumentCreate,
	MarketingPlan,
	MarketingTask,
	PlanActivity,
	PlanActivityCreate,
	PlanCreate,
	ReviewAction,
	Subtask,
	TaskCreate,
)

logger = logging.getLogger(__name__)

PLANS = "plans"
TASKS = "tasks"
DOCUMENTS = "documents"
ACTIVITIES = "activities"

# Lead time for activities created from a bare type
DEFAULT_ACTIVITY_DAYS = 14


def activities_from_template(
	template: PlanTemplate,
	plan_id: str,
	start: Optional[datetime] = None,
) -> list[PlanActivity]:
	"""
	Copy a template's activities into plan activities.

	Copies get fresh ids, ``fixed`` is always cleared, and dependency ids are
	rewritten to point at the copies. Each copy starts with its type's
	default subtasks and spans ``duration`` days from ``start``.
	"""
	start = start or datetime.now()
	timestamp = start.isoformat()
	source = template.ordered_activities()
	id_map = {a.id: new_id() for a in source}

	copies = []
	for activity in source:
		end = (start + timedelta(days=activity.duration)).isoformat()
		copies.append(PlanActivity(
			id=id_map[activity.id],
			plan_id=plan_id,
			title=activity.title,
			description=activity.description,
			activity_type=activity.activity_type,
			duration=activity.duration,
			order_index=activity.order_index,
			dependencies=[id_map.get(dep, dep) for dep in activity.dependencies],
			has_form=activity.has_form,
			subtasks=[Subtask(**s) for s in default_subtasks(activity.activity_type)],
			start_date=timestamp,
			end_date=end,
			publish_date=end,
			fixed=False,
			created_at=timestamp,
			updated_at=timestamp,
		))
	return copies


def _merge(model: BaseModel, updates: dict[str, Any], **extra: Any):
	"""Validated copy of ``model`` with ``updates`` applied."""
	return type(model).model_validate({**model.model_dump(), **updates, **extra})


def _changes(updated: BaseModel, keys) -> dict[str, Any]:
	"""The validated values of ``keys`` on ``updated``; unknown keys are dropped."""
	return {k: getattr(updated, k) for k in keys if k in type(updated).model_fields and k != "id"}


def _patched(items: list, item_id: str, fields: dict[str, Any]) -> list:
	"""Copy of ``items`` with ``fields`` applied to the entry whose id matches."""
	return [i.model_copy(update=fields) if i.id == item_id else i for i in items]


class PlanStore(StoreState):
	"""
	In-memory cache of marketing plans and their contents.

	Usage:
		store = PlanStore(persistence)
		await store.fetch_plans(company_id="acme")

		await store.send_to_review(plan_id, reviewer_id="u2")
		await store.review_plan(plan_id, ReviewAction(status="approved"))

		store.check_activity_dependencies(activity_id)
	"""

	def __init__(self, persistence: Persistence):
		super().__init__()
		self.persistence = persistence
		self.plans: list[MarketingPlan] = []
		self.tasks: list[MarketingTask] = []
		self.documents: list[Document] = []
		self.activities: list[PlanActivity] = []
		self.activity_templates: list[PlanActivity] = []
		self.visible_calendars: list[str] = []
		self._current_id: Optional[str] = None

	# -- lookups ------------------------------------------------------------

	@property
	def current_plan(self) -> Optional[MarketingPlan]:
		return self.get_plan(self._current_id) if self._current_id else None

	def set_current_plan(self, plan_id: Optional[str]) -> None:
		self._current_id = plan_id

	def get_plan(self, plan_id: str) -> Optional[MarketingPlan]:
		return next((p for p in self.plans if p.id == plan_id), None)

	def get_activity(self, activity_id: str) -> Optional[PlanActivity]:
		return next((a for a in self.activities if a.id == activity_id), None)

	def plan_activities(self, plan_id: str) -> list[PlanActivity]:
		"""Cached activities of one plan, by order_index then creation."""
		return sorted(
			[a for a in self.activities if a.plan_id == plan_id],
			key=lambda a: (a.order_index is None, a.order_index or 0, a.created_at),
		)

	# -- plans --------------------------------------------------------------

	async def fetch_plans(self, company_id: Optional[str] = None) -> None:
		async with self._operation("fetching plans"):
			filters = {"company_id": company_id} if company_id else None
			rows = await self.persistence.select(PLANS, filters, order_by="created_at")
			self.plans = [MarketingPlan(**row) for row in rows]
			logger.info(f"Loaded {len(self.plans)} plans (company={company_id})")

	async def create_plan(
		self,
		fields: PlanCreate,
		template: Optional[PlanTemplate] = None,
	) -> Optional[MarketingPlan]:
		"""
		Create a plan, copying a template's activities when one is given.

		Copied activities never keep the template's fixed flag.
		"""
		async with self._operation("creating plan"):
			timestamp = now_iso()
			plan = MarketingPlan(
				id=new_id(),
				created_at=timestamp,
				updated_at=timestamp,
				last_activity_at=timestamp,
				template_id=template.id if template else None,
				**fields.model_dump(),
			)
			row = await self.persistence.insert(PLANS, plan.model_dump(mode="json"))
			created = MarketingPlan(**row)

			copies = activities_from_template(template, created.id) if template else []
			for activity in copies:
				await self.persistence.insert(ACTIVITIES, activity.model_dump(mode="json"))

			self.activities = [*self.activities, *copies]
			self.plans = [*self.plans, created]
			logger.info(f"Created plan {created.id} with {len(copies)} activities")
			return created
		return None

	async def update_plan(self, plan_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating plan"):
			timestamp = now_iso()
			patch = {
				**{k: v for k, v in updates.items() if k != "id"},
				"updated_at": timestamp,
				"last_activity_at": timestamp,
			}
			await self._patch_plan(plan_id, patch)

	async def delete_plan(self, plan_id: str) -> None:
		async with self._operation("deleting plan"):
			await self.persistence.delete(PLANS, {"id": plan_id})
			self.plans = [p for p in self.plans if p.id != plan_id]
			if self._current_id == plan_id:
				self._current_id = None

	async def _patch_plan(self, plan_id: str, patch: dict[str, Any]) -> None:
		"""Write a patch, then apply it to the matching cached plan (if cached)."""
		plan = self.get_plan(plan_id)
		fields: dict[str, Any] = {}
		if plan is not None:
			updated = _merge(plan, patch)
			fields = _changes(updated, patch)
			patch = updated.model_dump(mode="json", include=set(patch))
		await self.persistence.update(PLANS, {"id": plan_id}, patch)
		if fields:
			self.plans = _patched(self.plans, plan_id, fields)

	# -- lifecycle ----------------------------------------------------------

	async def send_to_review(self, plan_id: str, reviewer_id: str) -> None:
		async with self._operation("sending plan to review"):
			await self._patch_plan(plan_id, lifecycle.send_to_review(reviewer_id))

	async def review_plan(self, plan_id: str, action: ReviewAction) -> None:
		async with self._operation("reviewing plan"):
			await self._patch_plan(plan_id, lifecycle.review(action, now_iso()))
			logger.info(f"Plan {plan_id} review: {action.status.value}")

	async def send_to_approval(self, plan_id: str, approver_id: str) -> None:
		async with self._operation("sending plan to approval"):
			await self._patch_plan(plan_id, lifecycle.send_to_approval(approver_id))

	async def approve_plan(self, plan_id: str, action: ReviewAction) -> None:
		async with self._operation("approving plan"):
			await self._patch_plan(plan_id, lifecycle.approve(action, now_iso()))
			logger.info(f"Plan {plan_id} approval: {action.status.value}")

	async def activate_plan(self, plan_id: str) -> None:
		async with self._operation("activating plan"):
			await self._patch_plan(plan_id, lifecycle.activate())

	async def complete_plan(self, plan_id: str) -> None:
		async with self._operation("completing plan"):
			await self._patch_plan(plan_id, lifecycle.complete())

	# -- tasks --------------------------------------------------------------

	async def fetch_tasks(self, plan_id: str) -> None:
		async with self._operation("fetching tasks"):
			rows = await self.persistence.select(TASKS, {"plan_id": plan_id}, order_by="created_at")
			self.tasks = [MarketingTask(**row) for row in rows]

	async def create_task(self, fields: TaskCreate) -> Optional[MarketingTask]:
		async with self._operation("creating task"):
			timestamp = now_iso()
			task = MarketingTask(id=new_id(), created_at=timestamp, updated_at=timestamp, **fields.model_dump())
			row = await self.persistence.insert(TASKS, task.model_dump(mode="json"))
			created = MarketingTask(**row)
			self.tasks = [*self.tasks, created]
			return created
		return None

	async def update_task(self, task_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating task"):
			task = next((t for t in self.tasks if t.id == task_id), None)
			if task is None:
				raise NotFoundError("Task not found")
			updated = _merge(task, updates, updated_at=now_iso())
			fields = _changes(updated, {*updates.keys(), "updated_at"})
			await self.persistence.update(TASKS, {"id": task_id}, updated.model_dump(mode="json", include=set(fields)))
			self.tasks = _patched(self.tasks, task_id, fields)

	async def delete_task(self, task_id: str) -> None:
		async with self._operation("deleting task"):
			await self.persistence.delete(TASKS, {"id": task_id})
			self.tasks = [t for t in self.tasks if t.id != task_id]

	# -- documents ----------------------------------------------------------

	async def fetch_documents(self, plan_id: str) -> None:
		async with self._operation("fetching documents"):
			rows = await self.persistence.select(DOCUMENTS, {"plan_id": plan_id}, order_by="created_at")
			self.documents = [Document(**row) for row in rows]

	async def create_document(self, fields: DocumentCreate) -> Optional[Document]:
		async with self._operation("creating document"):
			timestamp = now_iso()
			document = Document(id=new_id(), created_at=timestamp, updated_at=timestamp, **fields.model_dump())
			row = await self.persistence.insert(DOCUMENTS, document.model_dump(mode="json"))
			created = Document(**row)
			self.documents = [*self.documents, created]
			return created
		return None

	async def update_document(self, document_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating document"):
			document = next((d for d in self.documents if d.id == document_id), None)
			if document is None:
				raise NotFoundError("Document not found")
			updated = _merge(document, updates, updated_at=now_iso())
			fields = _changes(updated, {*updates.keys(), "updated_at"})
			await self.persistence.update(
				DOCUMENTS, {"id": document_id},
				updated.model_dump(mode="json", include=set(fields)),
			)
			self.documents = _patched(self.documents, document_id, fields)

	async def delete_document(self, document_id: str) -> None:
		async with self._operation("deleting document"):
			await self.persistence.delete(DOCUMENTS, {"id": document_id})
			self.documents = [d for d in self.documents if d.id != document_id]

	# -- activities ---------------------------------------------------------

	async def fetch_activities(self, plan_id: str) -> None:
		async with self._operation("fetching activities"):
			rows = await self.persistence.select(
				ACTIVITIES, {"plan_id": plan_id, "is_template": False}, order_by="order_index",
			)
			self.activities = [PlanActivity(**row) for row in rows]

	async def fetch_activity_templates(self) -> None:
		async with self._operation("fetching activity templates"):
			rows = await self.persistence.select(ACTIVITIES, {"is_template": True}, order_by="created_at")
			self.activity_templates = [PlanActivity(**row) for row in rows]

	async def _insert_activity(self, activity: PlanActivity) -> PlanActivity:
		row = await self.persistence.insert(ACTIVITIES, activity.model_dump(mode="json"))
		return PlanActivity(**row)

	async def create_activity(
		self,
		fields: PlanActivityCreate,
		raise_errors: bool = False,
	) -> Optional[PlanActivity]:
		async with self._operation("creating activity", raise_errors=raise_errors):
			timestamp = now_iso()
			created = await self._insert_activity(PlanActivity(
				id=new_id(), created_at=timestamp, updated_at=timestamp, **fields.model_dump(),
			))
			self.activities = [*self.activities, created]
			return created
		return None

	async def create_activity_from_type(self, activity_type: str, plan_id: str) -> Optional[PlanActivity]:
		"""New activity pre-filled from the type catalog, due in two weeks."""
		async with self._operation("creating activity from type"):
			info = get_activity_type_info(activity_type)
			start = datetime.now()
			due = (start + timedelta(days=DEFAULT_ACTIVITY_DAYS)).isoformat()
			created = await self._insert_activity(PlanActivity(
				id=new_id(),
				plan_id=plan_id,
				title=f"New {info.name}",
				description=info.description,
				activity_type=info.id,
				status=ActivityStatus.NOT_STARTED,
				duration=DEFAULT_ACTIVITY_DAYS,
				publish_date=due,
				start_date=start.isoformat(),
				end_date=due,
				has_form=info.includes_form,
				subtasks=[Subtask(**s) for s in default_subtasks(info.id)],
				created_at=start.isoformat(),
				updated_at=start.isoformat(),
			))
			self.activities = [*self.activities, created]
			return created
		return None

	async def create_activity_template(self, fields: PlanActivityCreate) -> Optional[PlanActivity]:
		async with self._operation("creating activity template"):
			timestamp = now_iso()
			data = {**fields.model_dump(), "is_template": True}
			created = await self._insert_activity(PlanActivity(
				id=new_id(), created_at=timestamp, updated_at=timestamp, **data,
			))
			self.activity_templates = [*self.activity_templates, created]
			return created
		return None

	async def update_activity(
		self,
		activity_id: str,
		updates: dict[str, Any],
		raise_errors: bool = False,
	) -> None:
		async with self._operation("updating activity", raise_errors=raise_errors):
			activity = self.get_activity(activity_id)
			if activity is None:
				raise NotFoundError("Activity not found")
			updated = _merge(activity, updates, updated_at=now_iso())
			fields = _changes(updated, {*updates.keys(), "updated_at"})
			await self.persistence.update(
				ACTIVITIES, {"id": activity_id},
				updated.model_dump(mode="json", include=set(fields)),
			)
			self.activities = _patched(self.activities, activity_id, fields)

	async def update_subtask(self, activity_id: str, subtask_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating subtask"):
			activity = self.get_activity(activity_id)
			if activity is None:
				raise NotFoundError("Activity not found")
			subtasks = [
				_merge(s, updates, id=s.id) if s.id == subtask_id else s
				for s in activity.subtasks
			]
			fields = {"subtasks": subtasks, "updated_at": now_iso()}
			updated = activity.model_copy(update=fields)
			await self.persistence.update(
				ACTIVITIES, {"id": activity_id},
				updated.model_dump(mode="json", include=set(fields)),
			)
			self.activities = _patched(self.activities, activity_id, fields)

	async def delete_activity(self, activity_id: str) -> None:
		async with self._operation("deleting activity"):
			await self.persistence.delete(ACTIVITIES, {"id": activity_id})
			self.activities = [a for a in self.activities if a.id != activity_id]

	# -- calendar -----------------------------------------------------------

	def toggle_calendar_visibility(self, plan_id: str) -> None:
		if plan_id in self.visible_calendars:
			self.visible_calendars = [p for p in self.visible_calendars if p != plan_id]
		else:
			self.visible_calendars = [*self.visible_calendars, plan_id]

	def is_calendar_visible(self, plan_id: str) -> bool:
		return plan_id in self.visible_calendars

	# -- dependencies -------------------------------------------------------

	def check_activity_dependencies(self, activity_id: str) -> bool:
		return dependencies.check_activity_dependencies(self.activities, activity_id)

	def check_subtask_dependencies(self, activity_id: str, subtask_id: str) -> bool:
		return dependencies.check_subtask_dependencies(self.activities, activity_id, subtask_id)

	def blocking_activities(self, activity_id: str) -> list[str]:
		return dependencies.blocking_activities(self.activities, activity_id)

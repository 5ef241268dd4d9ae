"""
Template Store - cached templates kept in step with persistence.

Features:
- Template CRUD with company/public visibility filtering
- Ordered activity lists with drag-and-drop style reordering
- Fixed-activity inheritance (snapshot on add, one-way propagation on toggle)

Every mutation writes to persistence first and only then replaces the cached
list, so a failed call leaves the cache as it was.
"""

import logging
from typing import Any, Optional

from ..errors import NotFoundError
from ..persistence import Persistence
from ..state import StoreState, new_id, now_iso
from . import rules
from .models import PlanTemplate, TemplateActivity, TemplateActivityCreate, TemplateCreate

logger = logging.getLogger(__name__)

TEMPLATES = "templates"
ACTIVITIES = "template_activities"


class TemplateStore(StoreState):
	"""
	In-memory cache of plan templates backed by a Persistence.

	Usage:
		store = TemplateStore(persistence)
		await store.fetch_templates(company_id="acme")

		template = await store.create_template(TemplateCreate(title="Launch"))
		await store.add_activity(template.id, TemplateActivityCreate(title="Blog post"))
		await store.reorder_activities(template.id, [a3, a1, a2])
	"""

	def __init__(self, persistence: Persistence):
		super().__init__()
		self.persistence = persistence
		self.templates: list[PlanTemplate] = []
		self._selected_id: Optional[str] = None

	# -- lookups ------------------------------------------------------------

	@property
	def selected_template(self) -> Optional[PlanTemplate]:
		if self._selected_id is None:
			return None
		return self.get_template(self._selected_id)

	def set_selected_template(self, template_id: Optional[str]) -> None:
		self._selected_id = template_id

	def get_template(self, template_id: str) -> Optional[PlanTemplate]:
		for template in self.templates:
			if template.id == template_id:
				return template
		return None

	def _require_template(self, template_id: str) -> PlanTemplate:
		template = self.get_template(template_id)
		if template is None:
			raise NotFoundError("Template not found")
		return template

	def _require_activity(self, template_id: str, activity_id: str) -> tuple[PlanTemplate, TemplateActivity]:
		template = self.get_template(template_id)
		activity = template.get_activity(activity_id) if template else None
		if template is None or activity is None:
			raise NotFoundError("Template or activity not found")
		return template, activity

	def _replace(self, template: PlanTemplate) -> None:
		"""Swap one cached template in a single assignment."""
		self.templates = [template if t.id == template.id else t for t in self.templates]

	def _patch_cached(self, template_id: str, fields: dict[str, Any]) -> None:
		"""Apply ``fields`` to the template as it is cached now, after the write returned."""
		current = self.get_template(template_id)
		if current is not None:
			self._replace(current.model_copy(update=fields))

	# -- templates ----------------------------------------------------------

	async def fetch_templates(self, company_id: Optional[str] = None) -> None:
		"""Load templates visible to ``company_id`` (public ones always are)."""
		async with self._operation("fetching templates"):
			rows = await self.persistence.select(TEMPLATES, order_by="created_at", ascending=False)

			loaded = []
			for row in rows:
				activity_rows = await self.persistence.select(
					ACTIVITIES, {"template_id": row["id"]}, order_by="order_index",
				)
				loaded.append(PlanTemplate(
					**{k: v for k, v in row.items() if k != "activities"},
					activities=[TemplateActivity(**a) for a in activity_rows],
				))

			self.templates = [
				t for t in loaded
				if t.is_public or (company_id and t.company_id == company_id)
			]
			logger.info(f"Loaded {len(self.templates)} templates (company={company_id})")

	async def create_template(self, fields: TemplateCreate) -> Optional[PlanTemplate]:
		async with self._operation("creating template"):
			timestamp = now_iso()
			template = PlanTemplate(
				id=new_id(),
				created_at=timestamp,
				updated_at=timestamp,
				**fields.model_dump(),
			)
			row = await self.persistence.insert(TEMPLATES, template.to_row())
			created = PlanTemplate(**row, activities=[])
			self.templates = [*self.templates, created]
			logger.info(f"Created template {created.id}")
			return created
		return None

	async def update_template(self, template_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating template"):
			updates = {k: v for k, v in updates.items() if k not in ("id", "activities")}
			timestamp = now_iso()
			template = self._require_template(template_id)
			updated = PlanTemplate.model_validate({
				**template.model_dump(), **updates, "updated_at": timestamp,
			})
			fields = {k: getattr(updated, k) for k in updates if k in PlanTemplate.model_fields}
			fields["updated_at"] = timestamp
			patch = updated.model_dump(mode="json", include=set(fields))
			await self.persistence.update(TEMPLATES, {"id": template_id}, patch)
			self._patch_cached(template_id, fields)

	async def delete_template(self, template_id: str) -> None:
		"""Delete a template and, with it, all of its activities."""
		async with self._operation("deleting template"):
			await self.persistence.delete(ACTIVITIES, {"template_id": template_id})
			await self.persistence.delete(TEMPLATES, {"id": template_id})
			self.templates = [t for t in self.templates if t.id != template_id]
			if self._selected_id == template_id:
				self._selected_id = None
			logger.info(f"Deleted template {template_id}")

	async def set_template_fixed_activities(self, template_id: str, fixed: bool) -> None:
		"""Set the template-level flag. Existing activities are left as they are."""
		async with self._operation("updating template fixed activities"):
			await self._write_template_fixed(template_id, fixed)

	async def _write_template_fixed(self, template_id: str, fixed: bool) -> None:
		self._require_template(template_id)
		fields = {"fixed_activities": fixed, "updated_at": now_iso()}
		await self.persistence.update(TEMPLATES, {"id": template_id}, fields)
		self._patch_cached(template_id, fields)

	# -- activities ---------------------------------------------------------

	async def add_activity(
		self,
		template_id: str,
		fields: TemplateActivityCreate,
		raise_errors: bool = False,
	) -> Optional[TemplateActivity]:
		"""
		Append an activity to a template.

		The new activity's ``fixed`` copies the template's ``fixed_activities``
		at this moment. ``order_index`` is whatever the caller passed; no
		trailing index is assigned here.
		"""
		async with self._operation("adding activity", raise_errors=raise_errors):
			template = self._require_template(template_id)
			timestamp = now_iso()
			activity = TemplateActivity(
				id=new_id(),
				template_id=template_id,
				fixed=rules.inherited_fixed(template),
				created_at=timestamp,
				updated_at=timestamp,
				**fields.model_dump(),
			)
			row = await self.persistence.insert(ACTIVITIES, activity.model_dump(mode="json"))
			created = TemplateActivity(**row)

			# Re-read: the template may have changed while the insert was in flight
			current = self._require_template(template_id)
			self._replace(current.model_copy(update={"activities": [*current.activities, created]}))
			return created
		return None

	async def update_activity(
		self,
		template_id: str,
		activity_id: str,
		updates: dict[str, Any],
		raise_errors: bool = False,
	) -> None:
		async with self._operation("updating activity", raise_errors=raise_errors):
			await self._write_activity(template_id, activity_id, updates)

	async def _write_activity(self, template_id: str, activity_id: str, updates: dict[str, Any]) -> None:
		updates = {k: v for k, v in updates.items() if k not in ("id", "template_id")}
		_, activity = self._require_activity(template_id, activity_id)
		timestamp = now_iso()
		updated = TemplateActivity.model_validate({
			**activity.model_dump(), **updates, "updated_at": timestamp,
		})
		keys = {k for k in updates if k in TemplateActivity.model_fields} | {"updated_at"}
		patch = updated.model_dump(mode="json", include=keys)
		await self.persistence.update(ACTIVITIES, {"id": activity_id, "template_id": template_id}, patch)

		fields = {k: getattr(updated, k) for k in keys}
		current = self._require_template(template_id)
		self._replace(current.model_copy(update={
			"activities": [a.model_copy(update=fields) if a.id == activity_id else a for a in current.activities],
		}))

	async def delete_activity(self, template_id: str, activity_id: str) -> None:
		async with self._operation("deleting activity"):
			await self.persistence.delete(ACTIVITIES, {"id": activity_id, "template_id": template_id})
			template = self.get_template(template_id)
			if template is not None:
				self._replace(template.model_copy(update={
					"activities": [a for a in template.activities if a.id != activity_id],
				}))

	async def reorder_activities(self, template_id: str, activity_ids: list[str]) -> None:
		"""
		Put a template's activities in the given order.

		Each resolved activity gets ``order_index`` equal to its position.
		Unknown ids are ignored. The new indices are written in one upsert and
		the cached list is swapped in one assignment.
		"""
		async with self._operation("reordering activities"):
			template = self._require_template(template_id)
			ordered = rules.reorder(template.activities, activity_ids, now_iso())

			await self.persistence.upsert(ACTIVITIES, [
				{"id": a.id, "order_index": a.order_index, "updated_at": a.updated_at}
				for a in ordered
			])

			# Activities added or removed during the upsert are kept or dropped as cached now
			current = self._require_template(template_id)
			live = {a.id: a for a in current.activities}
			placed = [
				live[a.id].model_copy(update={"order_index": a.order_index, "updated_at": a.updated_at})
				for a in ordered if a.id in live
			]
			placed_ids = {a.id for a in ordered}
			added = [a for a in current.activities if a.id not in placed_ids]
			self._replace(current.model_copy(update={"activities": [*placed, *added]}))
			logger.debug(f"Reordered {len(ordered)} activities in template {template_id}")

	async def toggle_activity_fixed(self, template_id: str, activity_id: str) -> None:
		"""
		Flip an activity's fixed flag.

		Fixing an activity also switches the template flag on. That second
		write is a separate call; if it fails the activity keeps its new flag.
		"""
		async with self._operation("toggling activity fixed state"):
			template, activity = self._require_activity(template_id, activity_id)
			new_activity_fixed, new_template_fixed = rules.apply_fixed_toggle(template, activity)

			await self._write_activity(template_id, activity_id, {"fixed": new_activity_fixed})

			if new_template_fixed != template.fixed_activities:
				await self._write_template_fixed(template_id, new_template_fixed)

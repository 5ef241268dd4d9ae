"""
Idea Store - a company's backlog of marketing ideas.

Features:
- Idea CRUD scoped to one company
- Comments, attachments, references and tags kept on the idea row
- Moving an idea into a marketing plan

Nested collections are written as a whole column; the cache is patched only
after the write returns, on the idea as it is cached at that point.
"""

import logging
from typing import Any, Optional

from ..errors import NotFoundError
from ..persistence import Persistence
from ..state import StoreState, new_id, now_iso
from .models import (
	AttachmentCreate,
	Idea,
	IdeaAttachment,
	IdeaComment,
	IdeaCreate,
	IdeaReference,
	IdeaStatus,
	ReferenceCreate,
)

logger = logging.getLogger(__name__)

IDEAS = "ideas"


class IdeaStore(StoreState):
	"""
	In-memory cache of ideas backed by a Persistence.

	Usage:
		store = IdeaStore(persistence)
		await store.fetch_ideas(company_id)

		idea = await store.create_idea(IdeaCreate(title="AI trends post", company_id=company_id))
		await store.add_tag(idea.id, "ai")
		await store.add_to_marketing_plan(idea.id, plan_id)
	"""

	def __init__(self, persistence: Persistence):
		super().__init__()
		self.persistence = persistence
		self.ideas: list[Idea] = []
		self._selected_id: Optional[str] = None

	# -- lookups ------------------------------------------------------------

	@property
	def selected_idea(self) -> Optional[Idea]:
		return self.get_idea(self._selected_id) if self._selected_id else None

	def set_selected_idea(self, idea_id: Optional[str]) -> None:
		self._selected_id = idea_id

	def get_idea(self, idea_id: str) -> Optional[Idea]:
		return next((i for i in self.ideas if i.id == idea_id), None)

	def _require_idea(self, idea_id: str) -> Idea:
		idea = self.get_idea(idea_id)
		if idea is None:
			raise NotFoundError("Idea not found")
		return idea

	def _holder(self, collection: str, item_id: str, missing: str) -> Idea:
		"""The cached idea whose ``collection`` holds ``item_id``."""
		for idea in self.ideas:
			if any(item.id == item_id for item in getattr(idea, collection)):
				return idea
		raise NotFoundError(missing)

	async def _write(self, idea: Idea, fields: dict[str, Any]) -> None:
		"""Persist ``fields`` for one idea, then apply them to its current cached copy."""
		patch = idea.model_copy(update=fields).model_dump(mode="json", include=set(fields))
		await self.persistence.update(IDEAS, {"id": idea.id}, patch)
		self.ideas = [i.model_copy(update=fields) if i.id == idea.id else i for i in self.ideas]

	# -- ideas --------------------------------------------------------------

	async def fetch_ideas(self, company_id: str) -> None:
		async with self._operation("fetching ideas"):
			rows = await self.persistence.select(IDEAS, {"company_id": company_id}, order_by="created_at")
			self.ideas = [Idea(**row) for row in rows]
			logger.info(f"Loaded {len(self.ideas)} ideas (company={company_id})")

	async def create_idea(self, fields: IdeaCreate) -> Optional[Idea]:
		async with self._operation("creating idea"):
			timestamp = now_iso()
			idea = Idea(id=new_id(), created_at=timestamp, updated_at=timestamp, **fields.model_dump())
			row = await self.persistence.insert(IDEAS, idea.model_dump(mode="json"))
			created = Idea(**row)
			self.ideas = [*self.ideas, created]
			return created
		return None

	async def update_idea(self, idea_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating idea"):
			idea = self._require_idea(idea_id)
			updates = {k: v for k, v in updates.items() if k != "id" and k in Idea.model_fields}
			updated = Idea.model_validate({**idea.model_dump(), **updates, "updated_at": now_iso()})
			fields = {k: getattr(updated, k) for k in [*updates, "updated_at"]}
			await self._write(idea, fields)

	async def delete_idea(self, idea_id: str) -> None:
		async with self._operation("deleting idea"):
			await self.persistence.delete(IDEAS, {"id": idea_id})
			self.ideas = [i for i in self.ideas if i.id != idea_id]
			if self._selected_id == idea_id:
				self._selected_id = None

	async def add_to_marketing_plan(self, idea_id: str, plan_id: str) -> None:
		"""Mark an idea as taken into a plan."""
		async with self._operation("adding idea to plan"):
			idea = self._require_idea(idea_id)
			await self._write(idea, {"status": IdeaStatus.IN_PLAN, "plan_id": plan_id, "updated_at": now_iso()})
			logger.info(f"Idea {idea_id} added to plan {plan_id}")

	# -- comments -----------------------------------------------------------

	async def add_comment(self, idea_id: str, content: str, user_id: str) -> Optional[IdeaComment]:
		async with self._operation("adding comment", track_loading=False):
			idea = self._require_idea(idea_id)
			comment = IdeaComment(id=new_id(), idea_id=idea_id, user_id=user_id, content=content)
			await self._write(idea, {"comments": [*idea.comments, comment]})
			return comment
		return None

	async def update_comment(self, comment_id: str, content: str) -> None:
		async with self._operation("updating comment", track_loading=False):
			idea = self._holder("comments", comment_id, "Comment not found")
			comments = [
				c.model_copy(update={"content": content, "updated_at": now_iso()}) if c.id == comment_id else c
				for c in idea.comments
			]
			await self._write(idea, {"comments": comments})

	async def delete_comment(self, comment_id: str) -> None:
		async with self._operation("deleting comment", track_loading=False):
			idea = self._holder("comments", comment_id, "Comment not found")
			await self._write(idea, {"comments": [c for c in idea.comments if c.id != comment_id]})

	# -- attachments --------------------------------------------------------

	async def add_attachment(self, idea_id: str, fields: AttachmentCreate) -> Optional[IdeaAttachment]:
		async with self._operation("adding attachment", track_loading=False):
			idea = self._require_idea(idea_id)
			attachment = IdeaAttachment(id=new_id(), idea_id=idea_id, **fields.model_dump())
			await self._write(idea, {"attachments": [*idea.attachments, attachment]})
			return attachment
		return None

	async def delete_attachment(self, attachment_id: str) -> None:
		async with self._operation("deleting attachment", track_loading=False):
			idea = self._holder("attachments", attachment_id, "Attachment not found")
			await self._write(idea, {"attachments": [a for a in idea.attachments if a.id != attachment_id]})

	# -- references ---------------------------------------------------------

	async def add_reference(self, idea_id: str, fields: ReferenceCreate) -> Optional[IdeaReference]:
		async with self._operation("adding reference", track_loading=False):
			idea = self._require_idea(idea_id)
			reference = IdeaReference(id=new_id(), idea_id=idea_id, **fields.model_dump())
			await self._write(idea, {"references": [*idea.references, reference]})
			return reference
		return None

	async def delete_reference(self, reference_id: str) -> None:
		async with self._operation("deleting reference", track_loading=False):
			idea = self._holder("references", reference_id, "Reference not found")
			await self._write(idea, {"references": [r for r in idea.references if r.id != reference_id]})

	# -- tags ---------------------------------------------------------------

	async def add_tag(self, idea_id: str, tag: str) -> None:
		"""Add a tag; a tag already present is left alone."""
		async with self._operation("adding tag", track_loading=False):
			idea = self._require_idea(idea_id)
			if tag in idea.tags:
				return
			await self._write(idea, {"tags": [*idea.tags, tag]})

	async def remove_tag(self, idea_id: str, tag: str) -> None:
		async with self._operation("removing tag", track_loading=False):
			idea = self._require_idea(idea_id)
			await self._write(idea, {"tags": [t for t in idea.tags if t != tag]})

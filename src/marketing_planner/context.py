"""
App Context - the persistence backend and the stores that share it.

One context replaces process-wide store singletons; each CLI run, web app or
test builds its own.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import Config
from .errors import NotFoundError
from .ideas import IdeaStore
from .messages import Message, MessageStore
from .notifications import NotificationStore
from .persistence import Persistence, create_persistence
from .plans import MarketingPlan, PlanActivity, PlanCreate, PlanStore
from .templates import TemplateStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
	"""Persistence plus the template, plan, message, idea and notification stores."""
	persistence: Persistence
	templates: TemplateStore
	plans: PlanStore
	messages: MessageStore
	ideas: IdeaStore
	notifications: NotificationStore

	@classmethod
	def from_persistence(cls, persistence: Persistence) -> "AppContext":
		return cls(
			persistence=persistence,
			templates=TemplateStore(persistence),
			plans=PlanStore(persistence),
			messages=MessageStore(persistence),
			ideas=IdeaStore(persistence),
			notifications=NotificationStore(persistence),
		)

	@classmethod
	async def create(cls, config: Config) -> "AppContext":
		"""Build the configured backend, initialize it and wire the stores."""
		persistence = create_persistence(config)
		await persistence.init()
		logger.debug(f"Opened {config.backend} context")
		return cls.from_persistence(persistence)

	async def close(self) -> None:
		await self.persistence.close()

	async def __aenter__(self) -> "AppContext":
		return self

	async def __aexit__(self, exc_type, exc, tb) -> None:
		await self.close()

	async def create_plan(self, fields: PlanCreate, template_id: Optional[str] = None) -> Optional[MarketingPlan]:
		"""
		Create a plan, copying the activities of a cached template when named.

		An unknown template id records an error on the plan store and creates
		nothing.
		"""
		template = None
		if template_id is not None:
			template = self.templates.get_template(template_id)
			if template is None:
				async with self.plans._operation("creating plan"):
					raise NotFoundError("Template not found")
				return None
		return await self.plans.create_plan(fields, template)

	def linked_activities(self, message: Message) -> list[PlanActivity]:
		"""Cached plan activities a message refers to; unknown ids are skipped."""
		found = [self.plans.get_activity(activity_id) for activity_id in message.activity_ids]
		return [a for a in found if a is not None]

	async def add_idea_to_plan(self, idea_id: str, plan_id: str) -> None:
		"""
		Move an idea into a plan.

		The plan must exist; an unknown plan id records an error on the idea
		store and leaves the idea as it was.
		"""
		if self.plans.get_plan(plan_id) is None:
			await self.plans.fetch_plans()
		if self.plans.get_plan(plan_id) is None:
			async with self.ideas._operation("adding idea to plan"):
				raise NotFoundError("Plan not found")
			return
		await self.ideas.add_to_marketing_plan(idea_id, plan_id)


async def open_context(config: Config) -> AppContext:
	"""Open a context for ``config``; use it with ``async with``."""
	return await AppContext.create(config)

"""
Template Models - Pydantic schemas for reusable plan templates.

A template is a blueprint for a marketing plan: an ordered list of activities
that can be copied into a live plan. Templates are either public or scoped to
one company.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..activity_types import ActivityType
from ..state import now_iso


class TemplateActivity(BaseModel):
	"""One activity inside a template."""
	id: str = Field(description="Unique activity identifier")
	template_id: str = Field(description="Owning template")
	title: str = Field(description="Activity title")
	description: str = Field(default="")
	activity_type: ActivityType = Field(default=ActivityType.CUSTOM)
	duration: int = Field(default=1, ge=0, description="Duration in days")
	order_index: Optional[int] = Field(
		default=None,
		description="Position within the template; unset until the caller or a reorder assigns it",
	)
	dependencies: list[str] = Field(default_factory=list, description="Sibling activity IDs that must complete first")
	has_form: bool = Field(default=False)
	fixed: bool = Field(default=False, description="Content is immutable once copied into a plan")
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)


class TemplateActivityCreate(BaseModel):
	"""Caller-supplied fields for a new template activity."""
	title: str
	description: str = ""
	activity_type: ActivityType = ActivityType.CUSTOM
	duration: int = Field(default=1, ge=0)
	order_index: Optional[int] = None
	dependencies: list[str] = Field(default_factory=list)
	has_form: bool = False


class PlanTemplate(BaseModel):
	"""
	A reusable plan blueprint.

	``activities`` is loaded from its own relation and never written on the
	template row.
	"""
	id: str = Field(description="Unique template identifier")
	title: str = Field(description="Template title")
	description: str = Field(default="")
	strategy_overview: Optional[str] = Field(default=None)
	company_id: Optional[str] = Field(default=None, description="Owning company; None means a global template")
	is_public: bool = Field(default=False)
	created_by: str = Field(default="")
	fixed_activities: bool = Field(default=False, description="Template-level switch for fixed activities")
	activities: list[TemplateActivity] = Field(default_factory=list)
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)

	def to_row(self) -> dict:
		"""Row for the templates relation."""
		return self.model_dump(mode="json", exclude={"activities"})

	def get_activity(self, activity_id: str) -> Optional[TemplateActivity]:
		for activity in self.activities:
			if activity.id == activity_id:
				return activity
		return None

	def ordered_activities(self) -> list[TemplateActivity]:
		"""Activities by order_index; unindexed ones trail in insertion order."""
		return sorted(
			self.activities,
			key=lambda a: (a.order_index is None, a.order_index or 0),
		)

	def fixed_count(self) -> int:
		return sum(1 for a in self.activities if a.fixed)


class TemplateCreate(BaseModel):
	"""Caller-supplied fields for a new template."""
	title: str
	description: str = ""
	strategy_overview: Optional[str] = None
	company_id: Optional[str] = None
	is_public: bool = False
	created_by: str = ""
	fixed_activities: bool = False

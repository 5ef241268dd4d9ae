"""
Plan Models - Pydantic schemas for live marketing plans.

Defines plans with their review/approval lifecycle, plan activities with
subtasks, plain tasks and documents.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..activity_types import ActivityType
from ..state import now_iso


class PlanStatus(str, Enum):
	"""Lifecycle state of a plan."""
	DRAFT = "draft"
	INTERNAL_REVIEW = "internal_review"
	APPROVAL = "approval"
	APPROVED = "approved"
	ACTIVE = "active"
	COMPLETED = "completed"


class ReviewStatus(str, Enum):
	"""Outcome of a review or approval step."""
	PENDING = "pending"
	APPROVED = "approved"
	REJECTED = "rejected"


class ActivityStatus(str, Enum):
	NOT_STARTED = "not_started"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"
	CANCELLED = "cancelled"


class WorkStatus(str, Enum):
	"""Status of subtasks and plan tasks."""
	TODO = "todo"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"


class MarketingPlan(BaseModel):
	"""A live marketing plan."""
	id: str = Field(description="Unique plan identifier")
	title: str
	description: str = Field(default="")
	strategy_overview: Optional[str] = Field(default=None)
	owner_id: str = Field(default="")
	company_id: str = Field(default="")
	status: PlanStatus = Field(default=PlanStatus.DRAFT)
	team_members: list[str] = Field(default_factory=list)
	client_visible: bool = Field(default=True)

	# Review / approval
	reviewer_id: Optional[str] = Field(default=None)
	approver_id: Optional[str] = Field(default=None)
	review_status: Optional[ReviewStatus] = Field(default=None)
	approval_status: Optional[ReviewStatus] = Field(default=None)
	review_comments: Optional[str] = Field(default=None)
	approval_comments: Optional[str] = Field(default=None)
	review_date: Optional[str] = Field(default=None)
	approval_date: Optional[str] = Field(default=None)
	review_progress: int = Field(default=0, ge=0, le=100)
	approval_progress: int = Field(default=0, ge=0, le=100)
	last_reviewed_by: Optional[str] = Field(default=None)
	last_reviewed_at: Optional[str] = Field(default=None)

	template_id: Optional[str] = Field(default=None, description="Template the plan was created from")
	fixed_activities: bool = Field(default=False)

	# Timestamps
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)
	last_activity_at: str = Field(default_factory=now_iso)


class PlanCreate(BaseModel):
	"""Caller-supplied fields for a new plan."""
	title: str
	description: str = ""
	strategy_overview: Optional[str] = None
	owner_id: str = ""
	company_id: str = ""
	status: PlanStatus = PlanStatus.DRAFT
	team_members: list[str] = Field(default_factory=list)
	client_visible: bool = True


class ReviewAction(BaseModel):
	"""A reviewer's or approver's verdict."""
	status: ReviewStatus
	comments: Optional[str] = None


class Subtask(BaseModel):
	"""A step inside a plan activity."""
	id: str
	title: str
	description: Optional[str] = None
	status: WorkStatus = Field(default=WorkStatus.TODO)
	start_date: Optional[str] = None
	due_date: Optional[str] = None
	duration: Optional[int] = None
	assigned_to: Optional[str] = None
	dependencies: Optional[list[str]] = Field(default=None, description="Sibling subtask IDs")
	fixed: bool = False
	task_duration_hours: Optional[int] = None
	task_duration_minutes: Optional[int] = None
	calendar_synced: bool = False
	calendar_event_id: Optional[str] = None
	calendar_provider: Optional[str] = None


class PlanActivity(BaseModel):
	"""A unit of marketing work inside a plan."""
	id: str = Field(description="Unique activity identifier")
	plan_id: str
	title: str
	description: str = Field(default="")
	activity_type: ActivityType = Field(default=ActivityType.CUSTOM)
	status: ActivityStatus = Field(default=ActivityStatus.NOT_STARTED)
	duration: int = Field(default=1, ge=0, description="Duration in days")
	order_index: Optional[int] = None
	publish_date: Optional[str] = None
	start_date: Optional[str] = None
	end_date: Optional[str] = None
	assigned_to: str = Field(default="")
	dependencies: list[str] = Field(default_factory=list, description="Activity IDs that must complete first")
	has_form: bool = False
	budget: Optional[float] = None
	subtasks: list[Subtask] = Field(default_factory=list)
	is_template: bool = False
	client_visible: bool = True
	fixed: bool = False
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)

	def get_subtask(self, subtask_id: str) -> Optional[Subtask]:
		for subtask in self.subtasks:
			if subtask.id == subtask_id:
				return subtask
		return None

	def get_progress(self) -> dict:
		"""Subtask completion counts."""
		total = len(self.subtasks)
		completed = len([s for s in self.subtasks if s.status == WorkStatus.COMPLETED])
		return {
			"total_subtasks": total,
			"completed_subtasks": completed,
			"percent_complete": round(completed / total * 100, 1) if total > 0 else 0,
		}


class PlanActivityCreate(BaseModel):
	"""Caller-supplied fields for a new plan activity."""
	plan_id: str
	title: str
	description: str = ""
	activity_type: ActivityType = ActivityType.CUSTOM
	status: ActivityStatus = ActivityStatus.NOT_STARTED
	duration: int = Field(default=1, ge=0)
	order_index: Optional[int] = None
	publish_date: Optional[str] = None
	start_date: Optional[str] = None
	end_date: Optional[str] = None
	assigned_to: str = ""
	dependencies: list[str] = Field(default_factory=list)
	has_form: bool = False
	budget: Optional[float] = None
	subtasks: list[Subtask] = Field(default_factory=list)
	is_template: bool = False
	client_visible: bool = True


class MarketingTask(BaseModel):
	"""A plain to-do attached to a plan."""
	id: str
	plan_id: str
	title: str
	description: Optional[str] = None
	due_date: Optional[str] = None
	status: WorkStatus = Field(default=WorkStatus.TODO)
	assigned_to: Optional[str] = None
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)


class TaskCreate(BaseModel):
	plan_id: str
	title: str
	description: Optional[str] = None
	due_date: Optional[str] = None
	status: WorkStatus = WorkStatus.TODO
	assigned_to: Optional[str] = None


class Document(BaseModel):
	"""A markdown document attached to a plan."""
	id: str
	plan_id: str
	title: str
	content: str = Field(default="")
	created_by: str = Field(default="")
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)


class DocumentCreate(BaseModel):
	plan_id: str
	title: str
	content: str = ""
	created_by: str = ""

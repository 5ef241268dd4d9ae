"""Plans module - live marketing plans, their lifecycle and contents."""

from .models import (
	ActivityStatus,
	Document,
	DocumentCreate,
	MarketingPlan,
	MarketingTask,
	PlanActivity,
	PlanActivityCreate,
	PlanCreate,
	PlanStatus,
	ReviewAction,
	ReviewStatus,
	Subtask,
	TaskCreate,
	WorkStatus,
)
from .store import PlanStore

__all__ = [
	"ActivityStatus",
	"Document",
	"DocumentCreate",
	"MarketingPlan",
	"MarketingTask",
	"PlanActivity",
	"PlanActivityCreate",
	"PlanCreate",
	"PlanStatus",
	"PlanStore",
	"ReviewAction",
	"ReviewStatus",
	"Subtask",
	"TaskCreate",
	"WorkStatus",
]

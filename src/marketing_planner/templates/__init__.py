"""Templates module - reusable plan blueprints with ordered activities."""

from .models import PlanTemplate, TemplateActivity, TemplateActivityCreate, TemplateCreate
from .rules import apply_fixed_toggle
from .store import TemplateStore

__all__ = [
	"PlanTemplate",
	"TemplateActivity",
	"TemplateActivityCreate",
	"TemplateCreate",
	"TemplateStore",
	"apply_fixed_toggle",
]

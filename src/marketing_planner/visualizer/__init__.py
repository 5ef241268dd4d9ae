"""Visualizer package - Rich terminal views for templates and plans."""

from .plan_views import render_plan_activities, render_plan_list, render_plan_summary
from .template_views import render_template_detail, render_template_list

__all__ = [
	"render_plan_activities",
	"render_plan_list",
	"render_plan_summary",
	"render_template_detail",
	"render_template_list",
]

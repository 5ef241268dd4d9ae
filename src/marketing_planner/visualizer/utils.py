"""Shared utilities for visualizer views."""

from datetime import datetime
from enum import Enum
from typing import Optional

from ..plans.models import PlanStatus

STATUS_ICONS = {
	"not_started": "[dim][ ][/dim]",
	"todo": "[dim][ ][/dim]",
	"in_progress": "[yellow][~][/yellow]",
	"completed": "[green]\\[x][/green]",
	"cancelled": "[dim][-][/dim]",
}

PLAN_STATUS_STYLES = {
	PlanStatus.DRAFT: "dim",
	PlanStatus.INTERNAL_REVIEW: "yellow",
	PlanStatus.APPROVAL: "magenta",
	PlanStatus.APPROVED: "cyan",
	PlanStatus.ACTIVE: "green",
	PlanStatus.COMPLETED: "blue",
}

FIXED_ICON = "[red]\U0001f512[/red]"


def format_timestamp(iso_str: Optional[str]) -> str:
	"""Format an ISO timestamp as relative time (e.g. '2m ago', 'in 3d') or absolute."""
	if not iso_str:
		return "-"
	try:
		dt = datetime.fromisoformat(iso_str)
		delta = datetime.now() - dt
		total_secs = int(delta.total_seconds())

		if total_secs < 0:
			ahead = -total_secs
			if ahead < 86400:
				return iso_str[:16].replace("T", " ")
			return f"in {ahead // 86400}d"
		if total_secs < 60:
			return f"{total_secs}s ago"
		if total_secs < 3600:
			return f"{total_secs // 60}m ago"
		if total_secs < 86400:
			return f"{total_secs // 3600}h ago"
		days = total_secs // 86400
		return f"{days}d ago"
	except (ValueError, TypeError):
		return str(iso_str)[:19]


def format_days(days: int) -> str:
	return "1 day" if days == 1 else f"{days} days"


def status_icon(status) -> str:
	"""Checkbox-style icon for an activity or subtask status."""
	key = status.value if isinstance(status, Enum) else status
	return STATUS_ICONS.get(key, "[ ]")


def plan_status_text(status: PlanStatus) -> str:
	"""Plan status rendered with its Rich style."""
	style = PLAN_STATUS_STYLES.get(status, "white")
	return f"[{style}]{status.value}[/{style}]"


def truncate(text: str, max_len: int = 60) -> str:
	"""Shorten text for table display."""
	if not text:
		return ""
	text = text.strip()
	if len(text) <= max_len:
		return text
	return text[:max_len - 3] + "..."


# Catalog colors without a Rich equivalent
_TYPE_STYLES = {
	"indigo": "blue",
	"pink": "magenta",
	"purple": "magenta",
	"gray": "bright_black",
}


def type_style(color: str) -> str:
	"""Rich style for an activity type's catalog color."""
	return _TYPE_STYLES.get(color, color)

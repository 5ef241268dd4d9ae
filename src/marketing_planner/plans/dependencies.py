"""
Dependency predicates for plan activities and subtasks.

An item is unblocked when every dependency id resolves to a sibling whose
status is ``completed``. Ids that resolve to nothing do not block.
"""

from typing import Iterable, Mapping, Optional

from .models import PlanActivity

COMPLETED = "completed"


def blocking_ids(dependencies: Optional[Iterable[str]], statuses: Mapping[str, str]) -> list[str]:
	"""Dependency ids that resolve to a sibling that is not completed yet."""
	if not dependencies:
		return []
	return [
		dep for dep in dependencies
		if dep in statuses and statuses[dep] != COMPLETED
	]


def _status_map(items) -> dict[str, str]:
	return {item.id: getattr(item.status, "value", item.status) for item in items}


def _find(activities: list[PlanActivity], activity_id: str) -> Optional[PlanActivity]:
	return next((a for a in activities if a.id == activity_id), None)


def blocking_activities(activities: list[PlanActivity], activity_id: str) -> list[str]:
	activity = _find(activities, activity_id)
	if activity is None:
		return []
	return blocking_ids(activity.dependencies, _status_map(activities))


def blocking_subtasks(activities: list[PlanActivity], activity_id: str, subtask_id: str) -> list[str]:
	activity = _find(activities, activity_id)
	if activity is None:
		return []
	subtask = activity.get_subtask(subtask_id)
	if subtask is None:
		return []
	return blocking_ids(subtask.dependencies, _status_map(activity.subtasks))


def check_activity_dependencies(activities: list[PlanActivity], activity_id: str) -> bool:
	"""True when the activity is unknown or none of its dependencies block."""
	return not blocking_activities(activities, activity_id)


def check_subtask_dependencies(activities: list[PlanActivity], activity_id: str, subtask_id: str) -> bool:
	"""True when the activity or subtask is unknown or none of the subtask's dependencies block."""
	return not blocking_subtasks(activities, activity_id, subtask_id)

"""
Ordering and fixed-activity rules for templates.

These are pure functions over the template models; the store wraps them with
persistence and cache replacement.
"""

from typing import Iterable

from .models import PlanTemplate, TemplateActivity


def apply_fixed_toggle(template: PlanTemplate, activity: TemplateActivity) -> tuple[bool, bool]:
	"""
	Flip an activity's fixed flag and derive the template flag.

	Propagation is one-directional: fixing an activity switches the template's
	``fixed_activities`` on, unfixing never switches it off, even for the last
	fixed activity.

	Returns:
		(new_activity_fixed, new_template_fixed)
	"""
	new_activity_fixed = not activity.fixed
	new_template_fixed = template.fixed_activities or new_activity_fixed
	return new_activity_fixed, new_template_fixed


def inherited_fixed(template: PlanTemplate) -> bool:
	"""Fixed value for a new activity: a copy of the template flag at insertion time."""
	return bool(template.fixed_activities)


def resolve_order(activities: list[TemplateActivity], ordered_ids: Iterable[str]) -> list[TemplateActivity]:
	"""
	Resolve requested ids to activities in the requested order.

	Unknown and repeated ids are dropped. Activities the caller left out keep
	their current relative order after the listed ones, so nothing falls out
	of the template.
	"""
	by_id = {a.id: a for a in activities}
	resolved: list[TemplateActivity] = []
	seen: set[str] = set()
	for activity_id in ordered_ids:
		activity = by_id.get(activity_id)
		if activity is None or activity_id in seen:
			continue
		seen.add(activity_id)
		resolved.append(activity)

	leftovers = [a for a in _current_order(activities) if a.id not in seen]
	return resolved + leftovers


def reorder(
	activities: list[TemplateActivity],
	ordered_ids: Iterable[str],
	timestamp: str,
) -> list[TemplateActivity]:
	"""New activity list with ``order_index`` set to each activity's position (0..n-1)."""
	return [
		activity.model_copy(update={"order_index": index, "updated_at": timestamp})
		for index, activity in enumerate(resolve_order(activities, ordered_ids))
	]


def _current_order(activities: list[TemplateActivity]) -> list[TemplateActivity]:
	return sorted(activities, key=lambda a: (a.order_index is None, a.order_index or 0))

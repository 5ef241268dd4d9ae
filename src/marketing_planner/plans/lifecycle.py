"""
Plan lifecycle: draft -> internal_review -> approval -> approved -> active -> completed.

Each function returns the patch a transition writes to the plan row. None of
them check the plan's current status; callers invoke them at the right stage.
"""

from typing import Any

from .models import PlanStatus, ReviewAction, ReviewStatus


def send_to_review(reviewer_id: str) -> dict[str, Any]:
	return {
		"status": PlanStatus.INTERNAL_REVIEW.value,
		"reviewer_id": reviewer_id,
		"review_status": ReviewStatus.PENDING.value,
		"review_progress": 0,
	}


def review(action: ReviewAction, timestamp: str) -> dict[str, Any]:
	"""
	Record a review verdict.

	Approval keeps the plan in internal_review with progress 100, marking the
	review done ahead of approval submission. Anything else sends it back to
	draft with progress 0. Comments and the date are recorded either way.
	"""
	approved = action.status == ReviewStatus.APPROVED
	return {
		"review_status": action.status.value,
		"review_comments": action.comments,
		"review_date": timestamp,
		"status": (PlanStatus.INTERNAL_REVIEW if approved else PlanStatus.DRAFT).value,
		"review_progress": 100 if approved else 0,
	}


def send_to_approval(approver_id: str) -> dict[str, Any]:
	return {
		"status": PlanStatus.APPROVAL.value,
		"approver_id": approver_id,
		"approval_status": ReviewStatus.PENDING.value,
		"approval_progress": 0,
	}


def approve(action: ReviewAction, timestamp: str) -> dict[str, Any]:
	"""Record an approval verdict; rejection returns the plan to internal_review."""
	approved = action.status == ReviewStatus.APPROVED
	return {
		"approval_status": action.status.value,
		"approval_comments": action.comments,
		"approval_date": timestamp,
		"status": (PlanStatus.APPROVED if approved else PlanStatus.INTERNAL_REVIEW).value,
		"approval_progress": 100 if approved else 0,
	}


def activate() -> dict[str, Any]:
	return {"status": PlanStatus.ACTIVE.value}


def complete() -> dict[str, Any]:
	return {"status": PlanStatus.COMPLETED.value}


def stage_progress(status: PlanStatus) -> tuple[int, int]:
	"""(current stage number, total stages) for progress displays."""
	order = list(PlanStatus)
	return order.index(status) + 1, len(order)

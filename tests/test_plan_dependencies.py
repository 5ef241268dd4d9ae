"""Tests for activity and subtask dependency predicates."""

from marketing_planner.plans import Subtask
from marketing_planner.plans.dependencies import (
	blocking_activities,
	blocking_ids,
	check_activity_dependencies,
	check_subtask_dependencies,
)

from .helpers import make_plan_activity


def test_blocking_ids_ignores_missing_and_completed():
	statuses = {"a": "completed", "b": "in_progress"}
	assert blocking_ids(["a", "b", "x"], statuses) == ["b"]
	assert blocking_ids(None, statuses) == []
	assert blocking_ids([], statuses) == []


def test_missing_dependency_is_permissive():
	activities = [make_plan_activity("t", dependencies=["x"])]
	assert check_activity_dependencies(activities, "t") is True


def test_in_progress_dependency_blocks_until_completed():
	activities = [
		make_plan_activity("a", status="in_progress"),
		make_plan_activity("t", dependencies=["a"]),
	]
	assert check_activity_dependencies(activities, "t") is False
	assert blocking_activities(activities, "t") == ["a"]

	activities[0] = activities[0].model_copy(update={"status": "completed"})
	assert check_activity_dependencies(activities, "t") is True


def test_no_dependencies_and_unknown_activity():
	activities = [make_plan_activity("t")]
	assert check_activity_dependencies(activities, "t") is True
	assert check_activity_dependencies(activities, "nope") is True


def test_subtask_dependencies():
	subtasks = [
		Subtask(id="research", title="Research", status="completed"),
		Subtask(id="write", title="Write", status="in_progress", dependencies=["research"]),
		Subtask(id="publish", title="Publish", dependencies=["write", "gone"]),
	]
	activities = [make_plan_activity("t", subtasks=subtasks)]

	assert check_subtask_dependencies(activities, "t", "research") is True
	assert check_subtask_dependencies(activities, "t", "write") is True
	assert check_subtask_dependencies(activities, "t", "publish") is False
	assert check_subtask_dependencies(activities, "t", "ghost") is True
	assert check_subtask_dependencies(activities, "ghost", "publish") is True


def test_cancelled_dependency_still_blocks():
	activities = [
		make_plan_activity("a", status="cancelled"),
		make_plan_activity("t", dependencies=["a"]),
	]
	assert check_activity_dependencies(activities, "t") is False

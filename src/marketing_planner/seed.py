"""
Demo data for local runs.

Two plans for ``company1`` (one active, one draft) with tasks, documents and
an activity on the active plan, a public template whose activities
depend on each other, and one idea in the backlog. Seeding twice is a no-op.
"""

import logging
from datetime import datetime, timedelta

from .activity_types import ActivityType, default_subtasks
from .ideas.models import Idea, IdeaPriority, IdeaType
from .persistence import Persistence
from .plans.models import (
	ActivityStatus,
	Document,
	MarketingPlan,
	MarketingTask,
	PlanActivity,
	PlanStatus,
	Subtask,
	WorkStatus,
)
from .templates.models import PlanTemplate, TemplateActivity

logger = logging.getLogger(__name__)

DEMO_COMPANY_ID = "company1"
DEMO_USER_ID = "user123"
DEMO_TEMPLATE_ID = "template-content-launch"


def _days(start: datetime, n: int) -> str:
	return (start + timedelta(days=n)).isoformat()


def demo_plans(now: datetime) -> list[MarketingPlan]:
	ts = now.isoformat()
	return [
		MarketingPlan(
			id="plan1",
			title="Q1 Marketing Strategy",
			description="Comprehensive marketing strategy for Q1 2025",
			owner_id=DEMO_USER_ID,
			company_id=DEMO_COMPANY_ID,
			status=PlanStatus.ACTIVE,
			team_members=[DEMO_USER_ID, "user456"],
			created_at=ts, updated_at=ts, last_activity_at=ts,
		),
		MarketingPlan(
			id="plan2",
			title="Product Launch Campaign",
			description="Marketing campaign for new product launch",
			owner_id=DEMO_USER_ID,
			company_id=DEMO_COMPANY_ID,
			status=PlanStatus.DRAFT,
			team_members=[DEMO_USER_ID],
			created_at=ts, updated_at=ts, last_activity_at=ts,
		),
	]


def demo_tasks(now: datetime, plan_id: str) -> list[MarketingTask]:
	ts = now.isoformat()
	return [
		MarketingTask(
			id="task1", plan_id=plan_id,
			title="Research competitors",
			description="Analyze top 5 competitors marketing strategies",
			due_date=_days(now, 7), status=WorkStatus.IN_PROGRESS, assigned_to=DEMO_USER_ID,
			created_at=ts, updated_at=ts,
		),
		MarketingTask(
			id="task2", plan_id=plan_id,
			title="Create content calendar",
			description="Plan content for next 3 months",
			due_date=_days(now, 14), status=WorkStatus.TODO,
			created_at=ts, updated_at=ts,
		),
	]


def demo_documents(now: datetime, plan_id: str) -> list[Document]:
	ts = now.isoformat()
	return [
		Document(
			id="doc1", plan_id=plan_id,
			title="Marketing Strategy Overview",
			content="# Marketing Strategy\n\nThis document outlines our marketing strategy...",
			created_by=DEMO_USER_ID, created_at=ts, updated_at=ts,
		),
		Document(
			id="doc2", plan_id=plan_id,
			title="Content Guidelines",
			content="# Content Guidelines\n\nFollow these guidelines when creating content...",
			created_by="user456", created_at=ts, updated_at=ts,
		),
	]


def demo_activities(now: datetime, plan_id: str) -> list[PlanActivity]:
	ts = now.isoformat()
	return [
		PlanActivity(
			id="activity1", plan_id=plan_id,
			title="Blog Post: Industry Trends",
			description="Write a blog post about current industry trends",
			activity_type=ActivityType.BLOG_ARTICLE,
			status=ActivityStatus.IN_PROGRESS,
			duration=14, order_index=0,
			publish_date=_days(now, 14), start_date=ts, end_date=_days(now, 14),
			assigned_to=DEMO_USER_ID,
			subtasks=[
				Subtask(
					id="1-1", title="Research topic", status=WorkStatus.COMPLETED,
					start_date=ts, due_date=_days(now, 2), duration=2,
				),
			],
			created_at=ts, updated_at=ts,
		),
		PlanActivity(
			id="activity-template-1", plan_id="template",
			title="Blog Post Template",
			description="Standard blog post template with research, writing, and publishing steps",
			activity_type=ActivityType.BLOG_ARTICLE,
			duration=14,
			publish_date=ts, start_date=ts, end_date=_days(now, 14),
			subtasks=[Subtask(**s) for s in default_subtasks(ActivityType.BLOG_ARTICLE)],
			is_template=True,
			created_at=ts, updated_at=ts,
		),
	]


def demo_ideas(now: datetime) -> list[Idea]:
	ts = now.isoformat()
	return [
		Idea(
			id="idea1",
			title="Blog Post: Future of AI",
			description="Explore the impact of AI on business operations",
			type=IdeaType.BLOG,
			priority=IdeaPriority.HIGH,
			created_by=DEMO_USER_ID,
			company_id=DEMO_COMPANY_ID,
			tags=["ai", "technology", "future"],
			created_at=ts, updated_at=ts,
		),
	]


def demo_template(now: datetime) -> PlanTemplate:
	ts = now.isoformat()
	steps = [
		("research", "Audience research", ActivityType.CUSTOM, 5, []),
		("landing", "Launch landing page", ActivityType.LANDING_PAGE, 10, ["research"]),
		("blog", "Announcement article", ActivityType.BLOG_ARTICLE, 7, ["research"]),
		("email", "Launch email campaign", ActivityType.EMAIL_CAMPAIGN, 5, ["landing", "blog"]),
		("social", "Social push", ActivityType.SOCIAL_POST, 3, ["blog"]),
	]
	activities = [
		TemplateActivity(
			id=f"{DEMO_TEMPLATE_ID}-{key}",
			template_id=DEMO_TEMPLATE_ID,
			title=title,
			activity_type=activity_type,
			duration=duration,
			order_index=index,
			dependencies=[f"{DEMO_TEMPLATE_ID}-{dep}" for dep in deps],
			has_form=activity_type == ActivityType.LANDING_PAGE,
			fixed=key == "landing",
			created_at=ts, updated_at=ts,
		)
		for index, (key, title, activity_type, duration, deps) in enumerate(steps)
	]
	return PlanTemplate(
		id=DEMO_TEMPLATE_ID,
		title="Content Launch Playbook",
		description="Research, landing page, article and email for a product launch",
		strategy_overview="Build awareness with content, convert on the landing page, follow up by email.",
		is_public=True,
		created_by=DEMO_USER_ID,
		fixed_activities=True,
		activities=activities,
		created_at=ts, updated_at=ts,
	)


async def seed_demo_data(persistence: Persistence) -> int:
	"""
	Insert the demo rows unless they are already present.

	Returns:
		Number of rows inserted
	"""
	existing = await persistence.select("plans", {"id": "plan1"})
	if existing:
		logger.info("Demo data already present, skipping seed")
		return 0

	now = datetime.now()
	template = demo_template(now)
	batches = [
		("plans", [p.model_dump(mode="json") for p in demo_plans(now)]),
		("tasks", [t.model_dump(mode="json") for t in demo_tasks(now, "plan1")]),
		("documents", [d.model_dump(mode="json") for d in demo_documents(now, "plan1")]),
		("activities", [a.model_dump(mode="json") for a in demo_activities(now, "plan1")]),
		("templates", [template.to_row()]),
		("template_activities", [a.model_dump(mode="json") for a in template.activities]),
		("ideas", [i.model_dump(mode="json") for i in demo_ideas(now)]),
	]

	count = 0
	for table, rows in batches:
		for row in rows:
			await persistence.insert(table, row)
			count += 1

	logger.info(f"Seeded {count} demo rows")
	return count

"""
Activity type catalog.

Every marketing activity carries one of these type tags. The catalog gives the
display name, whether the activity ships a form, and the default subtask
breakdown (with intra-activity dependencies) used when an activity is created
from a type.
"""

from dataclasses import dataclass, field
from enum import Enum


class ActivityType(str, Enum):
	"""Category of marketing work."""
	BLOG_ARTICLE = "blog_article"
	FULL_WEB_PAGE = "full_web_page"
	LANDING_PAGE = "landing_page"
	SOCIAL_POST = "social_post"
	AUTOMATED_EMAIL = "automated_email"
	EMAIL_CAMPAIGN = "email_campaign"
	META_ADVERTISING = "meta_advertising"
	GOOGLE_ADVERTISING = "google_advertising"
	LINKEDIN_ADVERTISING = "linkedin_advertising"
	CUSTOM = "custom"


@dataclass(frozen=True)
class SubtaskSpec:
	"""Blueprint for one default subtask."""
	id: str
	title: str
	description: str
	dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class ActivityTypeInfo:
	"""Catalog entry for an activity type."""
	id: ActivityType
	name: str
	description: str
	color: str
	includes_form: bool = False
	default_subtasks: tuple[SubtaskSpec, ...] = field(default_factory=tuple)


def _ad_campaign(platform: str, manager: str, second: SubtaskSpec) -> tuple[SubtaskSpec, ...]:
	"""Paid-ads breakdown shared by the Meta, Google and LinkedIn types."""
	return (
		SubtaskSpec("goal", "Define goal", f"Define the goal for the {platform} advertising campaign"),
		second,
		SubtaskSpec("budget", "Set budget", "Set the budget for the advertising campaign"),
		SubtaskSpec("creative", "Create ad creative", "Create the visual and copy for the ads", ("goal", second.id)),
		SubtaskSpec(
			"setup", "Set up campaign", f"Set up the campaign in {manager}",
			("goal", second.id, "budget", "creative"),
		),
		SubtaskSpec("launch", "Launch campaign", "Launch the advertising campaign", ("setup",)),
		SubtaskSpec("monitor", "Monitor performance", "Monitor the performance of the campaign", ("launch",)),
		SubtaskSpec("optimize", "Optimize campaign", "Optimize the campaign based on performance data", ("monitor",)),
	)


_AUDIENCE = SubtaskSpec("audience", "Define audience", "Define the target audience for the ads")

ACTIVITY_TYPES: tuple[ActivityTypeInfo, ...] = (
	ActivityTypeInfo(
		ActivityType.BLOG_ARTICLE, "Blog Article", "Create and publish a blog article", "blue",
		default_subtasks=(
			SubtaskSpec("research", "Research topic", "Research the topic and gather key information"),
			SubtaskSpec("outline", "Create outline", "Create a detailed outline of the blog post", ("research",)),
			SubtaskSpec("draft", "Write first draft", "Write the first draft of the blog post", ("outline",)),
			SubtaskSpec("edit", "Edit and revise", "Edit and revise the blog post for clarity and accuracy", ("draft",)),
			SubtaskSpec("images", "Add images", "Find and add relevant images to the blog post", ("draft",)),
			SubtaskSpec("seo", "SEO optimization", "Optimize the blog post for search engines", ("edit",)),
			SubtaskSpec("publish", "Publish blog post", "Publish the blog post on the website", ("edit", "images", "seo")),
		),
	),
	ActivityTypeInfo(
		ActivityType.FULL_WEB_PAGE, "Full Web Page", "Design and develop a complete web page", "indigo",
		includes_form=True,
		default_subtasks=(
			SubtaskSpec("requirements", "Define requirements", "Define the requirements and goals for the web page"),
			SubtaskSpec("wireframe", "Create wireframe", "Create a wireframe or mockup of the web page", ("requirements",)),
			SubtaskSpec("content", "Create content", "Write and prepare all content for the web page", ("requirements",)),
			SubtaskSpec("design", "Design page", "Create the visual design for the web page", ("wireframe",)),
			SubtaskSpec("develop", "Develop page", "Develop and code the web page", ("design", "content")),
			SubtaskSpec("test", "Test functionality", "Test the web page for functionality and responsiveness", ("develop",)),
			SubtaskSpec("seo", "SEO optimization", "Optimize the web page for search engines", ("develop",)),
			SubtaskSpec("launch", "Launch page", "Launch the web page on the live site", ("test", "seo")),
		),
	),
	ActivityTypeInfo(
		ActivityType.LANDING_PAGE, "Landing Page", "Create a landing page, possibly with a form", "purple",
		includes_form=True,
		default_subtasks=(
			SubtaskSpec("goal", "Define goal", "Define the primary goal and conversion action for the landing page"),
			SubtaskSpec("audience", "Define audience", "Define the target audience for the landing page"),
			SubtaskSpec("wireframe", "Create wireframe", "Create a wireframe or mockup of the landing page", ("goal", "audience")),
			SubtaskSpec("content", "Create content", "Write compelling copy for the landing page", ("goal", "audience")),
			SubtaskSpec("form", "Create form", "Design and create the form for data collection", ("wireframe",)),
			SubtaskSpec("design", "Design page", "Create the visual design for the landing page", ("wireframe",)),
			SubtaskSpec("develop", "Develop page", "Develop and code the landing page", ("design", "content", "form")),
			SubtaskSpec("test", "Test functionality", "Test the landing page and form functionality", ("develop",)),
			SubtaskSpec("launch", "Launch page", "Launch the landing page on the live site", ("test",)),
		),
	),
	ActivityTypeInfo(
		ActivityType.SOCIAL_POST, "Social Post", "Create and schedule social media content", "pink",
		default_subtasks=(
			SubtaskSpec("topic", "Define topic", "Define the topic and goal for the social post"),
			SubtaskSpec("content", "Create content", "Write the content for the social post", ("topic",)),
			SubtaskSpec("image", "Create image", "Create or select an image for the social post", ("topic",)),
			SubtaskSpec("review", "Review and approve", "Review and approve the social post", ("content", "image")),
			SubtaskSpec("schedule", "Schedule post", "Schedule the social post for publication", ("review",)),
		),
	),
	ActivityTypeInfo(
		ActivityType.AUTOMATED_EMAIL, "Automated Email", "Set up an automated email sequence", "yellow",
		default_subtasks=(
			SubtaskSpec("trigger", "Define trigger", "Define the trigger for the automated email"),
			SubtaskSpec("audience", "Define audience", "Define the target audience for the email"),
			SubtaskSpec("content", "Create content", "Write the email content", ("trigger", "audience")),
			SubtaskSpec("design", "Design email", "Design the email template", ("content",)),
			SubtaskSpec("test", "Test email", "Test the email for functionality and appearance", ("design",)),
			SubtaskSpec("setup", "Set up automation", "Set up the email automation in the email platform", ("test",)),
			SubtaskSpec("activate", "Activate automation", "Activate the email automation", ("setup",)),
		),
	),
	ActivityTypeInfo(
		ActivityType.EMAIL_CAMPAIGN, "Email Campaign", "Create and send an email campaign", "green",
		default_subtasks=(
			SubtaskSpec("goal", "Define goal", "Define the goal for the email campaign"),
			SubtaskSpec("audience", "Define audience", "Define the target audience for the campaign"),
			SubtaskSpec("content", "Create content", "Write the email content", ("goal", "audience")),
			SubtaskSpec("design", "Design email", "Design the email template", ("content",)),
			SubtaskSpec("test", "Test email", "Test the email for functionality and appearance", ("design",)),
			SubtaskSpec("segment", "Segment audience", "Segment the audience for targeted sending", ("audience",)),
			SubtaskSpec("schedule", "Schedule campaign", "Schedule the email campaign", ("test", "segment")),
			SubtaskSpec("send", "Send campaign", "Send the email campaign", ("schedule",)),
		),
	),
	ActivityTypeInfo(
		ActivityType.META_ADVERTISING, "Meta Advertising", "Create and manage Meta (Facebook/Instagram) ads", "blue",
		default_subtasks=_ad_campaign("Meta", "Meta Ads Manager", _AUDIENCE),
	),
	ActivityTypeInfo(
		ActivityType.GOOGLE_ADVERTISING, "Google Advertising", "Create and manage Google ads", "red",
		default_subtasks=_ad_campaign(
			"Google", "Google Ads",
			SubtaskSpec("keywords", "Research keywords", "Research and select keywords for the campaign", ("goal",)),
		),
	),
	ActivityTypeInfo(
		ActivityType.LINKEDIN_ADVERTISING, "LinkedIn Advertising", "Create and manage LinkedIn ads", "blue",
		default_subtasks=_ad_campaign("LinkedIn", "LinkedIn Campaign Manager", _AUDIENCE),
	),
	ActivityTypeInfo(
		ActivityType.CUSTOM, "Custom Activity", "Create a custom marketing activity", "gray",
	),
)


def get_activity_type_info(activity_type: str) -> ActivityTypeInfo:
	"""Look up a catalog entry, falling back to the first type when unknown."""
	for info in ACTIVITY_TYPES:
		if info.id == activity_type:
			return info
	return ACTIVITY_TYPES[0]


def default_subtasks(activity_type: str) -> list[dict]:
	"""Fresh subtask rows for a type, all in the ``todo`` state."""
	info = get_activity_type_info(activity_type)
	return [
		{
			"id": spec.id,
			"title": spec.title,
			"description": spec.description,
			"status": "todo",
			"dependencies": list(spec.dependencies) or None,
		}
		for spec in info.default_subtasks
	]

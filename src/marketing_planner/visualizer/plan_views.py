"""Rich views for marketing plans and their activities."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ..plans import dependencies
from ..plans.lifecycle import stage_progress
from ..plans.models import MarketingPlan, PlanActivity
from .utils import format_timestamp, plan_status_text, status_icon, truncate


def render_plan_list(plans: list[MarketingPlan], console: Optional[Console] = None) -> None:
	"""Render a table of plans."""
	console = console or Console()

	if not plans:
		console.print("[dim]No plans found.[/dim]")
		return

	table = Table(title="Marketing Plans")
	table.add_column("ID", style="cyan")
	table.add_column("Title")
	table.add_column("Status")
	table.add_column("Owner")
	table.add_column("Team", justify="right")
	table.add_column("Last Activity")

	for p in plans:
		table.add_row(
			p.id,
			truncate(p.title, 40),
			plan_status_text(p.status),
			p.owner_id or "-",
			str(len(p.team_members)),
			format_timestamp(p.last_activity_at),
		)

	console.print(table)


def render_plan_summary(plan: MarketingPlan, console: Optional[Console] = None) -> None:
	"""Render a summary panel for a plan."""
	console = console or Console()

	stage, total = stage_progress(plan.status)

	lines = []
	lines.append(f"[bold]Title:[/bold] {plan.title}")
	if plan.description:
		lines.append(f"[bold]Description:[/bold] {plan.description}")
	lines.append(f"[bold]Status:[/bold] {plan_status_text(plan.status)} [dim](stage {stage}/{total})[/dim]")
	lines.append(f"[bold]Owner:[/bold] {plan.owner_id or '-'}")
	if plan.team_members:
		lines.append(f"[bold]Team:[/bold] {', '.join(plan.team_members)}")

	if plan.reviewer_id:
		lines.append("")
		review = plan.review_status.value if plan.review_status else "-"
		lines.append(f"[bold]Review:[/bold] {review} by {plan.reviewer_id} ({plan.review_progress}%)")
		if plan.review_comments:
			lines.append(f"  - {plan.review_comments}")

	if plan.approver_id:
		approval = plan.approval_status.value if plan.approval_status else "-"
		lines.append(f"[bold]Approval:[/bold] {approval} by {plan.approver_id} ({plan.approval_progress}%)")
		if plan.approval_comments:
			lines.append(f"  - {plan.approval_comments}")

	if plan.strategy_overview:
		lines.append("")
		lines.append("[bold]Strategy:[/bold]")
		lines.append(f"  {plan.strategy_overview}")

	console.print(Panel("\n".join(lines), title=f"Plan: {plan.id}", border_style="cyan"))


def render_plan_activities(activities: list[PlanActivity], console: Optional[Console] = None) -> None:
	"""Render a plan's activities with subtask progress; blocked ones are flagged."""
	console = console or Console()

	if not activities:
		console.print("[dim]No activities in this plan.[/dim]")
		return

	done = len([a for a in activities if a.status == "completed"])
	tree = Tree(f"[bold]Activities[/bold]  [dim]({done}/{len(activities)} completed)[/dim]")

	for activity in activities:
		progress = activity.get_progress()
		blocked = dependencies.blocking_activities(activities, activity.id)
		marker = f" [red]blocked by {len(blocked)}[/red]" if blocked else ""
		branch = tree.add(
			f"{status_icon(activity.status)} [bold]{activity.title}[/bold]{marker} "
			f"[dim]{progress['completed_subtasks']}/{progress['total_subtasks']} subtasks, "
			f"due {format_timestamp(activity.end_date)}[/dim]"
		)

		for subtask in activity.subtasks:
			waiting = dependencies.blocking_subtasks(activities, activity.id, subtask.id)
			flag = " [red](waiting)[/red]" if waiting else ""
			branch.add(f"{status_icon(subtask.status)} {subtask.title}{flag}")

	console.print(tree)

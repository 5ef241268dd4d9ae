"""Rich views for plan templates."""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from ..activity_types import get_activity_type_info
from ..templates.models import PlanTemplate
from .utils import FIXED_ICON, format_days, format_timestamp, truncate, type_style


def render_template_list(templates: list[PlanTemplate], console: Optional[Console] = None) -> None:
	"""Render a table of templates."""
	console = console or Console()

	if not templates:
		console.print("[dim]No templates found.[/dim]")
		return

	table = Table(title="Plan Templates")
	table.add_column("ID", style="cyan")
	table.add_column("Title")
	table.add_column("Activities", justify="right")
	table.add_column("Fixed", justify="right")
	table.add_column("Scope")
	table.add_column("Updated")

	for t in templates:
		scope = "public" if t.is_public else (t.company_id or "global")
		fixed = f"{t.fixed_count()}" if t.fixed_activities else "[dim]off[/dim]"
		table.add_row(
			t.id,
			truncate(t.title, 40),
			str(len(t.activities)),
			fixed,
			scope,
			format_timestamp(t.updated_at),
		)

	console.print(table)


def render_template_detail(template: PlanTemplate, console: Optional[Console] = None) -> None:
	"""Render a template as a Tree of ordered activities; fixed ones carry a lock."""
	console = console or Console()

	switch = "on" if template.fixed_activities else "off"
	tree = Tree(
		f"[bold]{template.title}[/bold]  "
		f"[dim]({len(template.activities)} activities, fixed activities {switch})[/dim]"
	)
	if template.strategy_overview:
		tree.add(f"[italic]{template.strategy_overview}[/italic]")

	titles = {a.id: a.title for a in template.activities}
	for activity in template.ordered_activities():
		info = get_activity_type_info(activity.activity_type)
		style = type_style(info.color)
		lock = f" {FIXED_ICON}" if activity.fixed else ""
		position = activity.order_index if activity.order_index is not None else "-"
		branch = tree.add(
			f"[dim]{position}[/dim] [bold]{activity.title}[/bold]{lock} "
			f"[{style}]{info.name}[/{style}] [dim]{format_days(activity.duration)} {activity.id}[/dim]"
		)
		if activity.dependencies:
			after = ", ".join(titles.get(dep, dep) for dep in activity.dependencies)
			branch.add(f"[dim]after: {after}[/dim]")

	console.print(tree)

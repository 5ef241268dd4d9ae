"""CLI for marketing-planner: templates, plans, seed, web and doctor commands."""

import argparse
import asyncio
import platform
import sys
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Awaitable, Callable

from rich.console import Console

from .config import Config, get_config
from .context import AppContext
from .logging_config import setup_logging
from .seed import seed_demo_data
from .visualizer import (
	render_plan_activities,
	render_plan_list,
	render_plan_summary,
	render_template_detail,
	render_template_list,
)

console = Console()


def _fail(message: str) -> None:
	console.print(f"[red]Error:[/red] {message}")
	sys.exit(1)


async def _open(config: Config) -> AppContext:
	"""Open a context; the memory backend starts with demo data."""
	context = await AppContext.create(config)
	if config.backend == "memory":
		await seed_demo_data(context.persistence)
	return context


def _run(config: Config, action: Callable[[AppContext], Awaitable[None]]) -> None:
	"""Run one async command against a fresh context."""
	async def runner() -> None:
		async with await _open(config) as context:
			await action(context)

	asyncio.run(runner())


def _company(args: argparse.Namespace, config: Config):
	return getattr(args, "company", None) or config.default_company_id


# -- templates --------------------------------------------------------------

def cmd_templates(args: argparse.Namespace) -> None:
	"""List templates visible to a company."""
	config = get_config()

	async def action(context: AppContext) -> None:
		store = context.templates
		await store.fetch_templates(_company(args, config))
		if store.error:
			_fail(store.error)
		render_template_list(store.templates, console=console)

	_run(config, action)


async def _load_template(context: AppContext, template_id: str, company_id):
	await context.templates.fetch_templates(company_id)
	if context.templates.error:
		_fail(context.templates.error)
	template = context.templates.get_template(template_id)
	if template is None:
		_fail(f"Template not found: {template_id}")
	return template


def cmd_template(args: argparse.Namespace) -> None:
	"""Show one template with its ordered activities."""
	config = get_config()

	async def action(context: AppContext) -> None:
		template = await _load_template(context, args.template_id, _company(args, config))
		render_template_detail(template, console=console)

	_run(config, action)


def cmd_reorder(args: argparse.Namespace) -> None:
	"""Reorder a template's activities; omitted activities keep their relative order at the end."""
	config = get_config()

	async def action(context: AppContext) -> None:
		template = await _load_template(context, args.template_id, _company(args, config))
		await context.templates.reorder_activities(template.id, args.activity_ids)
		if context.templates.error:
			_fail(context.templates.error)
		render_template_detail(context.templates.get_template(template.id), console=console)

	_run(config, action)


def cmd_toggle_fixed(args: argparse.Namespace) -> None:
	"""Flip an activity's fixed flag, or set the template-level flag with --on/--off."""
	config = get_config()

	async def action(context: AppContext) -> None:
		store = context.templates
		template = await _load_template(context, args.template_id, _company(args, config))

		if args.activity_id:
			if template.get_activity(args.activity_id) is None:
				_fail(f"Activity not found: {args.activity_id}")
			await store.toggle_activity_fixed(template.id, args.activity_id)
		elif args.state is not None:
			await store.set_template_fixed_activities(template.id, args.state == "on")
		else:
			_fail("Give an activity id or --on/--off")

		if store.error:
			_fail(store.error)
		render_template_detail(store.get_template(template.id), console=console)

	_run(config, action)


# -- plans ------------------------------------------------------------------

def cmd_plans(args: argparse.Namespace) -> None:
	"""List plans, optionally for one company."""
	config = get_config()

	async def action(context: AppContext) -> None:
		store = context.plans
		await store.fetch_plans(_company(args, config))
		if store.error:
			_fail(store.error)
		render_plan_list(store.plans, console=console)

	_run(config, action)


def cmd_plan(args: argparse.Namespace) -> None:
	"""Show a plan summary and its activities."""
	config = get_config()

	async def action(context: AppContext) -> None:
		store = context.plans
		await store.fetch_plans()
		plan = store.get_plan(args.plan_id)
		if plan is None:
			_fail(store.error or f"Plan not found: {args.plan_id}")
		await store.fetch_activities(plan.id)
		if store.error:
			_fail(store.error)
		render_plan_summary(plan, console=console)
		if not args.summary:
			render_plan_activities(store.plan_activities(plan.id), console=console)

	_run(config, action)


# -- seed / web / doctor ----------------------------------------------------

def cmd_seed(args: argparse.Namespace) -> None:
	"""Insert demo plans and a demo template into the configured backend."""
	config = get_config()
	if config.backend == "memory":
		console.print("[yellow]The memory backend is seeded on every run; nothing to do.[/yellow]")
		return

	async def action(context: AppContext) -> None:
		count = await seed_demo_data(context.persistence)
		if count:
			console.print(f"Seeded {count} rows into {config.db_path}")
		else:
			console.print("Demo data already present.")

	_run(config, action)


def cmd_web(args: argparse.Namespace) -> None:
	"""Launch the JSON API."""
	try:
		from .web import run_web
	except ImportError:
		print("Web extras not installed.")
		print("Install with: pip install -e '.[web]'")
		sys.exit(1)

	run_web(get_config(), port=args.port)


def _check_optional_extras() -> list[tuple[str, str]]:
	"""Check optional extras installation status.

	Returns list of (extra_name, status_string) tuples.
	"""
	extras = {
		"web": ["starlette", "uvicorn"],
	}
	results = []
	for extra_name, packages in extras.items():
		installed = []
		for pkg in packages:
			try:
				installed.append(f"{pkg} {pkg_version(pkg)}")
			except Exception:
				pass
		if installed:
			results.append((extra_name, ", ".join(installed)))
		else:
			results.append((extra_name, f"NOT INSTALLED (pip install marketing-planner[{extra_name}])"))
	return results


def _check_config_toml(config_dir: Path) -> tuple[str, str | None]:
	"""Validate config.toml. Returns (status, issue_or_none)."""
	import tomllib

	toml_path = config_dir / "config.toml"
	if not toml_path.exists():
		return "not found (optional)", None
	try:
		with open(toml_path, "rb") as f:
			tomllib.load(f)
		return "valid", None
	except tomllib.TOMLDecodeError as e:
		return f"INVALID ({e})", f"config.toml parse error: {e}"


def _check_backend(config: Config) -> tuple[str, str | None]:
	"""Open the configured backend and count plans. Returns (status, issue_or_none)."""
	async def count_plans() -> int:
		async with await AppContext.create(config) as context:
			return len(await context.persistence.select("plans"))

	try:
		count = asyncio.run(count_plans())
	except Exception as e:
		return f"FAILED ({e})", f"Backend '{config.backend}' failed to open: {e}"
	return f"OK ({config.backend}, {count} plans)", None


def cmd_doctor(args: argparse.Namespace) -> None:
	"""Health check - verify installation and configuration."""
	print("marketing-planner doctor")
	print(f"{'=' * 40}")

	config = get_config()
	issues: list[str] = []

	py_ver = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
	print(f"  Python:       {py_ver}")
	print(f"  Platform:     {platform.system()} {platform.machine()}")
	print(f"  Data dir:     {config.data_dir}")
	print()

	print("  Core deps:")
	for dep in ["aiosqlite", "platformdirs", "pydantic", "rich"]:
		try:
			print(f"    {dep:22s} {pkg_version(dep)}")
		except Exception:
			print(f"    {dep:22s} NOT INSTALLED")
			issues.append(f"{dep} package not installed")
	print()

	print("  Optional extras:")
	for extra_name, status in _check_optional_extras():
		print(f"    {extra_name:22s} {status}")
	print()

	print("  Config:")
	toml_status, toml_issue = _check_config_toml(config.config_dir)
	print(f"    config.toml:         {toml_status}")
	if toml_issue:
		issues.append(toml_issue)
	print()

	print("  Backend:")
	backend_status, backend_issue = _check_backend(config)
	print(f"    {backend_status}")
	if backend_issue:
		issues.append(backend_issue)
	print()

	if issues:
		print(f"  {len(issues)} issue(s) found:")
		for issue in issues:
			print(f"    - {issue}")
		sys.exit(1)
	else:
		print("  All checks passed.")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="marketing-planner",
		description="Marketing plan templates, plans and their review lifecycle",
	)
	parser.add_argument("--company", type=str, default=None, help="Company ID (default: from config)")
	subparsers = parser.add_subparsers(dest="command")

	templates_parser = subparsers.add_parser("templates", help="List templates")
	templates_parser.set_defaults(func=cmd_templates)

	template_parser = subparsers.add_parser("template", help="Show a template")
	template_parser.add_argument("template_id", help="Template ID")
	template_parser.set_defaults(func=cmd_template)

	reorder_parser = subparsers.add_parser("reorder", help="Reorder a template's activities")
	reorder_parser.add_argument("template_id", help="Template ID")
	reorder_parser.add_argument("activity_ids", nargs="+", help="Activity IDs in the new order")
	reorder_parser.set_defaults(func=cmd_reorder)

	toggle_parser = subparsers.add_parser("toggle-fixed", help="Toggle fixed state of an activity or template")
	toggle_parser.add_argument("template_id", help="Template ID")
	toggle_parser.add_argument("activity_id", nargs="?", default=None, help="Activity ID to flip")
	state = toggle_parser.add_mutually_exclusive_group()
	state.add_argument("--on", dest="state", action="store_const", const="on", help="Switch the template flag on")
	state.add_argument("--off", dest="state", action="store_const", const="off", help="Switch the template flag off")
	toggle_parser.set_defaults(func=cmd_toggle_fixed, state=None)

	plans_parser = subparsers.add_parser("plans", help="List plans")
	plans_parser.set_defaults(func=cmd_plans)

	plan_parser = subparsers.add_parser("plan", help="Show a plan")
	plan_parser.add_argument("plan_id", help="Plan ID")
	plan_parser.add_argument("--summary", action="store_true", help="Summary panel only, no activities")
	plan_parser.set_defaults(func=cmd_plan)

	seed_parser = subparsers.add_parser("seed", help="Insert demo data")
	seed_parser.set_defaults(func=cmd_seed)

	web_parser = subparsers.add_parser("web", help="Run the JSON API")
	web_parser.add_argument("--port", type=int, default=0, help="Server port (default: from config)")
	web_parser.set_defaults(func=cmd_web)

	doctor_parser = subparsers.add_parser("doctor", help="Health check")
	doctor_parser.set_defaults(func=cmd_doctor)

	return parser


def main() -> None:
	"""CLI entry point."""
	parser = build_parser()
	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	try:
		config = get_config()
	except ValueError as e:
		_fail(str(e))
	setup_logging(level=config.log_level, log_dir=config.log_dir)

	args.func(args)

"""Tests for the CLI module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from marketing_planner import config as config_module
from marketing_planner.cli import _check_config_toml, build_parser, main
from marketing_planner.seed import DEMO_TEMPLATE_ID


@pytest.fixture
def memory_env(tmp_path: Path, monkeypatch):
	"""Point the CLI at a throwaway memory backend."""
	monkeypatch.setenv("MARKETING_PLANNER_DATA_DIR", str(tmp_path / "data"))
	monkeypatch.setenv("MARKETING_PLANNER_CONFIG_DIR", str(tmp_path / "config"))
	monkeypatch.setenv("MARKETING_PLANNER_BACKEND", "memory")
	monkeypatch.setenv("MARKETING_PLANNER_LOG_LEVEL", "WARNING")
	monkeypatch.setattr(config_module, "_config", None)
	return tmp_path


@pytest.mark.parametrize("command", [
	"templates", "template", "reorder", "toggle-fixed", "plans", "plan", "seed", "web", "doctor",
])
def test_subcommands_registered(command):
	with patch("sys.argv", ["marketing-planner", command, "--help"]):
		with pytest.raises(SystemExit) as exc_info:
			main()
	assert exc_info.value.code == 0


def test_no_command_prints_help():
	with patch("sys.argv", ["marketing-planner"]):
		with pytest.raises(SystemExit) as exc_info:
			main()
	assert exc_info.value.code == 1


def test_parser_reorder_and_toggle():
	parser = build_parser()

	args = parser.parse_args(["reorder", "tpl", "a", "b", "c"])
	assert args.template_id == "tpl"
	assert args.activity_ids == ["a", "b", "c"]

	args = parser.parse_args(["toggle-fixed", "tpl", "--off"])
	assert args.activity_id is None
	assert args.state == "off"

	args = parser.parse_args(["--company", "acme", "toggle-fixed", "tpl", "act"])
	assert args.company == "acme"
	assert args.activity_id == "act"
	assert args.state is None


def test_plans_lists_demo_data(memory_env, capsys):
	with patch("sys.argv", ["marketing-planner", "--company", "company1", "plans"]):
		main()
	out = capsys.readouterr().out
	assert "Q1 Marketing Strategy" in out
	assert "Product Launch Campaign" in out


def test_template_detail(memory_env, capsys):
	with patch("sys.argv", ["marketing-planner", "template", DEMO_TEMPLATE_ID]):
		main()
	out = capsys.readouterr().out
	assert "Content Launch Playbook" in out
	assert "Audience research" in out


def test_reorder_puts_listed_first(memory_env, capsys):
	last = f"{DEMO_TEMPLATE_ID}-social"
	with patch("sys.argv", ["marketing-planner", "reorder", DEMO_TEMPLATE_ID, last]):
		main()
	out = capsys.readouterr().out
	assert out.index("Social push") < out.index("Audience research")


def test_unknown_template_exits_1(memory_env, capsys):
	with patch("sys.argv", ["marketing-planner", "template", "missing"]):
		with pytest.raises(SystemExit) as exc_info:
			main()
	assert exc_info.value.code == 1
	assert "Template not found" in capsys.readouterr().out


def test_plan_detail(memory_env, capsys):
	with patch("sys.argv", ["marketing-planner", "plan", "plan1"]):
		main()
	out = capsys.readouterr().out
	assert "Q1 Marketing Strategy" in out
	assert "Blog Post: Industry Trends" in out


def test_seed_sqlite(tmp_path: Path, monkeypatch, capsys):
	monkeypatch.setenv("MARKETING_PLANNER_DATA_DIR", str(tmp_path / "data"))
	monkeypatch.setenv("MARKETING_PLANNER_CONFIG_DIR", str(tmp_path / "config"))
	monkeypatch.setenv("MARKETING_PLANNER_BACKEND", "sqlite")
	monkeypatch.setenv("MARKETING_PLANNER_LOG_LEVEL", "WARNING")
	monkeypatch.setattr(config_module, "_config", None)

	with patch("sys.argv", ["marketing-planner", "seed"]):
		main()
	assert "Seeded" in capsys.readouterr().out

	with patch("sys.argv", ["marketing-planner", "seed"]):
		main()
	assert "already present" in capsys.readouterr().out


def test_check_config_toml(tmp_path: Path):
	assert _check_config_toml(tmp_path) == ("not found (optional)", None)

	(tmp_path / "config.toml").write_text("backend = \n")
	status, issue = _check_config_toml(tmp_path)
	assert status.startswith("INVALID")
	assert issue is not None

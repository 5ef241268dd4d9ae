"""Tests for the configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from marketing_planner.config import Config, _apply_env_overrides, load_config


def test_config_defaults():
	"""Config should have sensible defaults."""
	config = Config()
	assert config.config_dir.is_absolute()
	assert config.data_dir.is_absolute()
	assert config.db_path == config.data_dir / "planner.db"
	assert config.log_dir == config.data_dir / "logs"
	assert config.backend == "sqlite"
	assert config.web_port == 8430


def test_config_env_overrides():
	"""Environment variables should override defaults."""
	config = Config()
	with patch.dict(os.environ, {
		"MARKETING_PLANNER_DATA_DIR": "/tmp/test-data",
		"MARKETING_PLANNER_CONFIG_DIR": "/tmp/test-config",
		"MARKETING_PLANNER_BACKEND": "memory",
		"MARKETING_PLANNER_WEB_PORT": "9000",
	}):
		config = _apply_env_overrides(config)
		assert config.data_dir == Path("/tmp/test-data")
		assert config.config_dir == Path("/tmp/test-config")
		assert config.backend == "memory"
		assert config.web_port == 9000
		# Derived paths should be recomputed
		assert config.db_path == Path("/tmp/test-data/planner.db")


def test_config_ensure_dirs(tmp_path: Path):
	"""ensure_dirs should create all required directories."""
	config = Config(
		config_dir=tmp_path / "config",
		data_dir=tmp_path / "data",
	)
	assert not config.config_dir.exists()

	config.ensure_dirs()

	assert config.config_dir.exists()
	assert config.data_dir.exists()
	assert config.log_dir.exists()


def test_load_config_creates_dirs(tmp_path: Path):
	"""load_config should create directories."""
	with patch.dict(os.environ, {
		"MARKETING_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"MARKETING_PLANNER_CONFIG_DIR": str(tmp_path / "config"),
	}):
		config = load_config()
		assert config.data_dir.exists()
		assert config.log_dir.exists()


def test_toml_overrides_defaults(tmp_path: Path):
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text(
		'backend = "memory"\ndefault_company_id = "acme"\nweb_port = 9100\n'
	)
	with patch.dict(os.environ, {
		"MARKETING_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"MARKETING_PLANNER_CONFIG_DIR": str(config_dir),
	}):
		config = load_config()
	assert config.backend == "memory"
	assert config.default_company_id == "acme"
	assert config.web_port == 9100


def test_env_beats_toml(tmp_path: Path):
	config_dir = tmp_path / "config"
	config_dir.mkdir()
	(config_dir / "config.toml").write_text('backend = "memory"\nlog_level = "DEBUG"\n')
	with patch.dict(os.environ, {
		"MARKETING_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"MARKETING_PLANNER_CONFIG_DIR": str(config_dir),
		"MARKETING_PLANNER_BACKEND": "sqlite",
	}):
		config = load_config()
	assert config.backend == "sqlite"
	assert config.log_level == "DEBUG"


def test_unknown_backend_rejected(tmp_path: Path):
	with patch.dict(os.environ, {
		"MARKETING_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"MARKETING_PLANNER_CONFIG_DIR": str(tmp_path / "config"),
		"MARKETING_PLANNER_BACKEND": "postgres",
	}):
		with pytest.raises(ValueError, match="Unknown backend"):
			load_config()

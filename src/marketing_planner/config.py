"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs

APP_NAME = "marketing-planner"
APP_AUTHOR = "marketing-planner"

BACKENDS = ("sqlite", "memory")


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	db_path: Path = field(init=False)
	log_dir: Path = field(init=False)

	# User-configurable
	backend: str = "sqlite"
	log_level: str = "INFO"
	default_company_id: Optional[str] = None
	web_port: int = 8430

	def __post_init__(self) -> None:
		self.db_path = self.data_dir / "planner.db"
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


def _apply_env_overrides(config: Config) -> Config:
	"""Apply MARKETING_PLANNER_* environment variable overrides."""
	path_map = {
		"MARKETING_PLANNER_CONFIG_DIR": "config_dir",
		"MARKETING_PLANNER_DATA_DIR": "data_dir",
	}
	for env_key, attr in path_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val))

	value_map = {
		"MARKETING_PLANNER_BACKEND": "backend",
		"MARKETING_PLANNER_LOG_LEVEL": "log_level",
		"MARKETING_PLANNER_COMPANY_ID": "default_company_id",
	}
	for env_key, attr in value_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, val)

	port = os.getenv("MARKETING_PLANNER_WEB_PORT")
	if port:
		config.web_port = int(port)

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	path_fields = {"config_dir", "data_dir"}
	for key, val in data.items():
		if hasattr(config, key):
			if key in path_fields:
				setattr(config, key, Path(os.path.expanduser(val)))
			else:
				setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def _validate(config: Config) -> Config:
	if config.backend not in BACKENDS:
		raise ValueError(
			f"Unknown backend '{config.backend}' (expected one of: {', '.join(BACKENDS)})"
		)
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	config = _apply_env_overrides(config)
	config = _apply_toml(config)
	# env wins over toml, so re-apply after the toml pass
	config = _apply_env_overrides(config)
	config = _validate(config)
	config.ensure_dirs()
	return config


# Used by the CLI entry point only; library code takes a Config explicitly.
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the process config for the CLI."""
	global _config
	if _config is None:
		_config = load_config()
	return _config

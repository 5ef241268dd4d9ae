"""Web JSON API for marketing-planner."""

from __future__ import annotations

from ..config import Config


def create_app(config: Config) -> object:
	"""Create the Starlette ASGI application."""
	from .app import build_app

	return build_app(config=config)


def run_web(config: Config, port: int = 0) -> None:
	"""Run the JSON API server."""
	try:
		import uvicorn
	except ImportError:
		raise SystemExit(
			"Web extras not installed. Install with: pip install -e '.[web]'"
		)

	port = port or config.web_port
	app = create_app(config)

	print(f"API running at http://localhost:{port}/api/health")
	print("Press Ctrl+C to stop.")
	uvicorn.run(app, host="127.0.0.1", port=port, log_level="warning")

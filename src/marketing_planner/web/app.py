"""Starlette app with route assembly."""

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator, Optional

from starlette.applications import Starlette
from starlette.routing import Route

from ..config import Config
from ..context import AppContext
from .api import (
	api_activity_dependencies,
	api_health,
	api_plan_action,
	api_plan_detail,
	api_plans,
	api_reorder,
	api_set_template_fixed,
	api_template_detail,
	api_templates,
	api_toggle_fixed,
)

logger = logging.getLogger(__name__)


def build_app(context: Optional[AppContext] = None, config: Optional[Config] = None) -> Starlette:
	"""
	Build and return the Starlette ASGI app.

	With a ``context`` the caller owns its lifetime. Otherwise one is opened
	from ``config`` on startup and closed on shutdown.
	"""
	if context is None and config is None:
		raise ValueError("build_app needs a context or a config")

	routes = [
		Route("/api/health", api_health),
		Route("/api/templates", api_templates),
		Route("/api/templates/{id}", api_template_detail),
		Route("/api/templates/{id}/reorder", api_reorder, methods=["POST"]),
		Route("/api/templates/{id}/fixed-activities", api_set_template_fixed, methods=["PUT"]),
		Route(
			"/api/templates/{id}/activities/{activity_id}/toggle-fixed",
			api_toggle_fixed, methods=["POST"],
		),
		Route("/api/plans", api_plans),
		Route("/api/plans/{id}", api_plan_detail),
		Route("/api/plans/{id}/activities/{activity_id}/dependencies", api_activity_dependencies),
		Route("/api/plans/{id}/{action}", api_plan_action, methods=["POST"]),
	]

	@contextlib.asynccontextmanager
	async def lifespan(app: Starlette) -> AsyncIterator[None]:
		if context is not None:
			yield
			return
		opened = await AppContext.create(config)
		app.state.context = opened
		logger.info(f"Web API using {config.backend} backend")
		try:
			yield
		finally:
			await opened.close()

	app = Starlette(routes=routes, lifespan=lifespan)
	app.state.context = context
	app.state.company_id = config.default_company_id if config else None
	return app

"""JSON API endpoints over the template and plan stores."""

from __future__ import annotations

import json
from typing import Any, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse

from ..context import AppContext
from ..plans import ReviewAction
from ..state import StoreState


def get_context(request: Request) -> AppContext:
	"""Get the AppContext from app state."""
	return request.app.state.context


def _company_id(request: Request) -> Optional[str]:
	return request.query_params.get("company_id") or request.app.state.company_id


async def _body(request: Request) -> dict[str, Any]:
	raw = await request.body()
	if not raw:
		return {}
	try:
		data = json.loads(raw)
	except json.JSONDecodeError:
		return {}
	return data if isinstance(data, dict) else {}


def _not_found(what: str) -> JSONResponse:
	return JSONResponse({"error": f"{what} not found"}, status_code=404)


def _failed(store: StoreState) -> Optional[JSONResponse]:
	"""400 response carrying the store's error, if the last operation failed."""
	if store.error:
		return JSONResponse({"error": store.error}, status_code=400)
	return None


def _dump(model) -> dict:
	return model.model_dump(mode="json")


# -- health -----------------------------------------------------------------

async def api_health(request: Request) -> JSONResponse:
	return JSONResponse({"status": "ok"})


# -- templates --------------------------------------------------------------

async def api_templates(request: Request) -> JSONResponse:
	"""Templates visible to the requested company."""
	store = get_context(request).templates
	await store.fetch_templates(_company_id(request))
	return _failed(store) or JSONResponse([_dump(t) for t in store.templates])


async def _load_template(request: Request):
	store = get_context(request).templates
	template_id = request.path_params["id"]
	if store.get_template(template_id) is None:
		await store.fetch_templates(_company_id(request))
	return store, store.get_template(template_id)


async def api_template_detail(request: Request) -> JSONResponse:
	store, template = await _load_template(request)
	if template is None:
		return _failed(store) or _not_found("Template")
	data = _dump(template)
	data["activities"] = [_dump(a) for a in template.ordered_activities()]
	return JSONResponse(data)


async def api_reorder(request: Request) -> JSONResponse:
	"""Body: {"activity_ids": [...]} in the desired order."""
	store, template = await _load_template(request)
	if template is None:
		return _not_found("Template")
	body = await _body(request)
	activity_ids = body.get("activity_ids")
	if not isinstance(activity_ids, list):
		return JSONResponse({"error": "activity_ids must be a list"}, status_code=400)

	await store.reorder_activities(template.id, [str(i) for i in activity_ids])
	failed = _failed(store)
	if failed:
		return failed
	updated = store.get_template(template.id)
	return JSONResponse([_dump(a) for a in updated.ordered_activities()])


async def api_toggle_fixed(request: Request) -> JSONResponse:
	store, template = await _load_template(request)
	if template is None:
		return _not_found("Template")
	activity_id = request.path_params["activity_id"]
	if template.get_activity(activity_id) is None:
		return _not_found("Activity")

	await store.toggle_activity_fixed(template.id, activity_id)
	failed = _failed(store)
	if failed:
		return failed
	updated = store.get_template(template.id)
	return JSONResponse({
		"activity": _dump(updated.get_activity(activity_id)),
		"fixed_activities": updated.fixed_activities,
	})


async def api_set_template_fixed(request: Request) -> JSONResponse:
	"""Body: {"fixed": true|false}."""
	store, template = await _load_template(request)
	if template is None:
		return _not_found("Template")
	body = await _body(request)
	fixed = body.get("fixed")
	if not isinstance(fixed, bool):
		return JSONResponse({"error": "fixed must be a boolean"}, status_code=400)

	await store.set_template_fixed_activities(template.id, fixed)
	return _failed(store) or JSONResponse({"id": template.id, "fixed_activities": fixed})


# -- plans ------------------------------------------------------------------

async def api_plans(request: Request) -> JSONResponse:
	store = get_context(request).plans
	await store.fetch_plans(_company_id(request))
	return _failed(store) or JSONResponse([_dump(p) for p in store.plans])


async def _load_plan(request: Request):
	store = get_context(request).plans
	plan_id = request.path_params["id"]
	if store.get_plan(plan_id) is None:
		await store.fetch_plans()
	return store, store.get_plan(plan_id)


async def api_plan_detail(request: Request) -> JSONResponse:
	"""A plan with its activities."""
	store, plan = await _load_plan(request)
	if plan is None:
		return _failed(store) or _not_found("Plan")
	await store.fetch_activities(plan.id)
	failed = _failed(store)
	if failed:
		return failed
	data = _dump(plan)
	data["activities"] = [_dump(a) for a in store.plan_activities(plan.id)]
	return JSONResponse(data)


def _review_action(body: dict[str, Any]) -> ReviewAction:
	return ReviewAction(status=body.get("status"), comments=body.get("comments"))


async def api_plan_action(request: Request) -> JSONResponse:
	"""
	Run one lifecycle transition.

	Actions: send-to-review {reviewer_id}, review {status, comments},
	send-to-approval {approver_id}, approve {status, comments}, activate,
	complete.
	"""
	store, plan = await _load_plan(request)
	if plan is None:
		return _not_found("Plan")
	action = request.path_params["action"]
	body = await _body(request)

	try:
		if action == "send-to-review":
			await store.send_to_review(plan.id, str(body.get("reviewer_id", "")))
		elif action == "review":
			await store.review_plan(plan.id, _review_action(body))
		elif action == "send-to-approval":
			await store.send_to_approval(plan.id, str(body.get("approver_id", "")))
		elif action == "approve":
			await store.approve_plan(plan.id, _review_action(body))
		elif action == "activate":
			await store.activate_plan(plan.id)
		elif action == "complete":
			await store.complete_plan(plan.id)
		else:
			return JSONResponse({"error": f"Unknown action: {action}"}, status_code=404)
	except ValueError as e:
		return JSONResponse({"error": str(e)}, status_code=400)

	return _failed(store) or JSONResponse(_dump(store.get_plan(plan.id)))


async def api_activity_dependencies(request: Request) -> JSONResponse:
	"""Whether an activity may start, and which activities hold it back."""
	store, plan = await _load_plan(request)
	if plan is None:
		return _not_found("Plan")
	await store.fetch_activities(plan.id)
	activity_id = request.path_params["activity_id"]
	if store.get_activity(activity_id) is None:
		return _failed(store) or _not_found("Activity")
	return JSONResponse({
		"activity_id": activity_id,
		"ready": store.check_activity_dependencies(activity_id),
		"blocking": store.blocking_activities(activity_id),
	})

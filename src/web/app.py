"""aiohttp web application — HTML pages plus the investigation JSON API.

Exposes:
- ``GET /``, ``/dashboard/{id}``, ``/chat``, ``/datadog`` → HTML pages
- ``POST /api/investigate/monitor/{id}`` → investigation + dashboard
- ``POST /api/dashboard/data`` → data for one widget config
- ``POST /api/dashboard/resolve`` → data for every widget of a dashboard
- ``GET /api/datadog/monitor/{id}`` → raw monitor JSON
- ``GET /api/datadog/monitor/{id}/history`` → monitor state transitions
- ``GET /api/datadog/monitors`` → monitor search
- ``POST /api/chat`` → one Llama chat turn
- ``GET /api/health`` → liveness

Vendor clients are built per request from the app's factories, so a missing
credential is reported before any network call is made.
"""

from __future__ import annotations

import time
from typing import Any, Callable

import structlog
from aiohttp import web
from pydantic import TypeAdapter, ValidationError

from src.core.config import Settings
from src.core.exceptions import ConfigurationError
from src.core.types import Dashboard, TimeRange, WidgetConfig
from src.dashboard.designer import DashboardDesigner
from src.dashboard.investigator import Investigator
from src.dashboard.resolver import WidgetDataResolver
from src.datadog.client import DatadogClient
from src.datadog.exceptions import DatadogApiError
from src.llm.client import LlamaClient
from src.llm.exceptions import LlamaApiError
from src.web.pages import CHAT_HTML, DASHBOARD_HTML, DATADOG_HTML, INDEX_HTML

logger = structlog.stdlib.get_logger()

DatadogFactory = Callable[[], DatadogClient]
LlamaFactory = Callable[[], LlamaClient]

UNEXPECTED_ERROR = "An unexpected error occurred"

DEFAULT_HISTORY_HOURS = 24
MAX_HISTORY_HOURS = 24 * 30
MAX_SEARCH_PAGE_SIZE = 1000

_widget_config_adapter: TypeAdapter[Any] = TypeAdapter(WidgetConfig)


class RequestError(Exception):
    """Rendered as ``{"error": message}`` with the given HTTP status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(message)


def _error_response(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _config_error(exc: ConfigurationError) -> RequestError:
    return RequestError(
        500,
        f"{exc.variable} is not configured. Please set the {exc.variable} environment variable.",
    )


def _datadog_error(exc: DatadogApiError) -> RequestError:
    if exc.status == 404:
        return RequestError(404, "Monitor not found")
    if exc.status == 403:
        return RequestError(403, "Authentication failed. Please check your API keys.")
    if exc.status == 0:
        return RequestError(502, "Failed to reach Datadog")
    return RequestError(exc.status, "Failed to fetch monitor data")


@web.middleware
async def _error_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    """Turn handler errors into ``{"error": ...}`` JSON responses."""
    try:
        return await handler(request)
    except RequestError as exc:
        return _error_response(exc.status, exc.message)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("web_request_failed", path=request.path, method=request.method)
        return _error_response(500, UNEXPECTED_ERROR)


# ── Request parsing ─────────────────────────────────────────────


def _monitor_id(request: web.Request) -> int:
    raw = request.match_info.get("id", "").strip()
    if not raw:
        raise RequestError(400, "Monitor ID is required")
    try:
        return int(raw)
    except ValueError:
        raise RequestError(400, "Monitor ID must be a number") from None


def _query_int(request: web.Request, name: str, default: int, low: int, high: int) -> int:
    raw = request.query.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RequestError(400, f"{name} must be a number") from None
    if not low <= value <= high:
        raise RequestError(400, f"{name} must be between {low} and {high}")
    return value


async def _json_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise RequestError(400, "Invalid JSON body") from None
    if not isinstance(body, dict):
        raise RequestError(400, "Request body must be a JSON object")
    return body


def _datadog(request: web.Request) -> DatadogClient:
    try:
        return request.app["datadog_factory"]()
    except ConfigurationError as exc:
        raise _config_error(exc) from exc


def _llama(request: web.Request) -> LlamaClient:
    try:
        return request.app["llm_factory"]()
    except ConfigurationError as exc:
        raise _config_error(exc) from exc


# ── Pages ───────────────────────────────────────────────────────


def _html(page: str) -> Callable[[web.Request], Any]:
    async def handler(request: web.Request) -> web.Response:
        return web.Response(text=page, content_type="text/html")

    return handler


# ── API ─────────────────────────────────────────────────────────


async def _handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def _handle_investigate(request: web.Request) -> web.Response:
    monitor_id = _monitor_id(request)
    settings: Settings = request.app["settings"]
    llm = _llama(request)
    datadog = _datadog(request)

    try:
        async with datadog, llm:
            investigator = Investigator(
                datadog,
                DashboardDesigner(llm),
                console_url=settings.datadog.console_url,
            )
            result = await investigator.investigate(monitor_id)
    except DatadogApiError as exc:
        logger.warning("investigation_failed", monitor_id=monitor_id, status=exc.status)
        raise _datadog_error(exc) from exc

    return web.json_response({
        "success": True,
        "investigation": result.investigation,
        "dashboard": result.dashboard.to_json_dict(),
    })


async def _handle_widget_data(request: web.Request) -> web.Response:
    body = await _json_body(request)
    if not body.get("widget_config") or not body.get("time_range"):
        raise RequestError(400, "Widget config and time range are required")
    try:
        config = _widget_config_adapter.validate_python(body["widget_config"])
        time_range = TimeRange.model_validate(body["time_range"])
    except ValidationError as exc:
        raise RequestError(400, f"Invalid widget request: {exc.error_count()} validation error(s)") from exc

    async with _datadog(request) as datadog:
        data = await WidgetDataResolver(datadog).resolve(config, time_range)
    return web.json_response({"data": data.model_dump(mode="json")})


async def _handle_resolve_dashboard(request: web.Request) -> web.Response:
    body = await _json_body(request)
    if not body.get("dashboard"):
        raise RequestError(400, "Dashboard is required")
    try:
        dashboard = Dashboard.model_validate(body["dashboard"])
    except ValidationError as exc:
        raise RequestError(400, f"Invalid dashboard: {exc.error_count()} validation error(s)") from exc

    async with _datadog(request) as datadog:
        results = await WidgetDataResolver(datadog).resolve_all(
            dashboard.widgets,
            dashboard.time_range,
        )
    return web.json_response({
        "data": {widget_id: data.model_dump(mode="json") for widget_id, data in results.items()},
    })


async def _handle_monitor_lookup(request: web.Request) -> web.Response:
    monitor_id = _monitor_id(request)
    try:
        async with _datadog(request) as datadog:
            raw = await datadog.get_monitor_raw(monitor_id)
    except DatadogApiError as exc:
        logger.warning("monitor_lookup_failed", monitor_id=monitor_id, status=exc.status)
        raise _datadog_error(exc) from exc
    return web.json_response(raw)


async def _handle_monitor_history(request: web.Request) -> web.Response:
    monitor_id = _monitor_id(request)
    hours = _query_int(request, "hours", DEFAULT_HISTORY_HOURS, 1, MAX_HISTORY_HOURS)
    to_ts = int(time.time())
    from_ts = to_ts - hours * 3600
    try:
        async with _datadog(request) as datadog:
            history = await datadog.get_monitor_history(monitor_id, from_ts, to_ts)
    except DatadogApiError as exc:
        logger.warning("monitor_history_failed", monitor_id=monitor_id, status=exc.status)
        raise _datadog_error(exc) from exc
    return web.json_response({
        "monitor_id": monitor_id,
        "from_ts": from_ts,
        "to_ts": to_ts,
        "history": history,
    })


async def _handle_monitor_search(request: web.Request) -> web.Response:
    query = request.query.get("query", "").strip()
    if not query:
        raise RequestError(400, "Search query is required")
    page = _query_int(request, "page", 0, 0, 10_000)
    per_page = _query_int(request, "per_page", 30, 1, MAX_SEARCH_PAGE_SIZE)
    try:
        async with _datadog(request) as datadog:
            results = await datadog.search_monitors(query, page=page, per_page=per_page)
    except DatadogApiError as exc:
        logger.warning("monitor_search_failed", query=query, status=exc.status)
        if exc.status == 404:
            raise RequestError(404, "No monitors found") from exc
        raise _datadog_error(exc) from exc
    return web.json_response(results)


async def _handle_chat(request: web.Request) -> web.Response:
    body = await _json_body(request)
    message = body.get("message") or None
    image = body.get("image") or None
    if not message and not image:
        raise RequestError(400, "Message or image is required")
    if not isinstance(message, (str, type(None))) or not isinstance(image, (str, type(None))):
        raise RequestError(400, "Message and image must be strings")

    try:
        async with _llama(request) as llm:
            completion = await llm.chat(message, image)
    except LlamaApiError as exc:
        status = exc.status if exc.status >= 400 else 502
        logger.warning("chat_failed", status=exc.status)
        raise RequestError(status, str(exc)) from exc

    return web.json_response({
        "success": True,
        "response": completion.text,
        "metrics": [m.model_dump() for m in completion.metrics],
        "id": completion.id,
    })


def create_web_app(
    settings: Settings,
    datadog_factory: DatadogFactory | None = None,
    llm_factory: LlamaFactory | None = None,
) -> web.Application:
    """Create the aiohttp web application."""
    app = web.Application(middlewares=[_error_middleware])
    app["settings"] = settings
    app["datadog_factory"] = datadog_factory or (lambda: DatadogClient(settings.datadog))
    app["llm_factory"] = llm_factory or (lambda: LlamaClient(settings.llm))

    app.router.add_get("/", _html(INDEX_HTML))
    app.router.add_get("/dashboard/{id}", _html(DASHBOARD_HTML))
    app.router.add_get("/chat", _html(CHAT_HTML))
    app.router.add_get("/datadog", _html(DATADOG_HTML))

    app.router.add_get("/api/health", _handle_health)
    app.router.add_post("/api/investigate/monitor/{id}", _handle_investigate)
    app.router.add_post("/api/dashboard/data", _handle_widget_data)
    app.router.add_post("/api/dashboard/resolve", _handle_resolve_dashboard)
    app.router.add_get("/api/datadog/monitor/{id}", _handle_monitor_lookup)
    app.router.add_get("/api/datadog/monitor/{id}/history", _handle_monitor_history)
    app.router.add_get("/api/datadog/monitors", _handle_monitor_search)
    app.router.add_post("/api/chat", _handle_chat)
    return app


async def start_web_server(
    settings: Settings,
    host: str | None = None,
    port: int | None = None,
) -> web.AppRunner:
    """Start the web server. Returns the runner for cleanup."""
    app = create_web_app(settings)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host or settings.web.host, port or settings.web.port)
    await site.start()
    logger.info(
        "web_server_started",
        host=host or settings.web.host,
        port=port or settings.web.port,
    )
    return runner

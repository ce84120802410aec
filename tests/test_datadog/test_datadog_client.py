"""Tests for DatadogClient — auth headers, request shapes, error mapping."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.core.config import DatadogConfig
from src.core.exceptions import ConfigurationError
from src.core.types import MonitorState
from src.datadog.client import DatadogClient
from src.datadog.exceptions import DatadogApiError, DatadogConnectionError

# ── Helpers ─────────────────────────────────────────────────────


def _cfg(**overrides: object) -> DatadogConfig:
    return DatadogConfig(
        api_key="dd-key",  # type: ignore[arg-type]
        app_key="dd-app",  # type: ignore[arg-type]
        site="datadoghq.test",
        **overrides,  # type: ignore[arg-type]
    )


def _response(status: int, body: object = None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", "https://api.datadoghq.test/api/v1/monitor/1")
    if text is not None:
        return httpx.Response(status, text=text, request=request)
    return httpx.Response(status, json=body, request=request)


async def _connected() -> DatadogClient:
    client = DatadogClient(_cfg())
    await client.connect()
    return client


# ── Construction ────────────────────────────────────────────────


class TestConstruction:
    def test_missing_api_key_raises_before_connect(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            DatadogClient(DatadogConfig(app_key="x"))  # type: ignore[arg-type]
        assert exc_info.value.variable == "DATADOG_API_KEY"

    async def test_connect_sets_auth_headers(self) -> None:
        client = await _connected()
        try:
            assert client.connected
            headers = client._http.headers  # type: ignore[union-attr]
            assert headers["DD-API-KEY"] == "dd-key"
            assert headers["DD-APPLICATION-KEY"] == "dd-app"
            assert str(client._http.base_url).startswith("https://api.datadoghq.test")  # type: ignore[union-attr]
        finally:
            await client.close()
        assert not client.connected

    async def test_context_manager_closes(self) -> None:
        async with DatadogClient(_cfg()) as client:
            assert client.connected
        assert not client.connected

    async def test_request_without_connect_raises(self) -> None:
        client = DatadogClient(_cfg())
        with pytest.raises(DatadogConnectionError):
            await client.request("GET", "/api/v1/monitor/1")


# ── Monitors ────────────────────────────────────────────────────


class TestMonitors:
    async def test_get_monitor_parses_payload(self) -> None:
        client = await _connected()
        body = {
            "id": 20829685,
            "name": "API latency",
            "type": "metric alert",
            "query": "avg:latency{service:api}",
            "tags": ["service:api"],
            "overall_state": "Alert",
        }
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, body)
            monitor = await client.get_monitor(20829685)

        mock_req.assert_awaited_once()
        assert mock_req.call_args.args == ("GET", "/api/v1/monitor/20829685")
        assert monitor.id == 20829685
        assert monitor.overall_state == MonitorState.ALERT
        await client.close()

    async def test_not_found_raises_api_error(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(404, {"errors": ["Monitor not found"]})
            with pytest.raises(DatadogApiError) as exc_info:
                await client.get_monitor(1)

        assert exc_info.value.status == 404
        assert "Monitor not found" in exc_info.value.body
        assert str(exc_info.value).startswith("Datadog API Error: 404")
        await client.close()

    async def test_forbidden_raises_api_error(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(403, {"errors": ["Forbidden"]})
            with pytest.raises(DatadogApiError) as exc_info:
                await client.get_monitor_raw(1)
        assert exc_info.value.status == 403
        await client.close()

    async def test_unexpected_payload_raises_api_error(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, {"name": "no id"})
            with pytest.raises(DatadogApiError) as exc_info:
                await client.get_monitor(1)
        assert exc_info.value.status == 502
        await client.close()

    async def test_search_monitors_params(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, {"monitors": []})
            await client.search_monitors("status:alert", page=2)

        assert mock_req.call_args.kwargs["params"] == {
            "query": "status:alert",
            "page": 2,
            "per_page": 30,
        }
        await client.close()

    async def test_monitor_history_path(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, [{"state": "Alert"}])
            history = await client.get_monitor_history(7, 100, 200)

        assert history == [{"state": "Alert"}]
        assert mock_req.call_args.args[1] == "/api/v1/monitor/7/state_history"
        assert mock_req.call_args.kwargs["params"] == {"from_ts": 100, "to_ts": 200}
        await client.close()


# ── Metrics and logs ────────────────────────────────────────────


class TestQueries:
    async def test_query_metrics_passes_second_bounds(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, {"series": []})
            body = await client.query_metrics("avg:cpu{*}", 1000, 4600)

        assert body == {"series": []}
        assert mock_req.call_args.args == ("GET", "/api/v1/query")
        assert mock_req.call_args.kwargs["params"] == {"query": "avg:cpu{*}", "from": 1000, "to": 4600}
        await client.close()

    async def test_search_logs_body(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, {"data": []})
            await client.search_logs("status:error", "2024-01-01T00:00:00Z", "2024-01-01T01:00:00Z", limit=25)

        assert mock_req.call_args.args == ("POST", "/api/v2/logs/events/search")
        assert mock_req.call_args.kwargs["json"] == {
            "filter": {
                "query": "status:error",
                "from": "2024-01-01T00:00:00Z",
                "to": "2024-01-01T01:00:00Z",
            },
            "sort": "-timestamp",
            "page": {"limit": 25},
        }
        await client.close()

    async def test_transport_error_has_status_zero(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.side_effect = httpx.ConnectError("connection refused")
            with pytest.raises(DatadogApiError) as exc_info:
                await client.query_metrics("q", 0, 1)
        assert exc_info.value.status == 0
        assert exc_info.value.status_text == "Network Error"
        await client.close()

    async def test_invalid_json_raises_api_error(self) -> None:
        client = await _connected()
        with patch.object(client._http, "request", new_callable=AsyncMock) as mock_req:
            mock_req.return_value = _response(200, text="<html>oops</html>")
            with pytest.raises(DatadogApiError):
                await client.query_metrics("q", 0, 1)
        await client.close()

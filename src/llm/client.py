"""Async client for the Llama chat-completions API."""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field

from src.core.config import LlamaConfig, get_settings
from src.llm.exceptions import LlamaApiError, LlamaConnectionError

logger = structlog.stdlib.get_logger()

SRE_SYSTEM_PROMPT = (
    "You are an expert Site Reliability Engineer helping to investigate and "
    "resolve incidents. Always respond with valid JSON when asked."
)


class LlamaMetric(BaseModel):
    """One usage metric reported with a completion (tokens, latency, ...)."""

    metric: str
    value: float
    unit: str = ""


class LlamaCompletion(BaseModel):
    """Text produced by one chat completion plus its usage metrics."""

    id: str = ""
    text: str = ""
    stop_reason: str = ""
    metrics: list[LlamaMetric] = Field(default_factory=list)


def _parse_completion(body: Any) -> LlamaCompletion:
    """Convert the API response body into a LlamaCompletion.

    Expected structure::

        {
            "id": "...",
            "completion_message": {
                "role": "assistant",
                "stop_reason": "stop",
                "content": {"type": "text", "text": "..."}
            },
            "metrics": [{"metric": "num_total_tokens", "value": 42, "unit": "tokens"}]
        }
    """
    if not isinstance(body, dict):
        return LlamaCompletion()

    message = body.get("completion_message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, dict):
        text = str(content.get("text") or "")
    elif isinstance(content, str):
        text = content
    else:
        text = ""

    metrics: list[LlamaMetric] = []
    for raw in body.get("metrics") or []:
        if isinstance(raw, dict) and "metric" in raw:
            try:
                metrics.append(LlamaMetric.model_validate(raw))
            except ValueError:
                continue

    return LlamaCompletion(
        id=str(body.get("id") or ""),
        text=text,
        stop_reason=str(message.get("stop_reason") or "") if isinstance(message, dict) else "",
        metrics=metrics,
    )


def build_user_content(message: str | None, image_b64: str | None) -> list[dict[str, Any]]:
    """Build a multimodal user message: optional text plus optional JPEG image."""
    content: list[dict[str, Any]] = []
    if message:
        content.append({"type": "text", "text": message})
    if image_b64:
        content.append({
            "type": "image_url",
            "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"},
        })
    return content


class LlamaClient:
    """Single-turn chat completions against the Llama API.

    Usage::

        async with LlamaClient(settings.llm) as llm:
            completion = await llm.complete(user_prompt)
    """

    def __init__(self, config: LlamaConfig | None = None) -> None:
        cfg = config or get_settings().llm
        self._api_key = cfg.require()
        self._config = cfg
        self._http: httpx.AsyncClient | None = None

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    async def connect(self) -> None:
        """Create the httpx async client."""
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(self._config.timeout_secs),
        )

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> LlamaClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _post(self, payload: dict[str, Any]) -> LlamaCompletion:
        if self._http is None:
            raise LlamaConnectionError("HTTP client not connected")

        try:
            response = await self._http.post("/chat/completions", json=payload)
        except httpx.HTTPError as exc:
            raise LlamaApiError(0, f"request failed: {exc}") from exc

        if response.is_error:
            try:
                details: Any = response.json()
            except ValueError:
                details = response.text[:500]
            logger.warning(
                "llama_api_error",
                status=response.status_code,
                details=details,
            )
            raise LlamaApiError(response.status_code, response.reason_phrase, details)

        try:
            body = response.json()
        except ValueError as exc:
            raise LlamaApiError(response.status_code, "invalid JSON in response") from exc

        completion = _parse_completion(body)
        logger.debug(
            "llama_completion",
            completion_id=completion.id,
            chars=len(completion.text),
        )
        return completion

    async def complete(
        self,
        user_prompt: str,
        system_prompt: str = SRE_SYSTEM_PROMPT,
    ) -> LlamaCompletion:
        """Run one system + user completion and return the generated text."""
        payload = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }
        return await self._post(payload)

    async def chat(self, message: str | None, image_b64: str | None = None) -> LlamaCompletion:
        """Send one user turn (text and/or base64 image) without a system prompt."""
        payload = {
            "model": self._config.model,
            "messages": [
                {"role": "user", "content": build_user_content(message, image_b64)},
            ],
        }
        return await self._post(payload)

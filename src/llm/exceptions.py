"""Exception hierarchy for the Llama API client."""

from __future__ import annotations

from typing import Any


class LlamaError(Exception):
    """Base exception for all LLM client errors."""


class LlamaApiError(LlamaError):
    """The chat-completions call failed.

    ``status`` is 0 for transport failures. ``details`` holds the decoded
    error body when the API returned JSON.
    """

    def __init__(self, status: int, message: str, details: Any = None) -> None:
        self.status = status
        self.details = details
        super().__init__(f"Llama API error: {status} {message}")


class LlamaConnectionError(LlamaError):
    """The HTTP client is not connected."""

"""Llama chat-completions client."""

from src.llm.client import LlamaClient, LlamaCompletion, LlamaMetric
from src.llm.exceptions import LlamaApiError, LlamaConnectionError, LlamaError

__all__ = [
    "LlamaApiError",
    "LlamaClient",
    "LlamaCompletion",
    "LlamaConnectionError",
    "LlamaError",
    "LlamaMetric",
]

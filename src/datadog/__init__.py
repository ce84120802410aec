"""Datadog API client."""

from src.datadog.client import DatadogClient
from src.datadog.exceptions import DatadogApiError, DatadogConnectionError, DatadogError

__all__ = [
    "DatadogApiError",
    "DatadogClient",
    "DatadogConnectionError",
    "DatadogError",
]

"""Exception hierarchy for the Datadog API client."""

from __future__ import annotations


class DatadogError(Exception):
    """Base exception for all Datadog client errors."""


class DatadogApiError(DatadogError):
    """Datadog returned a non-2xx response, or the request never completed.

    ``status`` is 0 for transport failures (DNS, TLS, timeouts).
    """

    def __init__(self, status: int, status_text: str, body: str = "") -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(f"Datadog API Error: {status} {status_text} - {body}")


class DatadogConnectionError(DatadogError):
    """The HTTP client is not connected."""

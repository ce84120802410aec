"""Best-effort service-name extraction from a monitor's tags and query."""

from __future__ import annotations

import re

from src.core.types import Monitor

_SERVICE_TAG_PREFIX = "service:"
_SERVICE_IN_QUERY = re.compile(r"service:([a-zA-Z0-9_-]+)")


def extract_service(monitor: Monitor) -> str | None:
    """Return the service a monitor watches, or None if none is named.

    Checks ``service:<name>`` tags first, then a ``service:<name>`` token in
    the monitor query. Purely textual; the service is not validated.
    """
    for tag in monitor.tags:
        if tag.startswith(_SERVICE_TAG_PREFIX):
            name = tag[len(_SERVICE_TAG_PREFIX):].split(":", 1)[0]
            if name:
                return name

    match = _SERVICE_IN_QUERY.search(monitor.query)
    if match:
        return match.group(1)

    return None

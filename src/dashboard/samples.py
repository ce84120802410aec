"""Synthetic sample data used when live Datadog data is empty or unavailable.

Shapes are fixed (point counts, entry counts, value bounds); values come
from an injectable ``random.Random`` so tests can seed it.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from src.core.types import (
    DataPoint,
    LogEntry,
    LogLevel,
    MetricData,
    MetricStatus,
    MetricTrend,
    SeriesData,
)

SAMPLE_POINT_COUNT = 20
SAMPLE_LOGS_MIN = 5
SAMPLE_LOGS_MAX = 10

_SEASONAL_CYCLES = 4
_TREND_SCALE = 30.0
_AMPLITUDE_JITTER = 0.015


@dataclass(frozen=True)
class SeriesProfile:
    """Shape parameters for one family of metric names."""

    keywords: tuple[str, ...]
    base_value: float
    amplitude: float
    trend_bias: float
    seasonal_intensity: float
    percent_bounded: bool = False


# First match wins, so "error rate" is an error series, not a throughput one.
_PROFILES: tuple[SeriesProfile, ...] = (
    SeriesProfile(("queue",), base_value=25.0, amplitude=8.0, trend_bias=0.6, seasonal_intensity=0.4),
    SeriesProfile(
        ("memory", "cpu"),
        base_value=45.0,
        amplitude=10.0,
        trend_bias=0.3,
        seasonal_intensity=0.8,
        percent_bounded=True,
    ),
    SeriesProfile(("error", "fail"), base_value=2.0, amplitude=1.5, trend_bias=0.2, seasonal_intensity=0.3),
    SeriesProfile(
        ("latency", "response", "duration"),
        base_value=180.0,
        amplitude=40.0,
        trend_bias=0.5,
        seasonal_intensity=0.6,
    ),
    SeriesProfile(
        ("throughput", "requests", "rate"),
        base_value=850.0,
        amplitude=120.0,
        trend_bias=0.1,
        seasonal_intensity=1.0,
    ),
)

_DEFAULT_PROFILE = SeriesProfile((), base_value=50.0, amplitude=10.0, trend_bias=0.0, seasonal_intensity=0.5)

_SAMPLE_LOGS: tuple[tuple[LogLevel, str], ...] = (
    (LogLevel.ERROR, "Connection timeout to database"),
    (LogLevel.INFO, "Successfully processed request"),
    (LogLevel.WARN, "Rate limit warning: approaching threshold"),
    (LogLevel.DEBUG, "Debug: Cache hit for key user_123"),
    (LogLevel.ERROR, "Error: Failed to parse JSON response"),
    (LogLevel.WARN, "Retrying upstream call after 503 response"),
    (LogLevel.INFO, "Health check passed"),
)


def profile_for(metric_name: str) -> SeriesProfile:
    """Classify a metric name by case-insensitive keyword match."""
    lowered = metric_name.lower()
    for profile in _PROFILES:
        if any(keyword in lowered for keyword in profile.keywords):
            return profile
    return _DEFAULT_PROFILE


def metric_status_for(value: float) -> MetricStatus:
    """Status rule used for sample metric values."""
    if value > 80:
        return MetricStatus.CRITICAL
    if value > 60:
        return MetricStatus.WARNING
    return MetricStatus.OK


class SampleDataGenerator:
    """Produces placeholder series, metric values and log entries."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def timeseries(
        self,
        metric_name: str,
        from_ms: float,
        to_ms: float,
        points: int = SAMPLE_POINT_COUNT,
    ) -> SeriesData:
        """Generate one series of ``points`` values evenly spanning [from_ms, to_ms]."""
        profile = profile_for(metric_name)
        span = to_ms - from_ms
        amplitude = profile.amplitude

        data: list[DataPoint] = []
        for i in range(points):
            progress = i / (points - 1) if points > 1 else 0.0
            trend = profile.base_value + profile.trend_bias * progress * _TREND_SCALE
            seasonal = (
                math.sin(progress * _SEASONAL_CYCLES * 2 * math.pi)
                * amplitude
                * profile.seasonal_intensity
            )
            noise = (self._rng.random() - 0.5) * amplitude
            amplitude *= 1 + (self._rng.random() * 2 - 1) * _AMPLITUDE_JITTER

            value = max(0.0, trend + seasonal + noise)
            if profile.percent_bounded:
                value = min(100.0, value)

            data.append(DataPoint(timestamp=from_ms + span * progress, value=round(value, 2)))

        return SeriesData(name=metric_name, data=data)

    def metric(self, error: str | None = None) -> MetricData:
        """Generate a random single value in [0, 100) with a random trend."""
        value = self._rng.random() * 100
        return MetricData(
            value=value,
            trend=self._rng.choice(list(MetricTrend)),
            change_percent=(self._rng.random() - 0.5) * 20,
            status=metric_status_for(value),
            error=error,
        )

    def logs(self, to_ms: float, service: str = "api-service") -> list[LogEntry]:
        """Generate 5–10 log entries, newest first, one minute apart."""
        count = self._rng.randint(SAMPLE_LOGS_MIN, SAMPLE_LOGS_MAX)
        entries: list[LogEntry] = []
        for i in range(count):
            level, message = self._rng.choice(_SAMPLE_LOGS)
            entries.append(LogEntry(
                id=f"sample-{i}",
                timestamp=to_ms - i * 60_000,
                level=level,
                service=service,
                message=message,
                attributes={"host": "api-server-01", "env": "production", "sample": True},
            ))
        return entries

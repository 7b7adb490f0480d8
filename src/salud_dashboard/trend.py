"""Análisis de tendencia semanal de la velocidad de marcha."""

from __future__ import annotations

from collections.abc import Sequence

from salud_dashboard.model import (
    DailyMetricSample,
    TrendDirection,
    WalkingSpeedTrend,
)

WINDOW_DAYS = 7
MIN_SAMPLES = 2 * WINDOW_DAYS
CHANGE_THRESHOLD_PCT = 5.0


def analyze_walking_speed(
    samples: Sequence[DailyMetricSample],
) -> WalkingSpeedTrend | None:
    """Compare the last 7 samples with the 7 before them.

    Samples older than the last 14 are ignored. Input order does not matter.

    Args:
        samples: Daily walking-speed samples (m/s).

    Returns:
        The trend, or None with fewer than 14 samples or when the previous
        window averages 0 (change percentage undefined).
    """
    if len(samples) < MIN_SAMPLES:
        return None

    ordered = sorted(samples, key=lambda s: s.day)
    recent = ordered[-WINDOW_DAYS:]
    previous = ordered[-MIN_SAMPLES:-WINDOW_DAYS]

    current_avg = _mean(recent)
    previous_avg = _mean(previous)
    if previous_avg == 0:
        return None

    # 9 decimales: 1.05 vs 1.00 debe dar exactamente +5%.
    change = round((current_avg - previous_avg) / previous_avg * 100, 9)
    return WalkingSpeedTrend(
        current_speed=current_avg,
        previous_speed=previous_avg,
        change_percentage=change,
        trend=classify_change(change),
    )


def classify_change(change_percentage: float) -> TrendDirection:
    """Inclusive ±5% bounds: exactly +5 is improving, exactly -5 declining."""
    if change_percentage >= CHANGE_THRESHOLD_PCT:
        return TrendDirection.IMPROVING
    if change_percentage <= -CHANGE_THRESHOLD_PCT:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def _mean(samples: Sequence[DailyMetricSample]) -> float:
    return sum(s.value for s in samples) / len(samples)

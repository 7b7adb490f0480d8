"""Agregación diaria y semanal de las métricas del store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, tzinfo

from salud_dashboard.config import DashboardConfig
from salud_dashboard.model import (
    ActivityProgress,
    ActivityType,
    DailyMetricSample,
    TodaySummary,
    WalkingSpeedSample,
    WeeklyAggregate,
)
from salud_dashboard.sources.base import (
    Metric,
    Reduction,
    SampleStore,
    default_reduction,
)

logger = logging.getLogger(__name__)

TODAY_METRICS: tuple[Metric, ...] = (
    Metric.STEPS,
    Metric.DISTANCE,
    Metric.ACTIVE_ENERGY,
    Metric.FLIGHTS_CLIMBED,
    Metric.WALKING_SPEED,
)

WEEKLY_METRICS: dict[Metric, tuple[str, str]] = {
    Metric.STEPS: ("Weekly steps", "steps"),
    Metric.DISTANCE: ("Weekly distance", "m"),
    Metric.ACTIVE_ENERGY: ("Weekly active energy", "kcal"),
    Metric.FLIGHTS_CLIMBED: ("Weekly flights climbed", "flights"),
}


def start_of_day(moment: datetime) -> datetime:
    """Local midnight of ``moment``'s calendar day (keeps its tzinfo)."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def window_start(now: datetime, window_days: int) -> datetime:
    """First local midnight of a window of ``window_days`` days ending today."""
    return start_of_day(now) - timedelta(days=max(window_days, 1) - 1)


class Aggregator:
    """Turns store query results into typed daily records."""

    def __init__(
        self,
        store: SampleStore,
        local_tz: tzinfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Create the aggregator.

        Args:
            store: Sample store adapter.
            local_tz: Zone whose wall-clock midnight delimits days.
            clock: Returns "now"; defaults to the current local time.
        """
        self._store = store
        self._tz = local_tz
        self._clock = clock

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock().astimezone(self._tz)
        return datetime.now(tz=self._tz)

    async def today_scalar(
        self, metric: Metric, reduction: Reduction | None = None
    ) -> float:
        """Reduce today's samples; no samples yet counts as 0.0."""
        now = self.now()
        kind = reduction or default_reduction(metric)
        value = await self._store.query(metric, start_of_day(now), now, kind)
        logger.debug("today %s (%s) = %s", metric.value, kind.value, value)
        return value if value is not None else 0.0

    async def today_summary(self) -> TodaySummary:
        """Fetch every today scalar, one query after another."""
        scalars: dict[Metric, float] = {}
        for metric in TODAY_METRICS:
            scalars[metric] = await self.today_scalar(metric)
        return TodaySummary.from_scalars(scalars)

    async def daily_series(
        self, metric: Metric, window_days: int
    ) -> list[DailyMetricSample]:
        """Per-day values over the last ``window_days`` local days.

        Walking-speed days without a positive average are dropped; other
        metrics keep their zero days.
        """
        now = self.now()
        buckets = await self._store.query_collection(
            metric,
            window_start(now, window_days),
            now,
            default_reduction(metric),
        )
        return samples_from_buckets(metric, buckets)

    async def walking_speed_series(
        self, window_days: int
    ) -> list[WalkingSpeedSample]:
        samples = await self.daily_series(Metric.WALKING_SPEED, window_days)
        return [s for s in samples if isinstance(s, WalkingSpeedSample)]


def samples_from_buckets(
    metric: Metric, buckets: Sequence[tuple[datetime, float | None]]
) -> list[DailyMetricSample]:
    """Convert ``(bucket_start, value)`` pairs into daily samples."""
    out: list[DailyMetricSample] = []
    for bucket_start, raw in buckets:
        value = raw if raw is not None else 0.0
        if metric is Metric.WALKING_SPEED:
            if value <= 0:
                continue
            out.append(WalkingSpeedSample(day=bucket_start.date(), value=value))
        else:
            out.append(DailyMetricSample(day=bucket_start.date(), value=value))
    return out


def weekly_aggregate(
    metric: Metric, samples: Sequence[DailyMetricSample]
) -> WeeklyAggregate:
    """Titled weekly aggregate for a cumulative metric."""
    title, unit = WEEKLY_METRICS.get(metric, (metric.value, ""))
    return WeeklyAggregate.from_samples(title, unit, samples)


def activity_progress(
    today: TodaySummary, config: DashboardConfig
) -> tuple[ActivityProgress, ...]:
    """Progress cards for today's activity against the configured goals."""
    return (
        ActivityProgress(ActivityType.STEPS, today.steps, config.step_goal, "steps"),
        ActivityProgress(
            ActivityType.DISTANCE, today.distance_km, config.distance_goal_km, "km"
        ),
        ActivityProgress(
            ActivityType.ACTIVE_ENERGY,
            today.active_energy_kcal,
            config.energy_goal_kcal,
            "kcal",
        ),
        # Sin fuente de minutos de ejercicio: la tarjeta queda en cero.
        ActivityProgress(
            ActivityType.EXERCISE_TIME, 0.0, config.exercise_goal_min, "min"
        ),
    )

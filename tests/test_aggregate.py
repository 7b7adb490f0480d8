"""Tests for daily/today aggregation over a sample store."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from conftest import LOCAL_TZ, NOW, TODAY, at, samples_frame
from salud_dashboard.aggregate import (
    Aggregator,
    activity_progress,
    samples_from_buckets,
    start_of_day,
    weekly_aggregate,
    window_start,
)
from salud_dashboard.config import DashboardConfig
from salud_dashboard.model import (
    ActivityType,
    DailyMetricSample,
    TodaySummary,
    WalkingSpeedSample,
)
from salud_dashboard.sources.base import Metric, Reduction, SampleStore
from salud_dashboard.sources.frame_store import FrameSampleStore


class _RecordingStore(SampleStore):
    def __init__(self) -> None:
        self.calls: list[tuple[str, Metric, datetime, datetime, Reduction]] = []

    async def query(
        self, metric: Metric, start: datetime, end: datetime, reduction: Reduction
    ) -> float | None:
        self.calls.append(("query", metric, start, end, reduction))
        return None

    async def query_collection(
        self, metric: Metric, start: datetime, end: datetime, reduction: Reduction
    ) -> list[tuple[datetime, float | None]]:
        self.calls.append(("collection", metric, start, end, reduction))
        return []


def test_start_of_day_and_window_start() -> None:
    assert start_of_day(NOW) == TODAY
    assert window_start(NOW, 7) == TODAY - timedelta(days=6)
    assert window_start(NOW, 1) == TODAY


@pytest.mark.asyncio
async def test_today_scalar_null_is_zero_and_uses_reduction() -> None:
    store = _RecordingStore()
    agg = Aggregator(store, LOCAL_TZ, clock=lambda: NOW)

    assert await agg.today_scalar(Metric.STEPS) == 0.0
    assert await agg.today_scalar(Metric.WALKING_SPEED) == 0.0

    assert store.calls[0] == ("query", Metric.STEPS, TODAY, NOW, Reduction.SUM)
    assert store.calls[1][-1] is Reduction.AVERAGE


@pytest.mark.asyncio
async def test_today_summary_queries_every_metric_serially() -> None:
    store = FrameSampleStore(
        samples_frame(
            [
                (at(0, 8), Metric.STEPS, 8543.0),
                (at(0, 8), Metric.DISTANCE, 6234.5),
                (at(0, 8), Metric.ACTIVE_ENERGY, 423.7),
                (at(0, 8), Metric.FLIGHTS_CLIMBED, 12.0),
                (at(0, 8), Metric.WALKING_SPEED, 1.1),
            ]
        )
    )
    agg = Aggregator(store, LOCAL_TZ, clock=lambda: NOW)
    today = await agg.today_summary()
    assert today == TodaySummary(
        steps=8543,
        distance_m=6234.5,
        active_energy_kcal=423.7,
        flights_climbed=12,
        walking_speed_mps=1.1,
    )


@pytest.mark.asyncio
async def test_daily_series_keeps_zero_step_days() -> None:
    store = FrameSampleStore(
        samples_frame([(at(0), Metric.STEPS, 500.0), (at(3), Metric.STEPS, 900.0)])
    )
    agg = Aggregator(store, LOCAL_TZ, clock=lambda: NOW)
    series = await agg.daily_series(Metric.STEPS, 7)

    assert len(series) == 7
    assert series[0].day == (TODAY - timedelta(days=6)).date()
    assert series[-1] == DailyMetricSample(TODAY.date(), 500.0)
    assert [s.value for s in series] == [0.0, 0.0, 0.0, 900.0, 0.0, 0.0, 500.0]


@pytest.mark.asyncio
async def test_walking_speed_series_drops_empty_days() -> None:
    store = FrameSampleStore(
        samples_frame(
            [
                (at(0), Metric.WALKING_SPEED, 1.1),
                (at(2), Metric.WALKING_SPEED, 0.0),
                (at(29), Metric.WALKING_SPEED, 0.9),
                (at(30), Metric.WALKING_SPEED, 1.5),
            ]
        )
    )
    agg = Aggregator(store, LOCAL_TZ, clock=lambda: NOW)
    series = await agg.walking_speed_series(30)

    assert [s.day for s in series] == [
        (TODAY - timedelta(days=29)).date(),
        TODAY.date(),
    ]
    assert all(isinstance(s, WalkingSpeedSample) for s in series)


def test_samples_from_buckets_coalesces_nulls() -> None:
    buckets = [(TODAY - timedelta(days=1), None), (TODAY, 3.0)]
    steps = samples_from_buckets(Metric.STEPS, buckets)
    assert [s.value for s in steps] == [0.0, 3.0]

    speeds = samples_from_buckets(Metric.WALKING_SPEED, buckets)
    assert speeds == [WalkingSpeedSample(TODAY.date(), 3.0)]


def test_weekly_aggregate_titles() -> None:
    agg = weekly_aggregate(Metric.STEPS, [DailyMetricSample(date(2025, 12, 1), 10.0)])
    assert agg.title == "Weekly steps"
    assert agg.unit == "steps"
    assert agg.average_value == 10.0


def test_activity_progress_cards() -> None:
    today = TodaySummary(steps=8543, distance_m=6234.5, active_energy_kcal=600.0)
    cards = activity_progress(today, DashboardConfig())
    by_type = {card.type: card for card in cards}
    assert by_type[ActivityType.STEPS].progress_percentage == 85
    assert by_type[ActivityType.DISTANCE].value == pytest.approx(6.2345)
    assert by_type[ActivityType.ACTIVE_ENERGY].progress == 1.0
    assert by_type[ActivityType.EXERCISE_TIME].progress == 0.0

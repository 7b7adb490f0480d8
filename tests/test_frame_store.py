"""Tests for the pandas-backed sample store."""

from __future__ import annotations

from datetime import timedelta

import pandas as pd
import pytest

from conftest import NOW, TODAY, at, samples_frame
from salud_dashboard.sources.base import (
    DataTypeUnavailableError,
    Metric,
    Reduction,
)
from salud_dashboard.sources.frame_store import FrameSampleStore, empty_samples


def _store() -> FrameSampleStore:
    return FrameSampleStore(
        samples_frame(
            [
                (at(0, 8), Metric.STEPS, 1000.0),
                (at(0, 12), Metric.STEPS, 2500.0),
                (at(0, 16), Metric.STEPS, 9999.0),  # después de NOW
                (at(1, 23), Metric.STEPS, 700.0),
                (at(0, 9), Metric.WALKING_SPEED, 1.0),
                (at(0, 11), Metric.WALKING_SPEED, 1.2),
                (at(2, 9), Metric.WALKING_SPEED, 0.9),
            ]
        )
    )


@pytest.mark.asyncio
async def test_query_sum_is_half_open() -> None:
    store = _store()
    total = await store.query(Metric.STEPS, TODAY, NOW, Reduction.SUM)
    assert total == 3500.0

    exact_start = await store.query(
        Metric.STEPS, at(0, 8), at(0, 12), Reduction.SUM
    )
    assert exact_start == 1000.0


@pytest.mark.asyncio
async def test_query_average() -> None:
    store = _store()
    avg = await store.query(Metric.WALKING_SPEED, TODAY, NOW, Reduction.AVERAGE)
    assert avg == pytest.approx(1.1)


@pytest.mark.asyncio
async def test_query_without_samples_returns_none() -> None:
    store = _store()
    assert await store.query(Metric.DISTANCE, TODAY, NOW, Reduction.SUM) is None

    empty = FrameSampleStore(empty_samples())
    assert await empty.query(Metric.STEPS, TODAY, NOW, Reduction.SUM) is None


@pytest.mark.asyncio
async def test_unsupported_metric_raises() -> None:
    store = FrameSampleStore(empty_samples(), supported=[Metric.STEPS])
    with pytest.raises(DataTypeUnavailableError) as info:
        await store.query(Metric.FLIGHTS_CLIMBED, TODAY, NOW, Reduction.SUM)
    assert info.value.metric is Metric.FLIGHTS_CLIMBED


@pytest.mark.asyncio
async def test_query_collection_buckets_by_local_day() -> None:
    store = _store()
    start = TODAY - timedelta(days=2)
    buckets = await store.query_collection(Metric.STEPS, start, NOW, Reduction.SUM)

    assert [b[0] for b in buckets] == [start, TODAY - timedelta(days=1), TODAY]
    assert [b[1] for b in buckets] == [None, 700.0, 3500.0]


def test_missing_columns_are_rejected() -> None:
    with pytest.raises(ValueError):
        FrameSampleStore(pd.DataFrame({"timestamp": [NOW], "value": [1.0]}))

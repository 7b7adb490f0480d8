"""Shared fixtures: fixed clock and raw-sample frames."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

import pandas as pd
import pytest
from dateutil import tz

from salud_dashboard.config import DashboardConfig
from salud_dashboard.sources.base import Metric

TZ_NAME = "America/Argentina/Buenos_Aires"
LOCAL_TZ = tz.gettz(TZ_NAME)
NOW = datetime(2025, 12, 16, 15, 0, tzinfo=LOCAL_TZ)
TODAY = NOW.replace(hour=0, minute=0, second=0, microsecond=0)


def at(days_ago: int, hour: int = 10) -> datetime:
    """Local timestamp ``days_ago`` days before today at ``hour``."""
    return TODAY - timedelta(days=days_ago) + timedelta(hours=hour)


def samples_frame(rows: Iterable[tuple[datetime, Metric, float]]) -> pd.DataFrame:
    data = list(rows)
    return pd.DataFrame(
        {
            "timestamp": [r[0] for r in data],
            "metric": [r[1] for r in data],
            "value": [r[2] for r in data],
        }
    )


@pytest.fixture
def config() -> DashboardConfig:
    return DashboardConfig(timezone=TZ_NAME)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW

"""Clases base para fuentes de muestras de salud."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class Metric(str, Enum):
    """Physiological metrics known to the dashboard."""

    STEPS = "steps"
    DISTANCE = "distance_m"
    ACTIVE_ENERGY = "energy_kcal"
    FLIGHTS_CLIMBED = "flights"
    WALKING_SPEED = "walking_speed_mps"


class Reduction(str, Enum):
    """How samples inside an interval are reduced to one value."""

    SUM = "sum"
    AVERAGE = "average"


def default_reduction(metric: Metric) -> Reduction:
    """Cumulative metrics are summed, rate metrics are averaged."""
    if metric is Metric.WALKING_SPEED:
        return Reduction.AVERAGE
    return Reduction.SUM


class SampleStoreError(Exception):
    """Base error raised at the sample store boundary."""


class NotAvailableError(SampleStoreError):
    """The health data capability does not exist on this device/export."""


class NotAuthorizedError(SampleStoreError):
    """Read access to the health data has not been granted."""


class DataTypeUnavailableError(SampleStoreError):
    """A query for the given metric could not be built."""

    def __init__(self, metric: Metric) -> None:
        super().__init__(f"Data type not available: {metric.value}")
        self.metric = metric


class QueryFailedError(SampleStoreError):
    """The store failed while running a query."""


@dataclass(frozen=True)
class SourcePaths:
    """Container for source directories."""

    root: Path


class SampleStore(ABC):
    """Asynchronous query interface over a health sample store.

    Null results mean "no samples in range" and are not errors; callers decide
    how to coalesce them.
    """

    async def request_authorization(self) -> None:
        """Ask for read access. Stores without permissions accept silently."""
        return None

    @abstractmethod
    async def query(
        self,
        metric: Metric,
        start: datetime,
        end: datetime,
        reduction: Reduction,
    ) -> float | None:
        """Reduce every sample in ``[start, end)`` to one value.

        Args:
            metric: Metric to query.
            start: Inclusive, timezone-aware interval start.
            end: Exclusive, timezone-aware interval end.
            reduction: Sum or average.

        Returns:
            Reduced value, or None when the interval holds no samples.

        Raises:
            SampleStoreError: On any store failure.
        """

    @abstractmethod
    async def query_collection(
        self,
        metric: Metric,
        start: datetime,
        end: datetime,
        reduction: Reduction,
    ) -> list[tuple[datetime, float | None]]:
        """Reduce samples per local day bucket, anchored at ``start``.

        Returns:
            Ordered ``(bucket_start, value)`` pairs, one per bucket in range.

        Raises:
            SampleStoreError: On any store failure.
        """

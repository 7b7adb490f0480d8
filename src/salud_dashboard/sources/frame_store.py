"""Store de muestras en memoria sobre un DataFrame de pandas."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

import pandas as pd

from salud_dashboard.sources.base import (
    DataTypeUnavailableError,
    Metric,
    QueryFailedError,
    Reduction,
    SampleStore,
)

SAMPLE_COLUMNS = ["timestamp", "metric", "value"]


def empty_samples() -> pd.DataFrame:
    """Return an empty raw-samples frame with the expected columns."""
    return pd.DataFrame(columns=SAMPLE_COLUMNS)


class FrameSampleStore(SampleStore):
    """Sample store backed by a long-format frame of raw samples.

    The frame holds one row per sample: ``timestamp`` (tz-aware), ``metric``
    (a :class:`Metric` value) and ``value``.
    """

    def __init__(
        self,
        samples: pd.DataFrame,
        supported: Iterable[Metric] | None = None,
    ) -> None:
        """Create the store.

        Args:
            samples: Raw samples frame (see :data:`SAMPLE_COLUMNS`).
            supported: Metrics this store can answer for. Defaults to all.
        """
        self._supported = frozenset(supported if supported is not None else Metric)
        self._samples = _normalize(samples)

    def _select(self, metric: Metric, start: datetime, end: datetime) -> pd.Series:
        if metric not in self._supported:
            raise DataTypeUnavailableError(metric)
        df = self._samples
        try:
            mask = (
                (df["metric"] == metric.value)
                & (df["timestamp"] >= pd.Timestamp(start))
                & (df["timestamp"] < pd.Timestamp(end))
            )
            return df.loc[mask, "value"]
        except (KeyError, TypeError, ValueError) as exc:
            raise QueryFailedError(f"{metric.value}: {exc}") from exc

    async def query(
        self,
        metric: Metric,
        start: datetime,
        end: datetime,
        reduction: Reduction,
    ) -> float | None:
        """Reduce samples of ``metric`` in ``[start, end)``."""
        return _reduce(self._select(metric, start, end), reduction)

    async def query_collection(
        self,
        metric: Metric,
        start: datetime,
        end: datetime,
        reduction: Reduction,
    ) -> list[tuple[datetime, float | None]]:
        """Reduce samples per 1-day bucket, stepping local wall-clock days."""
        out: list[tuple[datetime, float | None]] = []
        bucket_start = start
        while bucket_start < end:
            # Aritmética de reloj local: medianoche + 1 día sigue siendo medianoche.
            bucket_end = min(bucket_start + timedelta(days=1), end)
            values = self._select(metric, bucket_start, bucket_end)
            out.append((bucket_start, _reduce(values, reduction)))
            bucket_start = bucket_start + timedelta(days=1)
        return out


def _normalize(samples: pd.DataFrame) -> pd.DataFrame:
    if samples.empty:
        out = empty_samples()
        out["timestamp"] = pd.to_datetime(out["timestamp"], utc=True)
        out["value"] = pd.to_numeric(out["value"])
        return out
    missing = [c for c in SAMPLE_COLUMNS if c not in samples.columns]
    if missing:
        raise ValueError(f"Missing sample columns: {missing}")
    out = samples.loc[:, SAMPLE_COLUMNS].copy()
    out["timestamp"] = pd.to_datetime(out["timestamp"], utc=True)
    out["metric"] = out["metric"].map(
        lambda m: m.value if isinstance(m, Metric) else str(m)
    )
    out["value"] = pd.to_numeric(out["value"], errors="coerce")
    return out.sort_values("timestamp").reset_index(drop=True)


def _reduce(values: pd.Series, reduction: Reduction) -> float | None:
    values = values.dropna()
    if values.empty:
        return None
    if reduction is Reduction.SUM:
        return float(values.sum())
    return float(values.mean())

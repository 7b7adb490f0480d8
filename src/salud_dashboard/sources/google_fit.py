"""Lectura de métricas de actividad desde Google Fit Takeout."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import cast

import pandas as pd
from dateutil import tz

from salud_dashboard.sources.base import (
    Metric,
    NotAvailableError,
    QueryFailedError,
    SourcePaths,
)
from salud_dashboard.sources.frame_store import FrameSampleStore, empty_samples

logger = logging.getLogger(__name__)

_METRICS_DIR = "Métricas de actividad diaria"

_METRIC_PATTERNS: dict[Metric, list[str]] = {
    Metric.STEPS: [r"\bpasos\b", r"\bstep"],
    Metric.DISTANCE: [r"\bdistancia\b", r"\bdistance"],
    Metric.ACTIVE_ENERGY: [r"\bcalor", r"\bcalorie"],
    Metric.FLIGHTS_CLIMBED: [r"\bpisos\b", r"\bflights?\b", r"\bfloors?\b"],
    Metric.WALKING_SPEED: [r"velocidad media", r"average speed"],
}

_START_PATTERNS = [r"hora de inicio", r"start time"]


@dataclass(frozen=True)
class GoogleFitPaths(SourcePaths):
    """Paths for Google Fit Takeout/Fit directory."""

    # root: .../Takeout/Fit


class GoogleFitSource:
    """Google Fit Takeout reader (per-interval activity metrics)."""

    def __init__(self, paths: GoogleFitPaths, local_tz: tzinfo | None = None) -> None:
        """Create the reader.

        Args:
            paths: Takeout paths.
            local_tz: Zone used when a row carries no start time.
        """
        self._paths = paths
        self._tz = local_tz or tz.tzlocal()

    def validate(self) -> None:
        """Validate the path of the files.

        Raises:
            NotAvailableError: If the Takeout/Fit directory does not exist.
        """
        if not self._paths.root.exists():
            raise NotAvailableError(f"Google Fit export not found: {self._paths.root}")

    def daily_metrics_files(self) -> list[Path]:
        """Return per-day CSV files for daily activity metrics."""
        metrics_dir = self._paths.root / _METRICS_DIR
        if not metrics_dir.exists():
            raise NotAvailableError(f"Missing activity metrics: {metrics_dir}")

        files = sorted(
            p
            for p in metrics_dir.glob("*.csv")
            if p.name.lower() != f"{_METRICS_DIR}.csv".lower()
        )
        if files:
            return files
        raise NotAvailableError(f"No daily CSV files in {metrics_dir}")

    def load_samples(self, csv_paths: list[Path]) -> pd.DataFrame:
        """Load raw samples from per-day CSVs.

        Returns DataFrame columns:
            timestamp, metric, value
        """
        frames: list[pd.DataFrame] = []
        for csv_path in csv_paths:
            file_date = _date_from_filename(csv_path)
            if not file_date:
                logger.debug("Skipping %s: no date in file name", csv_path.name)
                continue
            try:
                df = pd.read_csv(csv_path)
            except (OSError, ValueError) as exc:
                raise QueryFailedError(f"Cannot read {csv_path}: {exc}") from exc
            samples = _samples_from_daily_file(df, file_date, self._tz)
            if not samples.empty:
                frames.append(samples)

        if not frames:
            return empty_samples()
        out = pd.concat(frames, ignore_index=True)
        return out.sort_values("timestamp").reset_index(drop=True)


class GoogleFitStore(FrameSampleStore):
    """Sample store answering queries from a Google Fit Takeout export."""

    @classmethod
    def open(
        cls, paths: GoogleFitPaths, local_tz: tzinfo | None = None
    ) -> GoogleFitStore:
        """Validate the export and load every daily file.

        Raises:
            NotAvailableError: If the export is missing.
            QueryFailedError: If a file cannot be read.
        """
        source = GoogleFitSource(paths, local_tz)
        source.validate()
        files = source.daily_metrics_files()
        samples = source.load_samples(files)
        logger.info(
            "Loaded %d samples from %d Google Fit files", len(samples), len(files)
        )
        return cls(samples)


def _find_col(columns: list[str], patterns: list[str]) -> str | None:
    for pat in patterns:
        rx = re.compile(pat, re.IGNORECASE)
        for c in columns:
            if rx.search(c):
                return c
    return None


def _row_timestamps(
    df: pd.DataFrame, file_date: date, local_tz: tzinfo
) -> pd.Series:
    midnight = pd.Timestamp(datetime.combine(file_date, datetime.min.time(), local_tz))
    start_col = _find_col(list(df.columns), _START_PATTERNS)
    if not start_col:
        return pd.Series([midnight] * len(df), index=df.index)
    raw = file_date.isoformat() + "T" + df[start_col].astype(str).str.strip()
    parsed = pd.to_datetime(raw, errors="coerce")
    if parsed.dt.tz is None:
        # Horas sin offset son hora local.
        parsed = parsed.dt.tz_localize(
            local_tz, ambiguous="NaT", nonexistent="shift_forward"
        )
    parsed = parsed.dt.tz_convert("UTC")
    # Filas sin hora parseable caen a la medianoche local del archivo.
    return parsed.fillna(midnight.tz_convert("UTC"))


def _samples_from_daily_file(
    df: pd.DataFrame, file_date: date, local_tz: tzinfo
) -> pd.DataFrame:
    if df.empty:
        return empty_samples()

    df = df.rename(columns={c: c.strip() for c in df.columns})
    cols = list(df.columns)
    timestamps = _row_timestamps(df, file_date, local_tz)

    frames: list[pd.DataFrame] = []
    for metric, patterns in _METRIC_PATTERNS.items():
        col = _find_col(cols, patterns)
        if not col:
            continue
        values = pd.to_numeric(df[col], errors="coerce")
        part = pd.DataFrame(
            {"timestamp": timestamps, "metric": metric.value, "value": values}
        ).dropna(subset=["value"])
        if not part.empty:
            frames.append(part)

    if not frames:
        return empty_samples()
    return pd.concat(frames, ignore_index=True)


def _date_from_filename(path: Path) -> date | None:
    match = re.match(r"(\d{4}-\d{2}-\d{2})", path.stem)
    if not match:
        return None
    parsed = pd.to_datetime(match.group(1), errors="coerce")
    if pd.isna(parsed):
        return None
    return cast(date, parsed.date())

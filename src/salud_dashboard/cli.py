"""CLI: evaluación de salud (marcha + actividad) desde Google Fit Takeout."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from salud_dashboard.config import DashboardConfig
from salud_dashboard.dashboard import DashboardSession
from salud_dashboard.excel_writer import ExcelLayout, write_snapshot_xlsx
from salud_dashboard.report import render_snapshot
from salud_dashboard.sources.base import SampleStoreError
from salud_dashboard.sources.google_fit import GoogleFitPaths, GoogleFitStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Walking speed and activity risk assessment from Google Fit."
    )
    parser.add_argument(
        "--fit-dir",
        default=str(Path.home() / "Takeout" / "Fit"),
        help="Google Fit Takeout directory (default: ~/Takeout/Fit).",
    )
    parser.add_argument("--age", type=int, default=65, help="Age (default: 65).")
    parser.add_argument(
        "--step-goal",
        type=int,
        default=10000,
        help="Daily step goal (default: 10000).",
    )
    parser.add_argument(
        "--timezone",
        default=None,
        help="IANA zone for day boundaries (default: system zone).",
    )
    parser.add_argument(
        "--export",
        default=None,
        help="Directory where an XLSX report is written.",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def build_config(ns: argparse.Namespace) -> DashboardConfig:
    return DashboardConfig(step_goal=ns.step_goal, age=ns.age, timezone=ns.timezone)


def main(argv: list[str] | None = None) -> int:
    """Run the assessment CLI.

    Returns:
        Exit code (0 on success, 1 when the health data cannot be read).
    """
    ns = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = build_config(ns)
    try:
        local_tz = config.local_tz()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    paths = GoogleFitPaths(root=Path(ns.fit_dir).expanduser().resolve())

    try:
        store = GoogleFitStore.open(paths, local_tz)
        session = DashboardSession(store, config)
        snapshot = asyncio.run(session.refresh())
    except SampleStoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(render_snapshot(snapshot))

    if ns.export:
        out_dir = Path(ns.export).expanduser()
        ts = snapshot.refreshed_at.strftime("%Y-%m-%d_%H-%M-%S")
        out_path = out_dir / f"salud_dashboard_{ts}.xlsx"
        write_snapshot_xlsx(snapshot, out_path, ExcelLayout())
        print(f"OK: Output: {out_path}")
    return 0

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import cast

import pytest
from openpyxl import load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from conftest import at, samples_frame
from salud_dashboard.config import DashboardConfig
from salud_dashboard.dashboard import DashboardSession
from salud_dashboard.excel_writer import (
    ExcelLayout,
    assessment_frame,
    daily_frame,
    write_snapshot_xlsx,
)
from salud_dashboard.model import DashboardSnapshot
from salud_dashboard.sources.base import Metric
from salud_dashboard.sources.frame_store import FrameSampleStore


async def _snapshot(
    config: DashboardConfig, clock: Callable[[], datetime]
) -> DashboardSnapshot:
    rows = [(at(d), Metric.STEPS, 1000.0 * (d + 1)) for d in range(7)]
    rows += [(at(d), Metric.WALKING_SPEED, 0.7) for d in range(3)]
    store = FrameSampleStore(samples_frame(rows))
    return await DashboardSession(store, config, clock).refresh()


@pytest.mark.asyncio
async def test_daily_and_assessment_frames(
    config: DashboardConfig, clock: Callable[[], datetime]
) -> None:
    snapshot = await _snapshot(config, clock)

    daily = daily_frame(snapshot)
    assert len(daily) == 7
    assert list(daily.columns) == [
        "date",
        "steps",
        "distance_m",
        "energy_kcal",
        "flights",
        "walking_speed_kmh",
    ]
    assert daily["steps"].iloc[-1] == 1000.0
    assert daily["walking_speed_kmh"].iloc[-1] == 2.52
    assert daily["walking_speed_kmh"].isna().sum() == 4

    items = assessment_frame(snapshot)
    values = dict(zip(items["Item"], items["Value"]))
    assert values["Walking speed risk"] == "High risk"
    assert values["Recommendation 1"] == snapshot.assessment.recommendations[0]
    assert "Trend" not in values


@pytest.mark.asyncio
async def test_daily_frame_columns_follow_their_metric(
    config: DashboardConfig, clock: Callable[[], datetime]
) -> None:
    rows = [
        (at(0), Metric.STEPS, 4000.0),
        (at(0), Metric.DISTANCE, 3000.0),
        (at(0), Metric.ACTIVE_ENERGY, 250.0),
        (at(0), Metric.FLIGHTS_CLIMBED, 6.0),
    ]
    store = FrameSampleStore(samples_frame(rows))
    snapshot = await DashboardSession(store, config, clock).refresh()

    today = daily_frame(snapshot).iloc[-1]
    assert today["steps"] == 4000.0
    assert today["distance_m"] == 3000.0
    assert today["energy_kcal"] == 250.0
    assert today["flights"] == 6.0


@pytest.mark.asyncio
async def test_write_snapshot_xlsx_formatting(
    tmp_path: Path, config: DashboardConfig, clock: Callable[[], datetime]
) -> None:
    snapshot = await _snapshot(config, clock)
    out = tmp_path / "nested" / "out.xlsx"
    write_snapshot_xlsx(snapshot, out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().daily_sheet])
    headers = [cell.value for cell in ws[1]]
    assert headers[0] == "Day"
    assert "Steps" in headers
    assert "Walking speed\n(km/h)" in headers
    assert "steps" not in headers

    assert ws.column_dimensions["A"].width == 6
    steps_idx = headers.index("Steps") + 1
    assert ws.column_dimensions[get_column_letter(steps_idx)].width == 10
    assert ws.cell(row=2, column=steps_idx).number_format == "#,##0"
    assert ws.cell(row=8, column=steps_idx).value == 1000

    sheet = cast(Worksheet, wb[ExcelLayout().assessment_sheet])
    assert [cell.value for cell in sheet[1]] == ["Item", "Value"]
    assert sheet.cell(row=3, column=1).value == "Overall risk"

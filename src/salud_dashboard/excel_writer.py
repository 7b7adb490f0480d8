"""Exportación a Excel de la última evaluación del tablero."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from salud_dashboard.aggregate import WEEKLY_METRICS
from salud_dashboard.model import DashboardSnapshot

_HEADER_MAP: dict[str, str] = {
    "weekday": "Day",
    "date": "Date",
    "steps": "Steps",
    "distance_m": "Distance (m)",
    "energy_kcal": "Active energy\n(kcal)",
    "flights": "Flights\nclimbed",
    "walking_speed_kmh": "Walking speed\n(km/h)",
}

_DAILY_COLUMNS = [metric.value for metric in WEEKLY_METRICS]


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the exported workbook."""

    daily_sheet: str = "Daily series"
    assessment_sheet: str = "Assessment"


def daily_frame(snapshot: DashboardSnapshot) -> pd.DataFrame:
    """One row per day with every weekly metric and the walking speed.

    Walking speed covers a longer window, so only days present in the weekly
    series are listed.
    """
    columns = ["date", *_DAILY_COLUMNS]
    frames: list[pd.DataFrame] = []
    for metric, aggregate in zip(WEEKLY_METRICS, snapshot.weekly):
        days = [s.day for s in aggregate.samples]
        values = [s.value for s in aggregate.samples]
        frames.append(pd.DataFrame({"date": days, metric.value: values}))
    if not frames or all(f.empty for f in frames):
        return pd.DataFrame(columns=[*columns, "walking_speed_kmh"])

    out = frames[0]
    for frame in frames[1:]:
        out = out.merge(frame, on="date", how="outer")
    speed_samples = snapshot.walking_speed
    speeds = pd.DataFrame(
        {
            "date": [s.day for s in speed_samples],
            "walking_speed_kmh": [float(s.formatted_speed) for s in speed_samples],
        }
    )
    out = out.merge(speeds, on="date", how="left")
    return out.sort_values("date").reset_index(drop=True)


def assessment_frame(snapshot: DashboardSnapshot) -> pd.DataFrame:
    """Key/value rows describing the assessment, trend and recommendations."""
    assessment = snapshot.assessment
    rows: list[tuple[str, object]] = [
        ("Refreshed at", snapshot.refreshed_at.replace(tzinfo=None)),
        ("Overall risk", assessment.overall_risk.label),
        ("Walking speed (m/s)", round(assessment.walking_speed.speed, 2)),
        ("Walking speed risk", assessment.walking_speed.risk_level.label),
        ("Walking speed", assessment.walking_speed.message),
        ("Daily steps", assessment.activity_level.daily_steps),
        ("Activity risk", assessment.activity_level.risk_level.label),
        ("Activity", assessment.activity_level.message),
    ]
    trend = snapshot.trend
    if trend is not None:
        rows.append(("Trend", trend.trend.label))
        rows.append(("Change (%)", round(trend.change_percentage, 1)))
    for i, text in enumerate(assessment.recommendations, start=1):
        rows.append((f"Recommendation {i}", text))
    return pd.DataFrame(rows, columns=["Item", "Value"])


def write_snapshot_xlsx(
    snapshot: DashboardSnapshot, out_path: Path, layout: ExcelLayout
) -> None:
    """Write a formatted Excel file with the daily series and the assessment.

    Args:
        snapshot: Completed dashboard snapshot.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = _add_weekday_column(daily_frame(snapshot))
    export_df = export_df.rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.daily_sheet)
        assessment_frame(snapshot).to_excel(
            writer, index=False, sheet_name=layout.assessment_sheet
        )
        _format_daily_sheet(writer.book[layout.daily_sheet])
        _format_assessment_sheet(writer.book[layout.assessment_sheet])


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Añade columna weekday (Day) a partir de date."""
    if export_df.empty or "date" not in export_df.columns:
        return export_df
    export_df = export_df.copy()
    export_df["weekday"] = pd.to_datetime(export_df["date"]).dt.strftime("%a")
    cols = ["weekday"] + [c for c in export_df.columns if c != "weekday"]
    return export_df[cols]


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any, horizontal: str = "center") -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    align = Alignment(horizontal=horizontal, vertical="center", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = align
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, widths: dict[str, int]) -> None:
    col_index = _get_header_col_index(ws)
    for header, width in widths.items():
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any) -> None:
    """Aplica formatos numéricos por cabecera."""
    col_index = _get_header_col_index(ws)
    fmt_map: dict[str, str] = {
        "Date": "dd/mm/yyyy",
        "Steps": "#,##0",
        "Distance (m)": "#,##0",
        "Active energy\n(kcal)": "#,##0",
        "Flights\nclimbed": "0",
        "Walking speed\n(km/h)": "0.00",
    }
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_daily_sheet(ws: Any) -> None:
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_widths(
        ws,
        {
            "Day": 6,
            "Date": 12,
            "Steps": 10,
            "Distance (m)": 13,
            "Active energy\n(kcal)": 13,
            "Flights\nclimbed": 9,
            "Walking speed\n(km/h)": 14,
        },
    )
    _apply_number_formats(ws)


def _format_assessment_sheet(ws: Any) -> None:
    _style_header_row(ws)
    _style_body_rows(ws, horizontal="left")
    _apply_column_widths(ws, {"Item": 22, "Value": 70})

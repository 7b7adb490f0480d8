"""Resumen de texto de una evaluación para la consola."""

from __future__ import annotations

from salud_dashboard.model import DashboardSnapshot


def render_snapshot(snapshot: DashboardSnapshot) -> str:
    """Render today's figures, weekly stats, trend and assessment as text."""
    today = snapshot.today
    assessment = snapshot.assessment
    lines = [
        f"Health dashboard ({snapshot.refreshed_at:%Y-%m-%d %H:%M})",
        "",
        "Today",
        f"  Steps:          {today.steps}",
        f"  Distance:       {today.formatted_distance}",
        f"  Active energy:  {today.formatted_active_energy}",
        f"  Flights:        {today.flights_climbed}",
    ]
    today_speed = snapshot.today_walking_speed
    if today_speed is not None:
        lines.append(
            f"  Walking speed:  {today_speed.speed_kmh:.2f} km/h "
            f"({today_speed.speed:.2f} m/s) - {today_speed.risk_level.label}"
        )
    else:
        lines.append("  Walking speed:  no data")

    lines += ["", "Goals"]
    for card in snapshot.activities:
        lines.append(
            f"  {card.type.value:<14} {card.formatted_value}/{card.formatted_goal} "
            f"{card.unit} ({card.progress_percentage}%)"
        )

    lines += ["", "Last 7 days"]
    for aggregate in snapshot.weekly:
        lines.append(
            f"  {aggregate.title:<24} avg {aggregate.formatted_average:>7} "
            f"{aggregate.unit}, total {aggregate.total_value:.0f}"
        )

    lines += ["", "Walking speed trend"]
    trend = snapshot.trend
    if trend is None:
        lines.append(f"  Not enough data ({len(snapshot.walking_speed)} days)")
    else:
        lines.append(
            f"  {trend.trend.label}: {trend.previous_speed * 3.6:.2f} -> "
            f"{trend.current_speed * 3.6:.2f} km/h ({trend.change_percentage:+.1f}%)"
        )

    lines += [
        "",
        f"Assessment: {assessment.overall_risk.label}",
        f"  Walking speed: {assessment.walking_speed.risk_level.label}"
        f" - {assessment.walking_speed.message}",
        f"  Activity:      {assessment.activity_level.risk_level.label}"
        f" - {assessment.activity_level.message}",
    ]
    lines += [f"  * {text}" for text in assessment.recommendations]
    return "\n".join(lines)

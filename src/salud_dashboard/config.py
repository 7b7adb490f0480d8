"""Configuración del tablero (metas diarias, edad y ventanas de consulta)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo

from dateutil import tz


@dataclass(frozen=True)
class DashboardConfig:
    """Goals and query windows for a dashboard session."""

    step_goal: int = 10000
    distance_goal_km: float = 8.0
    energy_goal_kcal: float = 500.0
    exercise_goal_min: float = 30.0
    age: int = 65
    weekly_window_days: int = 7
    walking_speed_window_days: int = 30
    timezone: str | None = None

    def local_tz(self) -> tzinfo:
        """Resolve the configured zone, falling back to the system zone.

        Raises:
            ValueError: If the zone name is unknown.
        """
        if not self.timezone:
            return tz.tzlocal()
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown time zone: {self.timezone}")
        return zone

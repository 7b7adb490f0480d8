"""Modelos tipados para métricas diarias, evaluación de riesgo y tendencias."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from salud_dashboard.sources.base import Metric

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class DailyMetricSample:
    """One reduced value for a (metric, local day)."""

    day: date
    value: float

    @property
    def formatted_date(self) -> str:
        """Short M/D label."""
        return f"{self.day.month}/{self.day.day}"

    @property
    def weekday_name(self) -> str:
        return _WEEKDAYS[self.day.weekday()]

    @property
    def int_value(self) -> int:
        return int(self.value)

    @property
    def short_value(self) -> str:
        """Chart label: thousands as ``8.5k``, smaller values as integers."""
        if self.value >= 1000:
            return f"{self.value / 1000:.1f}k"
        return f"{self.value:.0f}"


@dataclass(frozen=True)
class WalkingSpeedSample(DailyMetricSample):
    """Daily average walking speed; ``value`` is in meters/second."""

    @property
    def speed_kmh(self) -> float:
        return self.value * 3.6

    @property
    def formatted_speed(self) -> str:
        return f"{self.speed_kmh:.2f}"


@dataclass(frozen=True)
class WeeklyAggregate:
    """Summary statistics over a chronological run of daily samples."""

    title: str
    unit: str
    samples: tuple[DailyMetricSample, ...]
    average_value: float
    max_value: float
    min_value: float
    total_value: float

    @classmethod
    def from_samples(
        cls, title: str, unit: str, samples: Sequence[DailyMetricSample]
    ) -> WeeklyAggregate:
        """Build the aggregate; every statistic is 0 for an empty sequence."""
        ordered = tuple(sorted(samples, key=lambda s: s.day))
        values = [s.value for s in ordered]
        total = sum(values)
        return cls(
            title=title,
            unit=unit,
            samples=ordered,
            average_value=total / len(values) if values else 0.0,
            max_value=max(values, default=0.0),
            min_value=min(values, default=0.0),
            total_value=total,
        )

    @property
    def formatted_average(self) -> str:
        return f"{self.average_value:.0f}"


class ActivityType(str, Enum):
    """Kinds of activity progress shown against a daily goal."""

    STEPS = "Steps"
    DISTANCE = "Distance"
    ACTIVE_ENERGY = "Active energy"
    EXERCISE_TIME = "Exercise time"


@dataclass(frozen=True)
class ActivityProgress:
    """Today's value of one activity compared with its goal."""

    type: ActivityType
    value: float
    goal: float
    unit: str

    @property
    def progress(self) -> float:
        """Ratio clamped to [0, 1]; 0 when there is no positive goal."""
        if self.goal <= 0:
            return 0.0
        return max(0.0, min(self.value / self.goal, 1.0))

    @property
    def progress_percentage(self) -> int:
        return int(self.progress * 100)

    @property
    def is_goal_achieved(self) -> bool:
        return self.value >= self.goal

    @property
    def formatted_value(self) -> str:
        return str(int(self.value))

    @property
    def formatted_goal(self) -> str:
        return str(int(self.goal))


@dataclass(frozen=True)
class TodaySummary:
    """Today's per-metric scalars (store units, nulls already coalesced to 0)."""

    steps: int = 0
    distance_m: float = 0.0
    active_energy_kcal: float = 0.0
    flights_climbed: int = 0
    walking_speed_mps: float = 0.0

    @classmethod
    def from_scalars(cls, scalars: dict[Metric, float]) -> TodaySummary:
        return cls(
            steps=int(scalars.get(Metric.STEPS, 0.0)),
            distance_m=scalars.get(Metric.DISTANCE, 0.0),
            active_energy_kcal=scalars.get(Metric.ACTIVE_ENERGY, 0.0),
            flights_climbed=int(scalars.get(Metric.FLIGHTS_CLIMBED, 0.0)),
            walking_speed_mps=scalars.get(Metric.WALKING_SPEED, 0.0),
        )

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0

    @property
    def formatted_distance(self) -> str:
        return f"{self.distance_km:.2f} km"

    @property
    def formatted_active_energy(self) -> str:
        return f"{self.active_energy_kcal:.0f} kcal"

    @property
    def walking_speed_kmh(self) -> float:
        return self.walking_speed_mps * 3.6


class RiskLevel(str, Enum):
    """Risk classification; ``severity`` is only used to combine levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        return _RISK_LABELS[self]


_SEVERITY: dict[RiskLevel, int] = {
    RiskLevel.UNKNOWN: 0,
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
}

_RISK_LABELS: dict[RiskLevel, str] = {
    RiskLevel.LOW: "Low risk",
    RiskLevel.MEDIUM: "Medium risk",
    RiskLevel.HIGH: "High risk",
    RiskLevel.UNKNOWN: "Unknown",
}


@dataclass(frozen=True)
class WalkingSpeedAssessment:
    """Risk level derived from an average walking speed (m/s)."""

    speed: float
    risk_level: RiskLevel
    message: str

    @property
    def speed_kmh(self) -> float:
        return self.speed * 3.6


@dataclass(frozen=True)
class ActivityLevelAssessment:
    """Risk level derived from a daily step count."""

    daily_steps: int
    risk_level: RiskLevel
    message: str


@dataclass(frozen=True)
class HealthAssessment:
    """Combined assessment; ``recommendations`` keeps display order."""

    walking_speed: WalkingSpeedAssessment
    activity_level: ActivityLevelAssessment
    overall_risk: RiskLevel
    recommendations: tuple[str, ...] = field(default_factory=tuple)


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class WalkingSpeedTrend:
    """Week-over-week comparison of average walking speed."""

    current_speed: float
    previous_speed: float
    change_percentage: float
    trend: TrendDirection


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything derived by one completed refresh."""

    refreshed_at: datetime
    today: TodaySummary
    activities: tuple[ActivityProgress, ...]
    weekly: tuple[WeeklyAggregate, ...]
    walking_speed: tuple[WalkingSpeedSample, ...]
    today_walking_speed: WalkingSpeedAssessment | None
    trend: WalkingSpeedTrend | None
    assessment: HealthAssessment

    @property
    def weekly_steps(self) -> WeeklyAggregate:
        return self.weekly[0]

"""Evaluación de riesgo por velocidad de marcha y nivel de actividad."""

from __future__ import annotations

from salud_dashboard.model import (
    ActivityLevelAssessment,
    HealthAssessment,
    RiskLevel,
    WalkingSpeedAssessment,
)

DEFAULT_AGE = 65

# Umbrales de velocidad (m/s) para adultos mayores.
SPEED_LOW_RISK_MPS = 1.0
SPEED_HIGH_RISK_MPS = 0.8

STEPS_LOW_RISK = 8000
STEPS_HIGH_RISK = 5000

MSG_CONSULT_DOCTOR = (
    "Your walking speed has dropped. Consider talking to your doctor."
)
MSG_BALANCE_TRAINING = "Consider balance exercises and strength training."
MSG_MAINTAIN_SPEED = (
    "Exercise regularly to maintain or improve your walking speed."
)
MSG_STEP_GOAL = "Your activity is low. Aim for 8000 steps or more per day."
MSG_KEEP_GOING = "You are in good health. Keep it up."


def assess_walking_speed(
    speed: float, age: int = DEFAULT_AGE
) -> WalkingSpeedAssessment:
    """Classify an average walking speed in m/s.

    ``age`` is accepted for age-stratified thresholds but does not change the
    classification yet.
    """
    if speed >= SPEED_LOW_RISK_MPS:
        level, message = RiskLevel.LOW, "Walking speed is good"
    elif speed >= SPEED_HIGH_RISK_MPS:
        level, message = RiskLevel.MEDIUM, "Walking speed is slightly reduced"
    elif speed > 0:
        level, message = RiskLevel.HIGH, "Walking speed is markedly reduced"
    else:
        level, message = RiskLevel.UNKNOWN, "Not enough data"
    return WalkingSpeedAssessment(speed=speed, risk_level=level, message=message)


def assess_activity(daily_steps: int) -> ActivityLevelAssessment:
    """Classify a daily step count."""
    if daily_steps >= STEPS_LOW_RISK:
        level, message = RiskLevel.LOW, "Activity level is sufficient"
    elif daily_steps >= STEPS_HIGH_RISK:
        level, message = RiskLevel.MEDIUM, "Activity level is slightly low"
    elif daily_steps > 0:
        level, message = RiskLevel.HIGH, "Activity level is low"
    else:
        level, message = RiskLevel.UNKNOWN, "Not enough data"
    return ActivityLevelAssessment(
        daily_steps=daily_steps, risk_level=level, message=message
    )


def combine_risk(walking: RiskLevel, activity: RiskLevel) -> RiskLevel:
    """Additive rule over severities: >=5 high, >=3 medium, else low."""
    score = walking.severity + activity.severity
    if score >= 5:
        return RiskLevel.HIGH
    if score >= 3:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def recommendations_for(
    walking: RiskLevel, activity: RiskLevel, overall: RiskLevel
) -> tuple[str, ...]:
    """Ordered advice; every applicable rule appends in turn."""
    out: list[str] = []
    if walking is RiskLevel.HIGH:
        out.append(MSG_CONSULT_DOCTOR)
        out.append(MSG_BALANCE_TRAINING)
    elif walking is RiskLevel.MEDIUM:
        out.append(MSG_MAINTAIN_SPEED)

    if activity is RiskLevel.HIGH:
        out.append(MSG_STEP_GOAL)

    if overall is RiskLevel.LOW and not out:
        out.append(MSG_KEEP_GOING)
    return tuple(out)


def assess(
    average_walking_speed: float, daily_steps: int, age: int = DEFAULT_AGE
) -> HealthAssessment:
    """Build the combined health assessment."""
    walking = assess_walking_speed(average_walking_speed, age)
    activity = assess_activity(daily_steps)
    overall = combine_risk(walking.risk_level, activity.risk_level)
    return HealthAssessment(
        walking_speed=walking,
        activity_level=activity,
        overall_risk=overall,
        recommendations=recommendations_for(
            walking.risk_level, activity.risk_level, overall
        ),
    )

"""Sesión del tablero: orquesta agregación, tendencia y evaluación de riesgo."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from salud_dashboard.aggregate import (
    WEEKLY_METRICS,
    Aggregator,
    activity_progress,
    weekly_aggregate,
)
from salud_dashboard.assessment import assess, assess_walking_speed
from salud_dashboard.config import DashboardConfig
from salud_dashboard.model import DashboardSnapshot, WeeklyAggregate
from salud_dashboard.sources.base import (
    NotAuthorizedError,
    NotAvailableError,
    SampleStore,
    SampleStoreError,
)
from salud_dashboard.trend import MIN_SAMPLES, analyze_walking_speed

logger = logging.getLogger(__name__)

Subscriber = Callable[[DashboardSnapshot], None]


class DashboardSession:
    """Owns the latest snapshot for one user and refreshes it on demand.

    A refresh runs every store query, then derives trend and assessment and
    replaces the snapshot in one step. Overlapping ``refresh()`` calls join
    the refresh already in flight. A failed or cancelled refresh leaves the
    previous snapshot in place.
    """

    def __init__(
        self,
        store: SampleStore,
        config: DashboardConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Create a session.

        Args:
            store: Sample store adapter.
            config: Goals and windows; defaults to :class:`DashboardConfig`.
            clock: Returns "now"; defaults to the current local time.
        """
        self._store = store
        self._config = config or DashboardConfig()
        self._aggregator = Aggregator(store, self._config.local_tz(), clock)
        self._snapshot: DashboardSnapshot | None = None
        self._inflight: asyncio.Task[DashboardSnapshot] | None = None
        self._subscribers: list[Subscriber] = []

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def snapshot(self) -> DashboardSnapshot | None:
        """Latest completed snapshot, or None before the first success."""
        return self._snapshot

    @property
    def is_refreshing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` once per completed refresh.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def refresh(self) -> DashboardSnapshot:
        """Recompute the snapshot from scratch.

        Raises:
            NotAvailableError: The health data export/capability is missing.
            NotAuthorizedError: Access is still denied after re-authorizing.
            SampleStoreError: Any other store failure.
        """
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            logger.debug("Refresh already in flight; joining it")
            return await asyncio.shield(inflight)

        self._inflight = asyncio.ensure_future(self._refresh_authorized())
        return await self._inflight

    async def _refresh_authorized(self) -> DashboardSnapshot:
        try:
            try:
                snapshot = await self._build_snapshot()
            except NotAuthorizedError:
                logger.warning("Health data not authorized; requesting access")
                await self._store.request_authorization()
                snapshot = await self._build_snapshot()
        except NotAvailableError:
            logger.error("Health data is not available on this source")
            raise
        except SampleStoreError:
            logger.exception("Refresh failed; keeping previous snapshot")
            raise

        self._publish(snapshot)
        return snapshot

    async def _build_snapshot(self) -> DashboardSnapshot:
        config = self._config
        aggregator = self._aggregator
        logger.info("Refresh started")

        today = await aggregator.today_summary()
        weekly: list[WeeklyAggregate] = []
        for metric in WEEKLY_METRICS:
            series = await aggregator.daily_series(metric, config.weekly_window_days)
            weekly.append(weekly_aggregate(metric, series))
        speeds = await aggregator.walking_speed_series(
            config.walking_speed_window_days
        )

        trend = analyze_walking_speed(speeds) if len(speeds) >= MIN_SAMPLES else None
        average_speed = sum(s.value for s in speeds) / len(speeds) if speeds else 0.0
        assessment = assess(average_speed, today.steps, config.age)
        today_speed = (
            assess_walking_speed(today.walking_speed_mps, config.age)
            if today.walking_speed_mps > 0
            else None
        )

        return DashboardSnapshot(
            refreshed_at=aggregator.now(),
            today=today,
            activities=activity_progress(today, config),
            weekly=tuple(weekly),
            walking_speed=tuple(speeds),
            today_walking_speed=today_speed,
            trend=trend,
            assessment=assessment,
        )

    def _publish(self, snapshot: DashboardSnapshot) -> None:
        self._snapshot = snapshot
        logger.info(
            "Refresh finished: overall risk %s", snapshot.assessment.overall_risk.value
        )
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot subscriber %r failed", callback)

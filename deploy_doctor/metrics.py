"""Build-usage metrics derived from a window of deployments."""

import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from .config import DiagnosticsConfig
from .models import DeploymentRecord, DeploymentState, UsageMetrics, as_utc

logger = logging.getLogger(__name__)


class MetricsAggregator:
    """Reduces recent deployments into ``UsageMetrics``.

    The aggregator is a pure function of its input window and the reference
    time used to decide which deployments belong to the current billing month.
    An empty window is a valid state (a freshly created site) and yields zeroed
    metrics with the full quota remaining.
    """

    def __init__(self, config: DiagnosticsConfig):
        self.config = config

    def aggregate(
        self, records: Sequence[DeploymentRecord], now: Optional[datetime] = None
    ) -> UsageMetrics:
        """Compute usage metrics for a deployment window.

        Args:
            records: Most recent deployments of a site, in any order.
            now: Reference time for the current billing month (default: now, UTC).

        Returns:
            UsageMetrics: Average duration, minutes used and remaining, failure rate.
        """
        now = as_utc(now or datetime.now(timezone.utc))
        minutes_used = self.minutes_used(records, now)

        metrics = UsageMetrics(
            average_build_minutes=self.average_duration(records),
            minutes_used=minutes_used,
            minutes_remaining=self.config.monthly_quota_minutes - minutes_used,
            monthly_quota=self.config.monthly_quota_minutes,
            failure_rate=self.failure_rate(records),
            deployment_count=len(records),
        )
        logger.debug(f"Aggregated {len(records)} deployments: {metrics}")
        return metrics

    @staticmethod
    def average_duration(records: Sequence[DeploymentRecord]) -> float:
        """Mean of created-to-published time in minutes.

        Records that never published are left out rather than counted as zero.
        """
        durations = [
            (as_utc(r.published_at) - as_utc(r.created_at)).total_seconds() / 60
            for r in records
            if r.published_at is not None
        ]
        if not durations:
            return 0.0
        return sum(durations) / len(durations)

    @staticmethod
    def minutes_used(records: Sequence[DeploymentRecord], now: datetime) -> int:
        """Billed build minutes for deployments created in the month of ``now``."""
        now = as_utc(now)
        total = 0
        for record in records:
            created = as_utc(record.created_at)
            if (created.year, created.month) != (now.year, now.month):
                continue
            total += math.ceil((record.deploy_time or 0) / 60)
        return total

    @staticmethod
    def failure_rate(records: Sequence[DeploymentRecord]) -> int:
        if not records:
            return 0
        failed = sum(1 for r in records if r.state == DeploymentState.ERROR.value)
        # half-up rounding, 12.5 -> 13
        return math.floor(100 * failed / len(records) + 0.5)

    def quota_status(self, metrics: UsageMetrics) -> str:
        """Return 'critical', 'warning' or 'good' for the remaining minutes."""
        if metrics.minutes_remaining < self.config.quota_critical_minutes:
            return "critical"
        if metrics.minutes_remaining < self.config.quota_warning_minutes:
            return "warning"
        return "good"

"""Build-strategy analysis for staying inside the monthly build-minute quota."""

import math
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence, Tuple

from .config import DiagnosticsConfig
from .models import BuildStrategy, DeploymentRecord, UsageMetrics

# timeframe -> (deployments to fetch, days covered)
TIMEFRAMES: Dict[str, Tuple[int, int]] = {
    "week": (20, 7),
    "month": (50, 30),
}


class BuildStrategyAnalyzer:
    """Summarizes build patterns and suggests free-tier optimizations."""

    def __init__(self, config: DiagnosticsConfig):
        self.config = config

    def analyze(
        self,
        records: Sequence[DeploymentRecord],
        metrics: UsageMetrics,
        timeframe: str = "month",
        now: Optional[datetime] = None,
    ) -> BuildStrategy:
        """Analyze build times and deployment frequency over ``timeframe``.

        Args:
            records: Deployments fetched for the timeframe.
            metrics: Current build usage for the site.
            timeframe: 'week' or 'month'.
            now: Reference time used to project monthly usage.

        Returns:
            BuildStrategy: Build-time range, frequency, projections and advice.

        Raises:
            ValueError: If the timeframe is not 'week' or 'month'.
        """
        if timeframe not in TIMEFRAMES:
            raise ValueError(f"Unknown timeframe: {timeframe}")
        _, days = TIMEFRAMES[timeframe]
        now = now or datetime.now(timezone.utc)

        build_minutes = [r.deploy_time / 60 for r in records if r.deploy_time and r.deploy_time > 0]
        average = sum(build_minutes) / len(build_minutes) if build_minutes else 0.0
        deploys_per_day = len(records) / days

        recommendations = []
        if average > 5:
            recommendations.append(
                "Build time optimization: average build time is high - consider code splitting "
                "and dependency optimization"
            )
        if deploys_per_day > 3:
            recommendations.append(
                "Deployment frequency: high deployment frequency detected - consider batching changes"
            )
        if metrics.failure_rate > 15:
            recommendations.append("Failure rate: high failure rate - implement pre-deployment testing")
        if metrics.minutes_remaining < self.config.quota_warning_minutes:
            recommendations.append(
                "Build minutes: approaching monthly limit - prioritize critical deployments only"
            )
        if not recommendations:
            recommendations.append("Build strategy is well optimized for free tier usage")

        return BuildStrategy(
            timeframe=timeframe,
            average_build_minutes=average,
            min_build_minutes=min(build_minutes, default=0.0),
            max_build_minutes=max(build_minutes, default=0.0),
            deploys_per_day=deploys_per_day,
            success_rate=100 - metrics.failure_rate,
            minutes_used=metrics.minutes_used,
            projected_monthly_minutes=round(metrics.minutes_used / now.day * 30),
            recommended_max_builds_per_day=(
                math.floor(self.config.monthly_quota_minutes / 30 / average) if average else None
            ),
            recommendations=recommendations,
        )

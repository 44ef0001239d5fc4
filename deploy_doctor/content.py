"""Content-impact estimation from deployment history.

Nothing here is measured. Build duration stands in for content size and image
weight, and commit labels stand in for what was authored. The ratios live in
``ContentHeuristics`` and every figure produced is reported as an estimate.
"""

import calendar
import math
from typing import Dict, List, Sequence

from .config import ContentHeuristics
from .models import ContentAnalysis, ContentMetrics, DeploymentRecord, MonthlyTrend, as_utc


def _mean_deploy_seconds(records: Sequence[DeploymentRecord]) -> float:
    if not records:
        return 0.0
    return sum(r.deploy_time or 0 for r in records) / len(records)


class ContentImpactEstimator:
    """Estimates content-authoring load from a window of deployments."""

    def __init__(self, heuristics: ContentHeuristics):
        self.heuristics = heuristics

    def _labelled(self, records: Sequence[DeploymentRecord], keywords) -> List[DeploymentRecord]:
        return [r for r in records if any(k in r.commit_label for k in keywords)]

    def estimate(self, records: Sequence[DeploymentRecord]) -> ContentMetrics:
        """Estimate content metrics for the deployments that look like content updates."""
        content = self._labelled(records, self.heuristics.content_keywords)
        posts = self.estimate_post_count(content)

        total_minutes = sum(r.deploy_time or 0 for r in content) / 60
        heavy = [r for r in content if (r.deploy_time or 0) > self.heuristics.image_heavy_seconds]

        return ContentMetrics(
            estimated_posts=posts,
            estimated_average_post_size_kb=round(
                _mean_deploy_seconds(content) / 60 * self.heuristics.kb_per_build_minute
            ),
            estimated_image_optimizations=math.floor(
                len(heavy) * self.heuristics.images_per_heavy_deploy
            ),
            estimated_build_minutes_per_post=total_minutes / posts if posts else 0.0,
            incremental_builds_detected=self.incremental_builds_detected(content),
        )

    def estimate_post_count(self, records: Sequence[DeploymentRecord]) -> int:
        new_posts = self._labelled(records, self.heuristics.new_content_keywords)
        return max(len(new_posts), math.floor(len(records) * self.heuristics.post_ratio))

    def incremental_builds_detected(self, records: Sequence[DeploymentRecord]) -> bool:
        # content-only builds that stay fast suggest incremental builds
        updates = self._labelled(records, ("content",))
        if not updates:
            return False
        return _mean_deploy_seconds(updates) < self.heuristics.incremental_build_seconds

    @staticmethod
    def optimization_score(metrics: ContentMetrics) -> int:
        score = 100
        if metrics.estimated_build_minutes_per_post > 3:
            score -= 20
        if metrics.estimated_image_optimizations > 10:
            score -= 15
        if not metrics.incremental_builds_detected:
            score -= 25
        if metrics.estimated_average_post_size_kb > 500:
            score -= 10
        return max(0, score)

    @staticmethod
    def recommendations(metrics: ContentMetrics) -> List[str]:
        recommendations = []
        if metrics.estimated_build_minutes_per_post > 3:
            recommendations.append(
                "Optimize build performance: consider splitting large guides into smaller posts"
            )
        if metrics.estimated_image_optimizations > 10:
            recommendations.append("Image optimization: compress photos and diagrams before upload")
        if not metrics.incremental_builds_detected:
            recommendations.append(
                "Enable incremental builds: configure your generator for faster content-only updates"
            )
        if metrics.estimated_average_post_size_kb > 500:
            recommendations.append("Content optimization: break large articles into a series")

        recommendations.extend(
            [
                "Schedule content updates during low-traffic periods",
                "Ensure pages are mobile-responsive",
                "Batch related content changes into a single deploy",
            ]
        )
        return recommendations

    @staticmethod
    def monthly_trends(records: Sequence[DeploymentRecord]) -> List[MonthlyTrend]:
        """Deployment count and average build minutes per calendar month."""
        buckets: Dict[str, List[int]] = {}
        for record in records:
            created = as_utc(record.created_at)
            month = f"{calendar.month_name[created.month]} {created.year}"
            buckets.setdefault(month, []).append(record.deploy_time or 0)

        return [
            MonthlyTrend(
                month=month,
                deployment_count=len(times),
                average_build_minutes=sum(times) / len(times) / 60,
            )
            for month, times in buckets.items()
        ]

    def analyze(self, records: Sequence[DeploymentRecord]) -> ContentAnalysis:
        metrics = self.estimate(records)
        return ContentAnalysis(
            metrics=metrics,
            recommendations=self.recommendations(metrics),
            optimization_score=self.optimization_score(metrics),
            monthly_trends=self.monthly_trends(records),
        )

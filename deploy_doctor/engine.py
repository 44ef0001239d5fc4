"""Deployment diagnostics engine.

``DiagnosticsEngine`` wires the metrics aggregator, error classifier, retry
advisor and content estimator together from one immutable configuration. All
of its operations are synchronous and work on data that has already been
fetched; I/O belongs to ``DeploymentMonitor``.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from .classifier import ErrorClassifier
from .config import DiagnosticsConfig
from .content import ContentImpactEstimator
from .metrics import MetricsAggregator
from .models import (
    BuildStrategy,
    CategorizedErrors,
    Classification,
    ContentAnalysis,
    ContentMetrics,
    DeploymentRecord,
    ErrorRule,
    LogLine,
    RetryVerdict,
    UsageMetrics,
)
from .retry import RetryAdvisor
from .rules import ERROR_RULES
from .strategy import BuildStrategyAnalyzer


class DiagnosticsEngine:
    """Facade over the diagnostics components.

    Attributes:
        config: Policy values shared by the components.
        aggregator: Build-usage metrics.
        classifier: Ordered rule-table error classifier.
        advisor: Retry decisions.
        content: Content-impact estimation.
        strategy: Build-strategy analysis.
    """

    def __init__(
        self,
        config: Optional[DiagnosticsConfig] = None,
        rules: Sequence[ErrorRule] = ERROR_RULES,
    ):
        self.config = config or DiagnosticsConfig()
        self.aggregator = MetricsAggregator(self.config)
        self.classifier = ErrorClassifier(rules)
        self.advisor = RetryAdvisor(self.config)
        self.content = ContentImpactEstimator(self.config.content)
        self.strategy = BuildStrategyAnalyzer(self.config)

    def classify_error(
        self, record: DeploymentRecord, metrics: Optional[UsageMetrics] = None
    ) -> Classification:
        return self.classifier.classify(record, metrics)

    def aggregate_metrics(
        self, records: Sequence[DeploymentRecord], now: Optional[datetime] = None
    ) -> UsageMetrics:
        return self.aggregator.aggregate(records, now)

    def decide_retry(
        self, classification: Optional[Classification], metrics: Optional[UsageMetrics]
    ) -> RetryVerdict:
        return self.advisor.decide(classification, metrics)

    def estimate_content_impact(self, records: Sequence[DeploymentRecord]) -> ContentMetrics:
        return self.content.estimate(records)

    def analyze_content(self, records: Sequence[DeploymentRecord]) -> ContentAnalysis:
        return self.content.analyze(records)

    def categorize_logs(self, lines: Iterable[LogLine]) -> CategorizedErrors:
        return self.classifier.categorize_logs(lines)

    def quota_status(self, metrics: UsageMetrics) -> str:
        return self.aggregator.quota_status(metrics)

    def analyze_build_strategy(
        self,
        records: Sequence[DeploymentRecord],
        metrics: UsageMetrics,
        timeframe: str = "month",
        now: Optional[datetime] = None,
    ) -> BuildStrategy:
        return self.strategy.analyze(records, metrics, timeframe, now)

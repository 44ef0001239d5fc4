"""Retry recommendations for failed deployments."""

import logging
from typing import List, Optional

from .config import DiagnosticsConfig
from .models import Classification, RetryVerdict, UsageMetrics

logger = logging.getLogger(__name__)


class RetryAdvisor:
    """Decides whether a failed deployment is worth retrying.

    The decision weighs the error classification against the build minutes
    left this month. Conditions are checked in order; the first disqualifying
    one settles a "do not retry", but every condition that fired is reported so
    callers can show the whole rationale. A failure rate above the configured
    ceiling overrides a positive verdict and adds its own reason.
    """

    def __init__(self, config: DiagnosticsConfig):
        self.config = config

    def decide(
        self,
        classification: Optional[Classification],
        metrics: Optional[UsageMetrics],
    ) -> RetryVerdict:
        """Produce a retry verdict.

        Args:
            classification: Classification of the failed deployment, if any.
                Generic fallback classifications count as unavailable.
            metrics: Current build usage, if known.

        Returns:
            RetryVerdict: Recommendation with every reason that fired, in order.
        """
        reasons: List[str] = []
        recommended = False

        cost = self.config.default_retry_cost_minutes
        if classification is not None and classification.estimated_cost_minutes is not None:
            cost = classification.estimated_cost_minutes

        if classification is None or not classification.recognized:
            reasons.append("Unknown error type - manual investigation required")
        elif metrics is None:
            reasons.append("Build usage unknown - cannot confirm minutes for a retry")
        elif metrics.minutes_remaining < self.config.critical_minutes_floor:
            reasons.append(
                f"Critical: Less than {self.config.critical_minutes_floor} build minutes remaining"
            )
        elif metrics.minutes_remaining < cost * self.config.retry_cost_multiplier:
            reasons.append("Low build minutes - not enough budget for a safe retry")
        elif classification.severity in ("low", "medium"):
            reasons.append("Error type is likely fixable with retry")
            recommended = True
        elif classification.severity == "high":
            if classification.category in self.config.transient_categories:
                reasons.append("Temporary issue - retry recommended")
                recommended = True
            else:
                reasons.append("Code-related issue - fix required before retry")
        else:
            reasons.append("Critical error - requires code changes before retry")

        if metrics is not None and metrics.failure_rate > self.config.failure_rate_ceiling:
            reasons.append("High failure rate detected - investigate pattern before retry")
            recommended = False

        verdict = RetryVerdict(
            recommended=recommended,
            reasons=reasons,
            estimated_cost_minutes=cost,
            minutes_after_retry=(
                metrics.minutes_remaining - cost if metrics is not None else None
            ),
        )
        logger.info(
            f"Retry verdict for {classification.category if classification else 'unclassified'}: "
            f"{'retry' if verdict.recommended else 'do not retry'}"
        )
        return verdict

"""Rule-based classification of Netlify build errors.

The classifier turns the error text of a deployment into a ``Classification``.
State-based pre-classification runs before any text matching: a ``stopped``
build never carries informative text and is always a build timeout. Text that
matches no rule falls back to a generic category that asks for manual
investigation instead of failing.
"""

import logging
from typing import Iterable, Optional, Sequence

from .models import (
    CategorizedErrors,
    Classification,
    DeploymentRecord,
    DeploymentState,
    ErrorRule,
    LogLine,
    UsageMetrics,
)
from .rules import ERROR_RULES

logger = logging.getLogger(__name__)

BUILD_TIMEOUT = Classification(
    category="Build Timeout",
    severity="medium",
    description="The build was stopped before it finished, usually after exceeding the build time limit.",
    possible_causes=[
        "Build exceeded the maximum allowed build time",
        "Build was cancelled manually",
        "A build step waited on input or a hung process",
    ],
    quick_fixes=[
        "Check the last log lines for the step that hung",
        "Cache dependencies between builds",
    ],
    prevention_tips=["Keep build steps non-interactive", "Watch build duration trends"],
    estimated_cost_minutes=15,
)

BUILD_ERROR = Classification(
    category="Build Error",
    severity="medium",
    description="The build failed with an error that matches no known pattern.",
    possible_causes=["Unrecognized build failure"],
    quick_fixes=["Review the full build log", "Reproduce the build locally"],
    prevention_tips=["Run the production build locally before pushing"],
    recognized=False,
)

UNKNOWN_ERROR = Classification(
    category="Unknown Error",
    severity="medium",
    description="The deployment did not report an error message.",
    possible_causes=["No error details were reported for this deployment"],
    quick_fixes=["Open the deploy log in the Netlify dashboard"],
    prevention_tips=[],
    recognized=False,
)


def _from_rule(rule: ErrorRule) -> Classification:
    return Classification(
        category=rule.category,
        severity=rule.severity,
        description=rule.description,
        possible_causes=list(rule.common_causes),
        quick_fixes=list(rule.quick_fixes),
        prevention_tips=list(rule.prevention_tips),
        estimated_cost_minutes=rule.estimated_cost_minutes,
    )


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"• {item}" for item in items) or "• None"


def build_prompt(
    classification: Classification,
    record: Optional[DeploymentRecord] = None,
    metrics: Optional[UsageMetrics] = None,
) -> str:
    """Build the analysis prompt handed verbatim to an external reasoning system.

    Args:
        classification: The classification to describe.
        record: Deployment whose identifying fields are embedded, if known.
        metrics: Current build usage, if known.

    Returns:
        str: Prompt text; absent fields are rendered as 'Unknown'.
    """

    def field(value) -> str:
        return str(value) if value not in (None, "") else "Unknown"

    cost = classification.estimated_cost_minutes
    prompt = f"""NETLIFY BUILD ERROR ANALYSIS

Error Category: {classification.category}
Severity: {classification.severity}
Estimated Build Time Impact: {field(cost)}{' minutes' if cost is not None else ''}

Deployment:
- Deploy ID: {field(record.id if record else None)}
- Site ID: {field(record.site_id if record else None)}
- State: {field(record.state if record else None)}
- Branch: {field(record.branch if record else None)}
- Commit: {field(record.commit_ref if record else None)}

Build Usage:
- Build Minutes Remaining: {field(metrics.minutes_remaining if metrics else None)}
- Recent Failure Rate: {field(metrics.failure_rate if metrics else None)}%

Error Message:
{classification.error_message or 'No error message was reported.'}

Quick Fixes Available:
{_bullets(classification.quick_fixes)}

Common Causes:
{_bullets(classification.possible_causes)}

Prevention Tips:
{_bullets(classification.prevention_tips)}

Please provide:
1. Root cause analysis for this specific error
2. Step-by-step fix implementation
3. Prevention strategy for future builds
4. Build time optimization recommendations"""
    return prompt


class ErrorClassifier:
    """Classifies deployment errors with an ordered rule table.

    Attributes:
        rules: Rules in priority order; the first match wins.
    """

    def __init__(self, rules: Sequence[ErrorRule] = ERROR_RULES):
        self.rules = tuple(rules)

    def match(self, text: str) -> Optional[ErrorRule]:
        """Return the first rule whose pattern occurs in ``text``."""
        for rule in self.rules:
            if rule.matches(text):
                return rule
        return None

    def classify_message(self, message: Optional[str], state: str) -> Classification:
        """Classify raw error text for a deployment in ``state``.

        The returned classification carries no prompt; see ``classify``.
        """
        if state == DeploymentState.STOPPED.value:
            return BUILD_TIMEOUT.model_copy(deep=True, update={"error_message": message or None})

        if state == DeploymentState.READY.value:
            # stale error text on a published deploy is meaningless
            message = None
        text = (message or "").strip()
        if not text:
            return UNKNOWN_ERROR.model_copy(deep=True)

        rule = self.match(text)
        if rule is None:
            return BUILD_ERROR.model_copy(deep=True, update={"error_message": text})
        return _from_rule(rule).model_copy(update={"error_message": text})

    def classify(
        self, record: DeploymentRecord, metrics: Optional[UsageMetrics] = None
    ) -> Classification:
        """Classify a deployment and attach its analysis prompt.

        Args:
            record: The deployment to classify.
            metrics: Build usage to embed in the prompt, if available.

        Returns:
            Classification: Category, severity, fixes and prompt.
        """
        classification = self.classify_message(record.error_message, record.state)
        classification.prompt = build_prompt(classification, record, metrics)
        logger.info(
            f"Classified deploy {record.short_id} ({record.state}) as "
            f"{classification.category} [{classification.severity}]"
        )
        return classification

    def categorize_logs(self, lines: Iterable[LogLine]) -> CategorizedErrors:
        """Bucket error-level log lines by the severity of their matching rule."""
        categorized = CategorizedErrors()
        for line in lines:
            if line.level != "error":
                continue
            rule = self.match(line.message)
            if rule is None:
                categorized.unrecognized.append(line.message)
            else:
                getattr(categorized, rule.severity).append(rule)
        return categorized

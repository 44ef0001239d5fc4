"""Data models for the deployment diagnostics system.

This module defines the data structures exchanged between the Netlify client,
the diagnostics engine and the report layer. All models use Pydantic for
validation and serialization. Records fetched from Netlify are read-only
snapshots; everything else is derived fresh on every request.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

Severity = Literal["low", "medium", "high", "critical"]
LogLevel = Literal["info", "warn", "error"]

SEVERITY_ORDER: List[str] = ["critical", "high", "medium", "low"]


def as_utc(value: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DeploymentState(str, Enum):
    """Lifecycle states of a Netlify deployment this system reasons about.

    Netlify reports more intermediate states (``enqueued``, ``uploading`` ...);
    those are kept as plain strings on the record.
    """

    PENDING = "pending"
    BUILDING = "building"
    READY = "ready"
    ERROR = "error"
    FAILED = "failed"
    STOPPED = "stopped"


class Site(BaseModel):
    """A Netlify site owned by the authenticated account."""

    id: str
    name: str
    url: str = ""
    admin_url: Optional[str] = None
    state: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeploymentRecord(BaseModel):
    """One build attempt of a site.

    Attributes:
        id: Deployment identifier.
        state: Lifecycle state (see ``DeploymentState``).
        created_at: When the build was created.
        published_at: When the build went live, if it did.
        error_message: Free-text error reported by Netlify.
        deploy_time: Build duration in seconds.
        branch: Git branch that triggered the build.
        commit_ref: Commit SHA of the build.
        title: Commit message or deploy title.
        site_id: Owning site identifier.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    state: str
    created_at: datetime
    site_id: str = ""
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    error_message: Optional[str] = None
    deploy_time: Optional[int] = None
    branch: Optional[str] = None
    commit_ref: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    deploy_url: Optional[str] = None
    admin_url: Optional[str] = None

    @property
    def commit_label(self) -> str:
        """Lower-cased commit message, falling back to the commit reference."""
        return (self.title or self.commit_ref or "").lower()

    @property
    def short_id(self) -> str:
        return self.id[:8]


class LogLine(BaseModel):
    """One line of build output."""

    timestamp: Optional[datetime] = None
    level: LogLevel = "info"
    message: str = ""
    source: str = "build"

    @field_validator("timestamp", mode="before")
    @classmethod
    def _empty_timestamp(cls, value):
        return value or None

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        level = str(value or "info").lower()
        if level == "warning":
            return "warn"
        if level in ("info", "warn", "error"):
            return level
        return "info"


class ErrorRule(BaseModel):
    """A static classification rule.

    The ``pattern`` is a regular expression searched case-insensitively in the
    error text. Rules never overlap-resolve: the table they live in is ordered
    and the first matching rule decides the category.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str
    category: str
    description: str
    severity: Severity
    estimated_cost_minutes: int
    common_causes: List[str]
    quick_fixes: List[str]
    prevention_tips: List[str]

    def matches(self, text: str) -> bool:
        return re.search(self.pattern, text, re.IGNORECASE) is not None


class Classification(BaseModel):
    """Result of classifying one deployment error.

    Attributes:
        category: Error category name (e.g. 'Dependency Conflict').
        severity: Urgency of the category.
        description: Human-readable explanation of the category.
        possible_causes: Likely causes of this kind of error.
        quick_fixes: Fixes worth trying first.
        prevention_tips: How to avoid the error in future builds.
        estimated_cost_minutes: Build minutes a retry is expected to cost.
        recognized: False for the generic fallbacks that need manual review.
        error_message: The raw error text that was classified, if any.
        prompt: Prompt text to hand to an external reasoning system.
    """

    category: str
    severity: Severity
    description: str
    possible_causes: List[str] = []
    quick_fixes: List[str] = []
    prevention_tips: List[str] = []
    estimated_cost_minutes: Optional[int] = None
    recognized: bool = True
    error_message: Optional[str] = None
    prompt: str = ""


class CategorizedErrors(BaseModel):
    """Build-log error lines bucketed by the severity of their matching rule."""

    critical: List[ErrorRule] = []
    high: List[ErrorRule] = []
    medium: List[ErrorRule] = []
    low: List[ErrorRule] = []
    unrecognized: List[str] = []

    @property
    def recognized(self) -> List[ErrorRule]:
        return self.critical + self.high + self.medium + self.low

    @property
    def total_impact_minutes(self) -> int:
        return sum(rule.estimated_cost_minutes for rule in self.recognized)


class UsageMetrics(BaseModel):
    """Build usage derived from a window of deployments.

    ``minutes_remaining`` may be negative when the account is over quota.
    """

    average_build_minutes: float = 0.0
    minutes_used: int = 0
    minutes_remaining: int = 0
    monthly_quota: int = 0
    failure_rate: int = 0
    deployment_count: int = 0


class RetryVerdict(BaseModel):
    """Whether a failed deployment should be retried, and why."""

    recommended: bool
    reasons: List[str]
    estimated_cost_minutes: int = 0
    minutes_after_retry: Optional[int] = None


class ContentMetrics(BaseModel):
    """Estimated content-authoring figures.

    Every field is an estimate derived from build durations and commit labels;
    nothing here is measured from the site's content.
    """

    estimated_posts: int = 0
    estimated_average_post_size_kb: int = 0
    estimated_image_optimizations: int = 0
    estimated_build_minutes_per_post: float = 0.0
    incremental_builds_detected: bool = False


class MonthlyTrend(BaseModel):
    month: str
    deployment_count: int
    average_build_minutes: float


class ContentAnalysis(BaseModel):
    metrics: ContentMetrics
    recommendations: List[str]
    optimization_score: int
    monthly_trends: List[MonthlyTrend]


class BuildStrategy(BaseModel):
    """Build pattern analysis for a week or month of deployments."""

    timeframe: Literal["week", "month"]
    average_build_minutes: float
    min_build_minutes: float
    max_build_minutes: float
    deploys_per_day: float
    success_rate: float
    minutes_used: int
    projected_monthly_minutes: int
    recommended_max_builds_per_day: Optional[int]
    recommendations: List[str]


class FailedDeployment(BaseModel):
    record: DeploymentRecord
    classification: Classification


class SiteStatus(BaseModel):
    """Latest deployment, recent history and usage for one site."""

    site_id: str
    site: Optional[Site] = None
    recent: List[DeploymentRecord] = []
    metrics: UsageMetrics
    quota_status: str
    latest_classification: Optional[Classification] = None

    @property
    def latest(self) -> Optional[DeploymentRecord]:
        return self.recent[0] if self.recent else None


class ErrorAnalysis(BaseModel):
    """Classification of a deployment together with its build-log errors."""

    record: DeploymentRecord
    classification: Classification
    log_errors: CategorizedErrors
    metrics: UsageMetrics


class RetryAnalysis(BaseModel):
    record: DeploymentRecord
    classification: Classification
    verdict: RetryVerdict
    metrics: UsageMetrics

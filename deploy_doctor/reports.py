"""Markdown text reports for the MCP tools and the CLI."""

from typing import Iterable, List

from .models import (
    SEVERITY_ORDER,
    BuildStrategy,
    ContentAnalysis,
    DeploymentRecord,
    ErrorAnalysis,
    FailedDeployment,
    RetryAnalysis,
    Site,
    SiteStatus,
    UsageMetrics,
)

STATE_ICONS = {
    "ready": "✅",
    "error": "❌",
    "failed": "❌",
    "stopped": "⏹️",
    "building": "🔨",
    "pending": "⏳",
}

QUOTA_LABELS = {
    "critical": "🔴 CRITICAL",
    "warning": "🟡 WARNING",
    "good": "🟢 GOOD",
}

PRIORITY_ACTIONS = {
    "critical": "🚨 CRITICAL: Address memory/system issues immediately",
    "high": "⚠️ HIGH: Fix dependency and build tool issues",
    "medium": "📋 MEDIUM: Resolve network and configuration issues",
}


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def _deployment_line(record: DeploymentRecord) -> str:
    icon = STATE_ICONS.get(record.state, "•")
    line = f"{icon} {record.short_id} - {record.state} ({record.created_at:%Y-%m-%d %H:%M})"
    if record.branch:
        line += f" on {record.branch}"
    if record.deploy_time:
        line += f", {record.deploy_time}s"
    return line


def format_sites(sites: List[Site]) -> str:
    if not sites:
        return "No sites found for this account."
    lines = [f"• {site.name} ({site.id}) - {site.url or 'no url'}" for site in sites]
    return f"**🌐 Netlify Sites ({len(sites)})**\n\n" + "\n".join(lines)


def format_deployment_status(site_id: str, deployments: List[DeploymentRecord]) -> str:
    if not deployments:
        return f"No deployments found for site {site_id}."
    lines = [_deployment_line(record) for record in deployments]
    return f"**📦 Recent Deployments for {site_id}**\n\n" + "\n".join(lines)


def format_failed_deployments(site_id: str, failed: List[FailedDeployment]) -> str:
    if not failed:
        return f"✅ No failed deployments found for site {site_id}."

    sections = []
    for item in failed:
        record, classification = item.record, item.classification
        sections.append(
            f"""**{record.short_id}** - {record.created_at:%Y-%m-%d %H:%M} ({record.branch or 'unknown branch'})
• Error: {record.error_message or 'No error message'}
• Category: {classification.category} [{classification.severity}]
• First fix to try: {classification.quick_fixes[0] if classification.quick_fixes else 'Manual investigation required'}"""
        )
    return f"**❌ Failed Deployments for {site_id}**\n\n" + "\n\n".join(sections)


def format_build_metrics(metrics: UsageMetrics) -> str:
    return f"""**📊 Build Metrics**

• Deployments analyzed: {metrics.deployment_count}
• Average build time: {metrics.average_build_minutes:.1f} minutes
• Build minutes used this month: {metrics.minutes_used}/{metrics.monthly_quota}
• Build minutes remaining: {metrics.minutes_remaining}
• Failure rate: {metrics.failure_rate}%"""


def format_build_minutes(metrics: UsageMetrics, quota_status: str) -> str:
    if quota_status == "good":
        advice = "✅ Usage is within healthy limits"
    else:
        advice = "⚠️ Consider optimizing builds or reducing deployment frequency"

    return f"""**📊 Build Minutes Status**

{QUOTA_LABELS[quota_status]} - {metrics.minutes_remaining} minutes remaining

**Monthly Usage:**
• Used: {metrics.minutes_used}/{metrics.monthly_quota} minutes
• Average build time: {metrics.average_build_minutes:.1f} minutes
• Failure rate: {metrics.failure_rate}%

**Recommendations:**
{advice}

**Next Actions:**
• Monitor large content updates that increase build time
• Test builds locally before deploying
• Optimize images and assets for faster builds
• Use build hooks for on-demand deployments
• Consider disabling deploy previews for non-critical branches"""


def format_error_analysis(analysis: ErrorAnalysis) -> str:
    record, classification = analysis.record, analysis.classification
    log_errors = analysis.log_errors

    counts = "\n".join(
        f"• {severity.capitalize()}: {len(getattr(log_errors, severity))}"
        for severity in SEVERITY_ORDER
    )
    actions = "\n".join(
        action for severity, action in PRIORITY_ACTIONS.items() if getattr(log_errors, severity)
    )
    status = "" if classification.recognized else "\n⚠️ Requires manual investigation"

    return f"""**🔍 Build Error Analysis for {record.short_id}**

**Error Category:** {classification.category}
**Severity:** {classification.severity}{status}
**Description:** {classification.description}
**Error Message:** {classification.error_message or 'None reported'}

**Possible Causes:**
{_bullets(classification.possible_causes)}

**Quick Fixes:**
{_bullets(classification.quick_fixes) or '• Manual investigation required'}

**Prevention Tips:**
{_bullets(classification.prevention_tips) or '• None'}

**Build Log Errors:**
{counts}
• Unrecognized: {len(log_errors.unrecognized)}
• Estimated build time impact: {log_errors.total_impact_minutes} minutes

**Priority Actions:**
{actions or '• No urgent actions from the build log'}

**AI Analysis Prompt:**
{classification.prompt}"""


def format_site_status(status: SiteStatus) -> str:
    name = status.site.name if status.site else status.site_id
    latest = status.latest
    latest_line = _deployment_line(latest) if latest else "No deployments yet"

    text = f"""**🚀 Deployment Status for {name}**

**Latest Deployment:** {latest_line}

**Build Usage:** {QUOTA_LABELS[status.quota_status]}
• Minutes used: {status.metrics.minutes_used}/{status.metrics.monthly_quota}
• Minutes remaining: {status.metrics.minutes_remaining}
• Average build time: {status.metrics.average_build_minutes:.1f} minutes
• Failure rate: {status.metrics.failure_rate}%"""

    if status.latest_classification is not None:
        classification = status.latest_classification
        text += f"""

**Latest Issue:** {classification.category} [{classification.severity}]
{_bullets(classification.quick_fixes)}"""

    if len(status.recent) > 1:
        text += "\n\n**Recent Deployments:**\n" + "\n".join(
            _deployment_line(record) for record in status.recent
        )
    return text


def format_build_strategy(strategy: BuildStrategy) -> str:
    max_builds = (
        f"{strategy.recommended_max_builds_per_day} builds"
        if strategy.recommended_max_builds_per_day is not None
        else "not enough build data"
    )
    return f"""**🎯 Build Strategy Analysis ({strategy.timeframe})**

**Current Performance:**
• Average build time: {strategy.average_build_minutes:.1f} minutes
• Build time range: {strategy.min_build_minutes:.1f} - {strategy.max_build_minutes:.1f} minutes
• Deployments per day: {strategy.deploys_per_day:.1f}
• Success rate: {strategy.success_rate:.1f}%

**Free Tier Optimization Recommendations:**
{_bullets(strategy.recommendations)}

**Build Minutes Conservation:**
• Current usage: {strategy.minutes_used} minutes
• Projected monthly usage: {strategy.projected_monthly_minutes} minutes
• Recommended max builds/day: {max_builds}"""


def format_retry_analysis(analysis: RetryAnalysis) -> str:
    classification, verdict = analysis.classification, analysis.verdict

    if verdict.recommended:
        follow_up = [
            "Test the fix locally before retrying",
            "Watch the site after the retry completes",
            "Consider a branch deploy first",
        ]
    else:
        follow_up = [
            "Fix code issues before attempting a retry",
            "Use local development for testing",
            "Preserve build minutes for critical updates",
        ]

    return f"""**🤖 Smart Retry Analysis**

**Deployment:** {analysis.record.short_id}
**Error Type:** {classification.category}
**Estimated Retry Cost:** {verdict.estimated_cost_minutes} minutes

**Retry Recommendation:** {'✅ RETRY' if verdict.recommended else '❌ DO NOT RETRY'}

**Reasoning:**
{_bullets(verdict.reasons)}

**Suggested Actions:**
{_bullets(classification.quick_fixes) or '• Manual investigation required'}

**Build Minutes Impact:**
• Current remaining: {analysis.metrics.minutes_remaining} minutes
• Estimated retry cost: {verdict.estimated_cost_minutes} minutes
• Post-retry remaining: {verdict.minutes_after_retry} minutes

**Next Steps:**
{_bullets(follow_up)}"""


def format_content_analysis(analysis: ContentAnalysis) -> str:
    metrics = analysis.metrics
    incremental = "✅ Appears configured" if metrics.incremental_builds_detected else "❌ Not detected"
    trends = _bullets(
        f"{trend.month}: {trend.deployment_count} deployments "
        f"({trend.average_build_minutes:.1f}min avg build)"
        for trend in analysis.monthly_trends
    )

    return f"""**📝 Content Impact Analysis (estimated)**

**Optimization Score: {analysis.optimization_score}/100**

**Estimated Content Statistics:**
• Estimated posts: {metrics.estimated_posts}
• Estimated average post size: {metrics.estimated_average_post_size_kb}KB
• Estimated build time per post: {metrics.estimated_build_minutes_per_post:.2f} minutes

**Estimated Optimization Opportunities:**
• Estimated images to optimize: {metrics.estimated_image_optimizations}
• Incremental builds: {incremental}

**Recommendations:**
{_bullets(analysis.recommendations)}

**Monthly Trends:**
{trends or '• No deployments'}

_Figures are estimated from build durations and commit messages, not measured._"""

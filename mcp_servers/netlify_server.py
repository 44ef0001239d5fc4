"""Netlify Diagnostics MCP Server for deployment monitoring and error triage.

This module implements an MCP server that lets an AI assistant inspect Netlify
deployments. It provides tools for listing sites and deployments, tracking the
monthly build-minute quota, classifying build errors, deciding whether a failed
build is worth retrying and estimating how content updates affect build time.

Each tool call is independent: it fetches fresh data from the Netlify API,
runs the diagnostics engine over it and returns a markdown text report.
Upstream failures are reported as error text rather than raised.
"""

import argparse
import logging
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from deploy_doctor import reports
from deploy_doctor.client import NetlifyAPIError
from deploy_doctor.config import AppConfig, ConnectionMethod
from deploy_doctor.monitor import DeploymentMonitor

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("netlify-server")

CONFIG = AppConfig()

# Create FastMCP server instance
mcp = FastMCP(CONFIG.server_name)


def _monitor() -> DeploymentMonitor:
    return DeploymentMonitor(CONFIG)


def _error(action: str, error: Exception) -> str:
    # full traceback only in debug mode
    logger.error(f"Error {action}: {error}", exc_info=error if CONFIG.debug else None)
    return f"❌ Error {action}: {error}"


@mcp.tool()
async def hello() -> str:
    """Test connectivity and server status."""
    token = "configured" if CONFIG.netlify.access_token else "missing"
    return (
        f"🚀 Netlify Diagnostics MCP Server v{CONFIG.server_version} is running!\n\n"
        f"• Netlify access token: {token}\n"
        f"• Default site: {CONFIG.netlify.site_id or 'not set'}\n"
        f"• Monthly build-minute quota: {CONFIG.diagnostics.monthly_quota_minutes}\n\n"
        "Available tools: list_sites, check_deployment_status, get_failed_deployments, "
        "get_build_metrics, analyze_build_error, get_advanced_deployment_status, "
        "check_build_minutes, optimize_build_strategy, smart_retry_analysis, "
        "analyze_content_impact, monitor_site"
    )


@mcp.tool()
async def list_sites() -> str:
    """List all Netlify sites in the account."""
    try:
        sites = await _monitor().list_sites()
    except NetlifyAPIError as e:
        return _error("listing sites", e)
    return reports.format_sites(sites)


@mcp.tool()
async def check_deployment_status(site_id: str, limit: int = 5) -> str:
    """Check recent deployment status for a site.

    Args:
        site_id: Netlify site ID or name to check.
        limit: Number of recent deployments to show (default: 5).
    """
    try:
        deployments = await _monitor().deployment_status(site_id, limit)
    except NetlifyAPIError as e:
        return _error("checking deployment status", e)
    return reports.format_deployment_status(site_id, deployments)


@mcp.tool()
async def get_failed_deployments(site_id: str, limit: int = 3) -> str:
    """Get failed deployments of a site with their error classification.

    Args:
        site_id: Netlify site ID to check for failures.
        limit: Number of failed deployments to show (default: 3).
    """
    try:
        failed = await _monitor().failed_deployments(site_id, limit)
    except NetlifyAPIError as e:
        return _error("fetching failed deployments", e)
    return reports.format_failed_deployments(site_id, failed)


@mcp.tool()
async def get_build_metrics(site_id: str) -> str:
    """Get build duration, build-minute usage and failure rate for a site.

    Args:
        site_id: Netlify site ID to get metrics for.
    """
    try:
        metrics = await _monitor().build_metrics(site_id)
    except NetlifyAPIError as e:
        return _error("fetching build metrics", e)
    return reports.format_build_metrics(metrics)


@mcp.tool()
async def analyze_build_error(deploy_id: str) -> str:
    """Classify a deployment's build error and summarize its build-log errors.

    The report includes a prompt that can be handed to an AI assistant for a
    deeper root-cause analysis.

    Args:
        deploy_id: Deployment ID to analyze.
    """
    try:
        analysis = await _monitor().analyze_build_error(deploy_id)
    except NetlifyAPIError as e:
        return _error("analyzing build error", e)
    return reports.format_error_analysis(analysis)


@mcp.tool()
async def get_advanced_deployment_status(site_id: str) -> str:
    """Get deployment status with build usage and analysis of the latest failure.

    Args:
        site_id: Netlify site ID to check.
    """
    try:
        status = await _monitor().site_status(site_id)
    except NetlifyAPIError as e:
        return _error("fetching deployment status", e)
    return reports.format_site_status(status)


@mcp.tool()
async def check_build_minutes(site_id: str) -> str:
    """Monitor monthly build-minute usage and remaining quota.

    Args:
        site_id: Netlify site ID to check build minutes for.
    """
    monitor = _monitor()
    try:
        metrics = await monitor.build_metrics(site_id)
    except NetlifyAPIError as e:
        return _error("checking build minutes", e)
    return reports.format_build_minutes(metrics, monitor.engine.quota_status(metrics))


@mcp.tool()
async def optimize_build_strategy(site_id: str, timeframe: str = "month") -> str:
    """Analyze build patterns and suggest optimizations for the free tier.

    Args:
        site_id: Netlify site ID to analyze.
        timeframe: Analysis timeframe, 'week' or 'month' (default: month).
    """
    try:
        strategy = await _monitor().build_strategy(site_id, timeframe)
    except (NetlifyAPIError, ValueError) as e:
        return _error("analyzing build strategy", e)
    return reports.format_build_strategy(strategy)


@mcp.tool()
async def smart_retry_analysis(deployment_id: str) -> str:
    """Decide whether a failed deployment should be retried.

    Weighs the error category against the build minutes left this month and
    the recent failure rate.

    Args:
        deployment_id: Failed deployment ID to analyze.
    """
    try:
        analysis = await _monitor().smart_retry(deployment_id)
    except NetlifyAPIError as e:
        return _error("analyzing retry strategy", e)
    return reports.format_retry_analysis(analysis)


@mcp.tool()
async def analyze_content_impact(site_id: str) -> str:
    """Estimate how content updates affect build time and what to optimize.

    All figures are estimates derived from build durations and commit messages.

    Args:
        site_id: Netlify site ID to analyze.
    """
    try:
        analysis = await _monitor().content_analysis(site_id)
    except NetlifyAPIError as e:
        return _error("analyzing content impact", e)
    return reports.format_content_analysis(analysis)


@mcp.tool()
async def monitor_site(site_id: Optional[str] = None) -> str:
    """Monitor a site, defaulting to NETLIFY_SITE_ID or the account's first site.

    Args:
        site_id: Optional Netlify site ID or name.
    """
    try:
        status = await _monitor().monitor_site(site_id)
    except NetlifyAPIError as e:
        return _error("monitoring site", e)
    return reports.format_site_status(status)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Netlify Diagnostics MCP Server")
    parser.add_argument(
        "--connection",
        choices=[method.value for method in ConnectionMethod],
        default=ConnectionMethod.STDIO.value,
        help="Connection method (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host for SSE connections")
    parser.add_argument(
        "--port", type=int, default=8004, help="Port for SSE connections"
    )
    return parser.parse_args(argv)


# Main execution
async def main():
    """Main entry point for the Netlify diagnostics server.

    Parses the transport options, applies the configured log level (DEBUG when
    the ``DEBUG`` flag is set) and serves the tools over STDIO (default) or SSE.
    """
    args = _parse_args()
    connection = ConnectionMethod(args.connection)

    level = logging.DEBUG if CONFIG.debug else getattr(logging, CONFIG.log_level, logging.INFO)
    logging.getLogger().setLevel(level)

    if not CONFIG.netlify.access_token:
        logger.warning(
            "NETLIFY_ACCESS_TOKEN not found in environment variables - "
            "Netlify API calls will fail"
        )

    logger.info(f"Starting {CONFIG.server_name} v{CONFIG.server_version} over {connection.value}")
    if connection == ConnectionMethod.STDIO:
        await mcp.run_stdio_async()
    elif connection == ConnectionMethod.SSE:
        mcp.settings.host = args.host
        mcp.settings.port = args.port
        await mcp.run_sse_async()


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())

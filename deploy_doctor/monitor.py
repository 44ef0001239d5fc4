"""Deployment monitor that fetches Netlify data and runs the diagnostics engine.

The monitor is the I/O side of the system. Each method serves one tool: it
issues the fetches the tool needs (concurrently when there is more than one)
and hands the already-fetched records to ``DiagnosticsEngine``. Nothing is
cached between calls.
"""

import asyncio
import logging
from typing import List, Optional

from .client import NetlifyAPIError, NetlifyClient
from .config import AppConfig
from .engine import DiagnosticsEngine
from .models import (
    BuildStrategy,
    ContentAnalysis,
    DeploymentRecord,
    DeploymentState,
    ErrorAnalysis,
    FailedDeployment,
    RetryAnalysis,
    Site,
    SiteStatus,
    UsageMetrics,
)
from .strategy import TIMEFRAMES

logger = logging.getLogger(__name__)

METRICS_WINDOW = 30
CONTENT_WINDOW = 50

# states that end a build without publishing it
FAILURE_STATES = (
    DeploymentState.ERROR.value,
    DeploymentState.FAILED.value,
    DeploymentState.STOPPED.value,
)


class DeploymentMonitor:
    """Coordinates the Netlify client and the diagnostics engine.

    Attributes:
        config: Application configuration (credential, policy values).
        client: Netlify API client.
        engine: Diagnostics engine built from ``config.diagnostics``.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[NetlifyClient] = None,
        engine: Optional[DiagnosticsEngine] = None,
    ):
        self.config = config or AppConfig()
        self.client = client or NetlifyClient(self.config.netlify)
        self.engine = engine or DiagnosticsEngine(self.config.diagnostics)

    async def list_sites(self) -> List[Site]:
        return await self.client.list_sites()

    async def deployment_status(self, site_id: str, limit: int = 5) -> List[DeploymentRecord]:
        return await self.client.list_deployments(site_id, limit)

    async def build_metrics(self, site_id: str) -> UsageMetrics:
        deployments = await self.client.list_deployments(site_id, METRICS_WINDOW)
        return self.engine.aggregate_metrics(deployments)

    async def failed_deployments(self, site_id: str, limit: int = 3) -> List[FailedDeployment]:
        failed = await self.client.list_failed_deployments(site_id)
        return [
            FailedDeployment(record=record, classification=self.engine.classify_error(record))
            for record in failed[:limit]
        ]

    async def analyze_build_error(self, deploy_id: str) -> ErrorAnalysis:
        """Classify a deployment's error and bucket the errors in its build log."""
        record = await self.client.get_deployment(deploy_id)
        logs, metrics = await asyncio.gather(
            self.client.get_build_logs(deploy_id),
            self.build_metrics(record.site_id),
        )
        return ErrorAnalysis(
            record=record,
            classification=self.engine.classify_error(record, metrics),
            log_errors=self.engine.categorize_logs(logs),
            metrics=metrics,
        )

    async def smart_retry(self, deploy_id: str) -> RetryAnalysis:
        """Decide whether a failed deployment should be retried."""
        record = await self.client.get_deployment(deploy_id)
        metrics = await self.build_metrics(record.site_id)
        classification = self.engine.classify_error(record, metrics)
        return RetryAnalysis(
            record=record,
            classification=classification,
            verdict=self.engine.decide_retry(classification, metrics),
            metrics=metrics,
        )

    async def site_status(self, site_id: str, site: Optional[Site] = None) -> SiteStatus:
        """Recent deployments and usage for a site, fetched in parallel."""
        recent, metrics = await asyncio.gather(
            self.client.list_deployments(site_id, 5),
            self.build_metrics(site_id),
        )
        latest_classification = None
        if recent and recent[0].state in FAILURE_STATES:
            latest_classification = self.engine.classify_error(recent[0], metrics)
        return SiteStatus(
            site_id=site_id,
            site=site,
            recent=recent,
            metrics=metrics,
            quota_status=self.engine.quota_status(metrics),
            latest_classification=latest_classification,
        )

    async def monitor_site(self, site_id: Optional[str] = None) -> SiteStatus:
        """Status of ``site_id``, the configured default site, or the first site.

        Raises:
            NetlifyAPIError: If no site id is given or configured and the account
                has no sites.
        """
        sites = await self.client.list_sites()
        wanted = site_id or self.config.netlify.site_id
        site = None
        if wanted:
            site = next((s for s in sites if wanted in (s.id, s.name)), None)
        elif sites:
            site = sites[0]
            wanted = site.id
        if not wanted:
            raise NetlifyAPIError("No site configured and no sites found for this account")
        return await self.site_status(site.id if site else wanted, site)

    async def build_strategy(self, site_id: str, timeframe: str = "month") -> BuildStrategy:
        if timeframe not in TIMEFRAMES:
            raise ValueError(f"Unknown timeframe: {timeframe}")
        limit, _ = TIMEFRAMES[timeframe]
        metrics, deployments = await asyncio.gather(
            self.build_metrics(site_id),
            self.client.list_deployments(site_id, limit),
        )
        return self.engine.analyze_build_strategy(deployments, metrics, timeframe)

    async def content_analysis(self, site_id: str) -> ContentAnalysis:
        deployments = await self.client.list_deployments(site_id, CONTENT_WINDOW)
        return self.engine.analyze_content(deployments)

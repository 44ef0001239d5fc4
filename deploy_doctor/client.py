"""Async client for the Netlify REST API.

Only the read endpoints the diagnostics tools need are wrapped. Every call
opens its own ``httpx.AsyncClient``; the client object keeps nothing between
requests except the immutable connection settings.
"""

import logging
from typing import Any, Callable, List, Optional, TypeVar

import httpx
from pydantic import ValidationError

from .config import NetlifyConfig
from .models import DeploymentRecord, DeploymentState, LogLine, Site

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NetlifyAPIError(RuntimeError):
    """Raised when a Netlify API request fails or returns an error status."""


class NetlifyClient:
    """Read-only Netlify API client.

    Attributes:
        config: API base URL, access token and timeout.
        transport: Optional httpx transport, used to plug in mock transports.
    """

    def __init__(
        self,
        config: Optional[NetlifyConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or NetlifyConfig()
        self.transport = transport

    async def _request(self, endpoint: str, action: str, **params) -> Any:
        url = f"{self.config.api_base.rstrip('/')}{endpoint}"
        logger.debug(f"GET {url} {params or ''}")
        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.config.timeout
            ) as client:
                response = await client.get(
                    url,
                    params=params or None,
                    headers={
                        "Authorization": f"Bearer {self.config.access_token}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            raise NetlifyAPIError(f"Failed to fetch {action}: {e}") from e

        if response.status_code >= 400:
            raise NetlifyAPIError(
                f"Failed to fetch {action}: HTTP error! status: {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise NetlifyAPIError(f"Failed to fetch {action}: invalid JSON response") from e

    @staticmethod
    def _parse(action: str, parse: Callable[[Any], T], data: Any) -> T:
        """Apply ``parse`` to a decoded body, reporting malformed payloads as API errors."""
        try:
            return parse(data)
        except (ValidationError, TypeError, AttributeError) as e:
            raise NetlifyAPIError(f"Failed to fetch {action}: unexpected response format") from e

    async def list_sites(self) -> List[Site]:
        data = await self._request("/sites", "sites")
        return self._parse("sites", lambda d: [Site.model_validate(site) for site in d], data)

    async def list_deployments(self, site_id: str, limit: int = 10) -> List[DeploymentRecord]:
        """Fetch the most recent deployments of a site, newest first."""
        data = await self._request(f"/sites/{site_id}/deploys", "deployments", per_page=limit)
        return self._parse(
            "deployments", lambda d: [DeploymentRecord.model_validate(deploy) for deploy in d], data
        )

    async def list_failed_deployments(
        self, site_id: str, limit: int = 50
    ) -> List[DeploymentRecord]:
        """Failed deployments among the last ``limit`` deployments of a site."""
        deployments = await self.list_deployments(site_id, limit)
        return [d for d in deployments if d.state == DeploymentState.ERROR.value]

    async def get_deployment(self, deploy_id: str) -> DeploymentRecord:
        data = await self._request(f"/deploys/{deploy_id}", "deployment info")
        return self._parse("deployment info", DeploymentRecord.model_validate, data)

    async def get_build_logs(self, deploy_id: str) -> List[LogLine]:
        data = await self._request(f"/deploys/{deploy_id}/logs", "build logs")
        return self._parse("build logs", self._log_lines, data)

    @staticmethod
    def _log_lines(data: Any) -> List[LogLine]:
        return [
            LogLine(
                timestamp=entry.get("created_at") or entry.get("timestamp"),
                level=entry.get("level") or "info",
                message=entry.get("message") or "",
                source=entry.get("source") or "build",
            )
            for entry in data
        ]

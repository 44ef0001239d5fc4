"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict

import httpx
import pytest

from deploy_doctor.client import NetlifyClient
from deploy_doctor.config import AppConfig, DiagnosticsConfig, NetlifyConfig
from deploy_doctor.engine import DiagnosticsEngine
from deploy_doctor.models import DeploymentRecord

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
API_BASE = "https://api.netlify.test/api/v1"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def engine() -> DiagnosticsEngine:
    """Engine with the default policy (300 minute quota)."""
    return DiagnosticsEngine(DiagnosticsConfig())


@pytest.fixture
def make_deploy() -> Callable[..., DeploymentRecord]:
    """Factory for deployment records created relative to ``NOW``."""
    counter = {"n": 0}

    def _make(
        state: str = "ready",
        created_at: datetime = None,
        build_minutes: float = None,
        **fields,
    ) -> DeploymentRecord:
        counter["n"] += 1
        created = created_at or NOW - timedelta(hours=counter["n"])
        published = fields.pop("published_at", None)
        if build_minutes is not None:
            published = created + timedelta(minutes=build_minutes)
        return DeploymentRecord(
            id=fields.pop("id", f"deploy-{counter['n']:04d}-abcdef"),
            state=state,
            created_at=created,
            published_at=published,
            site_id=fields.pop("site_id", "site-1"),
            **fields,
        )

    return _make


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        netlify=NetlifyConfig(access_token="test-token", api_base=API_BASE, site_id=None)
    )


@pytest.fixture
def netlify_api(app_config) -> Callable[[Dict], NetlifyClient]:
    """Build a NetlifyClient served by an in-memory route table.

    Routes map an API path (without the base) to a JSON body, or to a
    ``(status_code, body)`` tuple.
    """

    def _client(routes: Dict) -> NetlifyClient:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer test-token"
            path = request.url.path.replace("/api/v1", "", 1)
            if path not in routes:
                return httpx.Response(404, json={"message": "Not Found"})
            route = routes[path]
            if isinstance(route, tuple):
                status, body = route
                return httpx.Response(status, json=body)
            return httpx.Response(200, json=route)

        return NetlifyClient(app_config.netlify, transport=httpx.MockTransport(handler))

    return _client

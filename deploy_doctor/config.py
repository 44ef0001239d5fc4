"""Configuration module for the Netlify client and diagnostics engine.

This module defines the configuration structures used across the project.
Values are read from the environment once, at import time, after an optional
``.env`` file has been loaded. The resulting models are frozen: the engine
components receive them through their constructors and never consult
process-wide state afterwards.
"""

import os
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()


class ConnectionMethod(Enum):
    """Supported MCP transports for the tool server.

    - STDIO: Process-based communication via standard input/output (default)
    - SSE: HTTP-based Server-Sent Events for network communication
    """

    STDIO = "stdio"
    SSE = "sse"


class NetlifyConfig(BaseModel):
    """Connection settings for the Netlify REST API.

    Attributes:
        access_token: Personal access token sent as a bearer credential.
        site_id: Default site used by tools that accept an optional site.
        api_base: Base URL of the Netlify API.
        timeout: Request timeout in seconds.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = os.getenv("NETLIFY_ACCESS_TOKEN", "")
    site_id: Optional[str] = os.getenv("NETLIFY_SITE_ID") or None
    api_base: str = os.getenv("NETLIFY_API_BASE", "https://api.netlify.com/api/v1")
    timeout: float = float(os.getenv("NETLIFY_TIMEOUT", "30.0"))


class ContentHeuristics(BaseModel):
    """Fixed tunables for the content-impact estimator.

    Build duration is used as a proxy for content size and image weight.
    None of these ratios are measured; they only shape the estimates.

    Attributes:
        content_keywords: Commit label fragments marking a content deployment.
        new_content_keywords: Fragments marking a deployment that adds a post.
        post_ratio: Share of content deployments assumed to carry a post.
        kb_per_build_minute: Assumed content size per minute of build time.
        image_heavy_seconds: Deploy time above which a build counts as image heavy.
        images_per_heavy_deploy: Assumed unoptimized images per heavy build.
        incremental_build_seconds: Average content build time under which
            incremental builds are assumed to be configured.
    """

    model_config = ConfigDict(frozen=True)

    content_keywords: Tuple[str, ...] = ("content", "post", "blog", "calendar")
    new_content_keywords: Tuple[str, ...] = ("add", "new", "post")
    post_ratio: float = 0.7
    kb_per_build_minute: int = 100
    image_heavy_seconds: int = 180
    images_per_heavy_deploy: float = 2.5
    incremental_build_seconds: int = 120


class DiagnosticsConfig(BaseModel):
    """Policy values for the diagnostics engine.

    The retry thresholds have no derivation beyond experience with the free
    tier; they are kept as named values so they can be tuned per account.

    Attributes:
        monthly_quota_minutes: Build minutes included per billing month.
        critical_minutes_floor: Remaining minutes under which no retry is advised.
        retry_cost_multiplier: Remaining minutes must cover this many retries.
        failure_rate_ceiling: Failure rate (percent) above which retries stop.
        default_retry_cost_minutes: Retry cost assumed for unrecognized errors.
        transient_categories: High-severity categories that may still be retried.
        quota_warning_minutes: Remaining minutes under which usage is a warning.
        quota_critical_minutes: Remaining minutes under which usage is critical.
        content: Heuristics for the content-impact estimator.
    """

    model_config = ConfigDict(frozen=True)

    monthly_quota_minutes: int = int(os.getenv("BUILD_MINUTES_QUOTA", "300"))
    critical_minutes_floor: int = 30
    retry_cost_multiplier: float = 2.0
    failure_rate_ceiling: float = 30.0
    default_retry_cost_minutes: int = 3
    transient_categories: FrozenSet[str] = frozenset(
        {"Network Issue", "Dependency Conflict"}
    )
    quota_warning_minutes: int = 100
    quota_critical_minutes: int = 50
    content: ContentHeuristics = ContentHeuristics()


class AppConfig(BaseModel):
    """Top-level configuration for the server and CLI.

    Attributes:
        server_name: Name announced by the MCP server.
        server_version: Version announced by the MCP server.
        log_level: Logging level name for the root logger.
        debug: Enables verbose error output.
        netlify: Netlify API settings.
        diagnostics: Diagnostics engine policy.
    """

    model_config = ConfigDict(frozen=True)

    server_name: str = "netlify-diagnostics-server"
    server_version: str = "0.1.0"
    log_level: str = os.getenv("MCP_LOG_LEVEL", "INFO").upper()
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    netlify: NetlifyConfig = NetlifyConfig()
    diagnostics: DiagnosticsConfig = DiagnosticsConfig()

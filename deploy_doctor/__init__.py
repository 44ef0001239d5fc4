"""Deploy Doctor - Netlify deployment diagnostics over MCP.

This package implements deployment-monitoring and diagnostic tools for Netlify
sites. The tools are exposed to an AI assistant through an MCP (Model Context
Protocol) server and to humans through a small CLI.

The diagnostics engine combines four rule-based components:
- Metrics: Reduces recent deployments into build-minute usage statistics
- Classification: Maps build error text onto an ordered rule table
- Retry decisions: Decides whether a failed build is worth retrying
- Content impact: Estimates content-authoring load from deployment history

Key features:
- Deterministic, first-match-wins error classification
- Build-minute aware retry recommendations
- Concurrent data fetching with a stateless request/response model
"""

__version__ = "0.1.0"

"""Test suite for the Netlify deployment diagnostics.

This package contains tests for the diagnostics engine (metrics, error
classification, retry decisions, content estimation), the Netlify API client
and the MCP tools built on top of them.
"""

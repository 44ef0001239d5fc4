"""Tests for build-strategy analysis."""

from datetime import datetime, timezone

import pytest

from deploy_doctor.models import UsageMetrics

TENTH = datetime(2026, 10, 10, tzinfo=timezone.utc)


def test_slow_frequent_builds(engine, make_deploy):
    records = [make_deploy(deploy_time=360) for _ in range(28)]
    metrics = UsageMetrics(minutes_used=60, minutes_remaining=240, monthly_quota=300, failure_rate=20)

    strategy = engine.analyze_build_strategy(records, metrics, "week", now=TENTH)

    assert strategy.average_build_minutes == pytest.approx(6.0)
    assert strategy.deploys_per_day == pytest.approx(4.0)
    assert strategy.success_rate == 80
    assert strategy.projected_monthly_minutes == 180
    assert strategy.recommended_max_builds_per_day == 1
    assert len(strategy.recommendations) == 3
    assert strategy.recommendations[0].startswith("Build time optimization")


def test_build_range_ignores_missing_durations(engine, make_deploy):
    records = [make_deploy(deploy_time=60), make_deploy(deploy_time=180), make_deploy()]
    metrics = UsageMetrics(minutes_used=4, minutes_remaining=296, monthly_quota=300)

    strategy = engine.analyze_build_strategy(records, metrics, "month", now=TENTH)

    assert strategy.min_build_minutes == pytest.approx(1.0)
    assert strategy.max_build_minutes == pytest.approx(3.0)
    assert strategy.average_build_minutes == pytest.approx(2.0)
    assert strategy.recommendations == ["Build strategy is well optimized for free tier usage"]


def test_no_build_data(engine):
    metrics = UsageMetrics(minutes_remaining=80, monthly_quota=300)

    strategy = engine.analyze_build_strategy([], metrics, "month", now=TENTH)

    assert strategy.average_build_minutes == 0
    assert strategy.min_build_minutes == strategy.max_build_minutes == 0
    assert strategy.recommended_max_builds_per_day is None
    assert any("approaching monthly limit" in r for r in strategy.recommendations)


def test_unknown_timeframe(engine):
    with pytest.raises(ValueError, match="Unknown timeframe"):
        engine.analyze_build_strategy([], UsageMetrics(), "year")

"""Tests for content-impact estimation."""

from datetime import datetime, timedelta, timezone

import pytest

from deploy_doctor.content import ContentImpactEstimator
from deploy_doctor.models import ContentMetrics


@pytest.fixture
def history(make_deploy):
    return [
        make_deploy(title="Add new blog post", deploy_time=240),
        make_deploy(title="Update content for march", deploy_time=60),
        make_deploy(title="content tweak", deploy_time=90),
        make_deploy(title="Fix header css", deploy_time=300),
        make_deploy(title="New calendar post", deploy_time=200),
    ]


def test_empty_history(engine):
    metrics = engine.estimate_content_impact([])

    assert metrics == ContentMetrics()
    assert metrics.incremental_builds_detected is False


def test_estimates_from_content_deployments(engine, history):
    metrics = engine.estimate_content_impact(history)

    assert metrics.estimated_posts == 2
    assert metrics.estimated_average_post_size_kb == 246
    assert metrics.estimated_image_optimizations == 5
    assert metrics.estimated_build_minutes_per_post == pytest.approx(590 / 60 / 2)
    assert metrics.incremental_builds_detected is True


def test_post_count_uses_ratio_when_few_posts_are_labelled(engine, make_deploy):
    records = [make_deploy(title=f"blog tweak {i}", deploy_time=30) for i in range(10)]

    assert engine.estimate_content_impact(records).estimated_posts == 7


def test_commit_ref_is_used_without_title(engine, make_deploy):
    records = [make_deploy(commit_ref="content-update", deploy_time=30)]

    metrics = engine.estimate_content_impact(records)

    assert metrics.incremental_builds_detected is True


def test_slow_content_builds_are_not_incremental(engine, make_deploy):
    records = [make_deploy(title="content refresh", deploy_time=400)]

    assert engine.estimate_content_impact(records).incremental_builds_detected is False


def test_optimization_score_and_recommendations(engine, history):
    analysis = engine.analyze_content(history)

    assert analysis.optimization_score == 80
    assert analysis.recommendations[0].startswith("Optimize build performance")
    assert not any("incremental" in r.lower() for r in analysis.recommendations)


def test_optimization_score_penalties():
    metrics = ContentMetrics(
        estimated_posts=3,
        estimated_average_post_size_kb=900,
        estimated_image_optimizations=12,
        estimated_build_minutes_per_post=4.0,
        incremental_builds_detected=False,
    )

    assert ContentImpactEstimator.optimization_score(metrics) == 30
    assert len(ContentImpactEstimator.recommendations(metrics)) == 7


def test_monthly_trends(engine, make_deploy):
    records = [
        make_deploy(deploy_time=120, created_at=datetime(2026, 10, 2, tzinfo=timezone.utc)),
        make_deploy(deploy_time=240, created_at=datetime(2026, 10, 9, tzinfo=timezone.utc)),
        make_deploy(created_at=datetime(2026, 9, 14, tzinfo=timezone.utc)),
    ]

    trends = engine.analyze_content(records).monthly_trends

    assert [(t.month, t.deployment_count) for t in trends] == [("October 2026", 2), ("September 2026", 1)]
    assert trends[0].average_build_minutes == pytest.approx(3.0)
    assert trends[1].average_build_minutes == 0


def test_monthly_trends_bucket_by_utc_month(engine, make_deploy):
    plus_five = timezone(timedelta(hours=5))
    records = [
        make_deploy(deploy_time=60, created_at=datetime(2026, 11, 1, 1, tzinfo=plus_five)),
        make_deploy(deploy_time=60, created_at=datetime(2026, 10, 31, 23)),
    ]

    trends = engine.analyze_content(records).monthly_trends

    assert [(t.month, t.deployment_count) for t in trends] == [("October 2026", 2)]

"""Tests for the ordered rule-table error classifier."""

import pytest

from deploy_doctor.classifier import ErrorClassifier
from deploy_doctor.models import ErrorRule, LogLine, UsageMetrics
from deploy_doctor.rules import ERROR_RULES


@pytest.fixture
def classifier() -> ErrorClassifier:
    return ErrorClassifier()


def test_stopped_build_is_a_timeout_regardless_of_text(classifier):
    """A stopped build never falls through to the text rules."""
    for message in ["npm ERR! peer dep conflict", "JavaScript heap out of memory", "", None]:
        result = classifier.classify_message(message, "stopped")

        assert result.category == "Build Timeout"
        assert result.severity == "medium"
        assert result.recognized


def test_dependency_conflict(classifier):
    result = classifier.classify_message("npm ERR! peer dep conflict", "error")

    assert result.category == "Dependency Conflict"
    assert result.severity == "high"
    assert result.estimated_cost_minutes == 2
    assert "npm install --legacy-peer-deps" in result.quick_fixes
    assert result.prevention_tips == ["Regular dependency audits", "Lock file maintenance"]


@pytest.mark.parametrize(
    "message",
    [
        "npm ERR peer dep warning, then FATAL ERROR: JavaScript heap out of memory",
        "FATAL ERROR: out of memory after npm ERR! peer dep resolution",
    ],
)
def test_earlier_rule_wins_when_two_match(classifier, message):
    """Position in the table decides, not position in the text."""
    assert classifier.classify_message(message, "error").category == "Dependency Conflict"


def test_typescript_error_code(classifier):
    result = classifier.classify_message("TS2322: type mismatch", "error")

    assert result.category == "TypeScript Error"
    assert result.severity == "high"


@pytest.mark.parametrize(
    "message,category",
    [
        ("npm ERR! 404 Not Found - GET https://registry.npmjs.org/missing-pkg", "Dependency Installation Failed"),
        ("sh: 1: gatsby: not found", "Build Tool Missing"),
        ("npm ERR! missing script: build", "Build Tool Missing"),
        ('error tailwindcss@3.0.0: The engine "node" is incompatible with this module.', "Runtime Version Mismatch"),
        ("Module not found: Error: Can't resolve './components/Header'", "File Path Error"),
        ("FATAL ERROR: Reached heap limit Allocation failed", "Memory Limit"),
        ("Failed to fetch https://api.example.com/posts", "Network Issue"),
        ("Next.js build failed: Error occurred prerendering page /about", "Next.js Build Error"),
        ("Gatsby build failed while running onPostBuild", "Static Site Generator Error"),
        ("ESLint: 3 errors found. Linting failed", "Linting Error"),
    ],
)
def test_rule_families(classifier, message, category):
    assert classifier.classify_message(message, "error").category == category


def test_matching_is_case_insensitive(classifier):
    result = classifier.classify_message("JAVASCRIPT HEAP OUT OF MEMORY", "error")

    assert result.category == "Memory Limit"
    assert result.severity == "critical"


def test_unmatched_text_falls_back_to_build_error(classifier):
    result = classifier.classify_message("Something odd happened in step 4", "error")

    assert result.category == "Build Error"
    assert result.severity == "medium"
    assert not result.recognized
    assert result.error_message == "Something odd happened in step 4"
    assert result.quick_fixes


@pytest.mark.parametrize("message", [None, "", "   "])
def test_missing_message_is_unknown_error(classifier, message):
    result = classifier.classify_message(message, "error")

    assert result.category == "Unknown Error"
    assert result.severity == "medium"
    assert not result.recognized


def test_ready_state_ignores_stale_error_text(classifier):
    result = classifier.classify_message("npm ERR! peer dep conflict", "ready")

    assert result.category == "Unknown Error"


def test_classification_is_idempotent(classifier, make_deploy):
    record = make_deploy("error", error_message="npm ERR! peer dep conflict")

    first = classifier.classify(record)
    second = classifier.classify(record)

    assert first == second
    assert (first.category, first.severity, first.quick_fixes) == (
        second.category,
        second.severity,
        second.quick_fixes,
    )


@pytest.mark.parametrize(
    "message, state",
    [(None, "stopped"), ("", "error"), ("something odd happened", "error")],
)
def test_fallback_results_do_not_share_lists(classifier, message, state):
    first = classifier.classify_message(message, state)
    first.quick_fixes.append("edited by caller")
    first.possible_causes.clear()

    second = classifier.classify_message(message, state)

    assert "edited by caller" not in second.quick_fixes
    assert second.possible_causes


def test_prompt_embeds_deployment_fields(classifier, make_deploy):
    record = make_deploy(
        "error",
        id="5f3a9c1e77",
        site_id="site-42",
        branch="main",
        commit_ref="abc1234",
        error_message="TS2322: type mismatch",
    )

    prompt = classifier.classify(record).prompt

    for expected in ["5f3a9c1e77", "site-42", "main", "abc1234", "TS2322: type mismatch", "TypeScript Error"]:
        assert expected in prompt
    assert "Build Minutes Remaining: Unknown" in prompt


def test_prompt_includes_usage_when_known(classifier, make_deploy):
    record = make_deploy("error", error_message="network error")
    metrics = UsageMetrics(minutes_remaining=120, failure_rate=20, monthly_quota=300)

    prompt = classifier.classify(record, metrics).prompt

    assert "Build Minutes Remaining: 120" in prompt
    assert "Recent Failure Rate: 20%" in prompt


def test_categorize_logs(classifier):
    lines = [
        LogLine(level="info", message="Installing dependencies"),
        LogLine(level="error", message="npm ERR! peer dep conflict"),
        LogLine(level="error", message="FATAL ERROR: JavaScript heap out of memory"),
        LogLine(level="warn", message="out of memory soon"),
        LogLine(level="error", message="mystery failure"),
    ]

    categorized = classifier.categorize_logs(lines)

    assert [rule.category for rule in categorized.high] == ["Dependency Conflict"]
    assert [rule.category for rule in categorized.critical] == ["Memory Limit"]
    assert categorized.medium == [] and categorized.low == []
    assert categorized.unrecognized == ["mystery failure"]
    assert categorized.total_impact_minutes == 7


def test_log_levels_are_normalized():
    assert LogLine(level="WARNING").level == "warn"
    assert LogLine(level="ERROR").level == "error"
    assert LogLine(level="debug").level == "info"
    assert LogLine(timestamp="").timestamp is None


def test_custom_rule_table_is_respected():
    rules = [
        ErrorRule(
            pattern=r"flaky",
            category="Flaky Step",
            description="A known flaky step.",
            severity="low",
            estimated_cost_minutes=1,
            common_causes=[],
            quick_fixes=["Retry build"],
            prevention_tips=[],
        )
    ]
    classifier = ErrorClassifier(rules)

    assert classifier.classify_message("flaky upload", "error").category == "Flaky Step"
    assert classifier.classify_message("npm ERR! peer dep", "error").category == "Build Error"


def test_rule_table_order():
    """The families are evaluated in a fixed, documented order."""
    assert [rule.category for rule in ERROR_RULES] == [
        "Dependency Conflict",
        "Dependency Installation Failed",
        "Build Tool Missing",
        "Runtime Version Mismatch",
        "File Path Error",
        "Memory Limit",
        "Network Issue",
        "TypeScript Error",
        "Next.js Build Error",
        "Static Site Generator Error",
        "Linting Error",
    ]

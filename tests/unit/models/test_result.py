"""Tests for the host result models."""

from jest_markdown_reporter.models.result import (
    AggregatedResult,
    PerfStats,
    SuiteResult,
    TestCaseResult,
)


def test_accepts_camel_case_payload() -> None:
    """Reads the camelCase keys used by the host."""
    result = AggregatedResult.model_validate(
        {
            "numPassedTests": 2,
            "numTotalTests": 3,
            "startTime": 1593000000000,
            "snapshot": {"unchecked": 1, "uncheckedKeys": ["a 1"]},
            "testResults": [
                {
                    "testFilePath": "/repo/a.test.js",
                    "perfStats": {"start": 10, "end": 1510},
                    "numFailingTests": 1,
                    "testResults": [
                        {
                            "ancestorTitles": ["group"],
                            "title": "works",
                            "status": "failed",
                            "duration": 12,
                            "failureMessages": ["boom"],
                        }
                    ],
                }
            ],
        }
    )

    assert result.num_passed_tests == 2
    assert result.num_total_tests == 3
    assert result.snapshot is not None
    assert result.snapshot.unchecked_keys == ["a 1"]
    suite = result.test_results[0]
    assert suite.test_file_path == "/repo/a.test.js"
    assert suite.perf_stats.elapsed == 1500
    assert suite.num_failing_tests == 1
    assert suite.test_results[0].failure_messages == ["boom"]


def test_accepts_snake_case_fields() -> None:
    """Builds models from field names as well."""
    suite = SuiteResult(test_file_path="/repo/b.test.js", num_pending_tests=2)

    assert suite.test_file_path == "/repo/b.test.js"
    assert suite.num_pending_tests == 2
    assert suite.test_results == []


def test_ignores_unknown_keys() -> None:
    """Drops host fields the reporter does not use."""
    result = AggregatedResult.model_validate(
        {"numTotalTests": 1, "wasInterrupted": False, "coverageMap": None}
    )

    assert result.num_total_tests == 1


def test_suite_accepts_json_report_shape() -> None:
    """Maps the suite shape written by jest --json."""
    suite = SuiteResult.model_validate(
        {
            "name": "/repo/c.test.js",
            "startTime": 1000,
            "endTime": 4000,
            "message": "",
            "status": "passed",
            "assertionResults": [
                {"ancestorTitles": [], "title": "ok", "status": "passed"}
            ],
        }
    )

    assert suite.test_file_path == "/repo/c.test.js"
    assert suite.perf_stats == PerfStats(start=1000, end=4000)
    assert suite.failure_message is None
    assert suite.test_results[0].title == "ok"


def test_full_title_joins_ancestors() -> None:
    """Joins ancestor titles with the test title."""
    test = TestCaseResult(ancestor_titles=["outer", "inner"], title="does it")

    assert test.full_title == "outer > inner does it"


def test_full_title_without_ancestors() -> None:
    """Uses the bare title when there are no ancestors."""
    assert TestCaseResult(title="alone").full_title == "alone"

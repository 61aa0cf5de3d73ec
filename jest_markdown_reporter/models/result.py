"""Models for the test results handed over by the host."""

from collections.abc import Sequence
from typing import Any, Literal

from pydantic import Field

from jest_markdown_reporter.models.base import Model

type TestStatus = Literal[
    "passed", "failed", "pending", "skipped", "todo", "disabled", "focused"
]


class PerfStats(Model):
    """Start and end timestamps of a suite, in epoch milliseconds."""

    start: float = 0
    end: float = 0

    @property
    def elapsed(self) -> float:
        """Elapsed time in milliseconds."""
        return self.end - self.start


class SnapshotSummary(Model):
    """Snapshot bookkeeping for a suite or a whole run."""

    unchecked: int = 0
    unchecked_keys: Sequence[str] = Field(default_factory=list)


class ConsoleLogRecord(Model):
    """A single console call captured while a suite was running."""

    message: str = ""
    origin: str = ""
    type: str = "log"


class ConsoleLogEntry(Model):
    """Console records captured for one suite file."""

    file_path: str
    logs: Sequence[ConsoleLogRecord] = Field(default_factory=list)


class TestCaseResult(Model):
    """Outcome of one test case."""

    __test__ = False

    ancestor_titles: Sequence[str] = Field(default_factory=list)
    title: str = ""
    status: TestStatus | str = "passed"
    duration: float | None = None
    failure_messages: Sequence[str] = Field(default_factory=list)

    @property
    def full_title(self) -> str:
        """Ancestor titles and the test title joined for display."""
        return " ".join(
            part for part in (" > ".join(self.ancestor_titles), self.title) if part
        )


class SuiteResult(Model):
    """Outcome of one test file."""

    test_file_path: str = ""
    perf_stats: PerfStats = Field(default_factory=PerfStats)
    failure_message: str | None = None
    snapshot: SnapshotSummary | None = None
    num_passing_tests: int = 0
    num_failing_tests: int = 0
    num_pending_tests: int = 0
    console: Sequence[ConsoleLogRecord] | None = None
    test_results: Sequence[TestCaseResult] = Field(default_factory=list)

    @classmethod
    def _adapt_payload(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Accept the suite shape written by ``jest --json`` as well."""
        if "assertion_results" not in data:
            return data
        adapted = dict(data)
        adapted.setdefault("test_results", adapted.pop("assertion_results"))
        adapted.setdefault("test_file_path", adapted.get("name", ""))
        adapted.setdefault("failure_message", adapted.get("message") or None)
        adapted.setdefault(
            "perf_stats",
            {
                "start": adapted.get("start_time") or 0,
                "end": adapted.get("end_time") or 0,
            },
        )
        return adapted


class AggregatedResult(Model):
    """Aggregated results of a complete test run."""

    num_passed_test_suites: int = 0
    num_failed_test_suites: int = 0
    num_pending_test_suites: int = 0
    num_total_test_suites: int = 0
    num_passed_tests: int = 0
    num_failed_tests: int = 0
    num_pending_tests: int = 0
    num_total_tests: int = 0
    start_time: float | None = None
    snapshot: SnapshotSummary | None = None
    test_results: Sequence[SuiteResult] = Field(default_factory=list)


class RunConfig(Model):
    """The subset of the host's run configuration used by the reporter."""

    root_dir: str | None = None

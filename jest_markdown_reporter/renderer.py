"""Rendering of aggregated test results into a markdown report."""

import logging
import math
import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from jest_markdown_reporter.config import ReporterConfig
from jest_markdown_reporter.models.result import (
    AggregatedResult,
    ConsoleLogEntry,
    SuiteResult,
    TestCaseResult,
)
from jest_markdown_reporter.sanitize import sanitize_output
from jest_markdown_reporter.sorting import sort_suites

log = logging.getLogger(__name__)

STATUS_GLYPHS: Mapping[str, str] = {
    "passed": "✅",
    "failed": "❌",
    "pending": "🕑",
    "skipped": "🕑",
    "disabled": "🕑",
    "todo": "📝",
}
WARNING_GLYPH = "⚠️"

DATE_MASK_TOKENS = re.compile(
    r"'[^']*'|\"[^\"]*\"|yyyy|yy|mmmm|mmm|mm|m|dddd|ddd|dd|d"
    r"|HH|H|hh|h|MM|M|ss|s|l|TT|T|tt|t"
)


class NoTestDataError(ValueError):
    """Raised when there are no test results to render."""


def load_test_data(
    data: AggregatedResult | Mapping[str, Any] | None,
) -> AggregatedResult:
    """Validate host data, rejecting missing or empty payloads.

    Raises:
        NoTestDataError: If ``data`` is None or an empty mapping
        pydantic.ValidationError: If ``data`` cannot be read as results

    """
    if isinstance(data, AggregatedResult):
        return data
    if not data:
        raise NoTestDataError("No test data provided")
    return AggregatedResult.model_validate(data)


def format_date(moment: datetime, mask: str) -> str:
    """Format a datetime with a dateformat-style mask such as ``yyyy-mm-dd``.

    Text in single or double quotes is copied verbatim.
    """
    hour12 = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    values = {
        "yyyy": f"{moment.year:04d}",
        "yy": f"{moment.year % 100:02d}",
        "mmmm": moment.strftime("%B"),
        "mmm": moment.strftime("%b"),
        "mm": f"{moment.month:02d}",
        "m": str(moment.month),
        "dddd": moment.strftime("%A"),
        "ddd": moment.strftime("%a"),
        "dd": f"{moment.day:02d}",
        "d": str(moment.day),
        "HH": f"{moment.hour:02d}",
        "H": str(moment.hour),
        "hh": f"{hour12:02d}",
        "h": str(hour12),
        "MM": f"{moment.minute:02d}",
        "M": str(moment.minute),
        "ss": f"{moment.second:02d}",
        "s": str(moment.second),
        "l": f"{moment.microsecond // 1000:03d}",
        "TT": meridiem.upper(),
        "T": meridiem[0].upper(),
        "tt": meridiem,
        "t": meridiem[0],
    }

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        return values.get(token, token[1:-1])

    return DATE_MASK_TOKENS.sub(replace, mask)


def format_seconds(milliseconds: float | None) -> str:
    """Format a millisecond duration as seconds, without a trailing ``.0``."""
    seconds = round((milliseconds or 0) / 1000, 3)
    return str(int(seconds)) if seconds.is_integer() else str(seconds)


def parse_status_filter(value: str | None) -> frozenset[str]:
    """Parse a comma-separated list of statuses, ignoring whitespace and case."""
    if not value:
        return frozenset()
    return frozenset(
        status for status in re.sub(r"\s", "", value).lower().split(",") if status
    )


def _fenced(text: str) -> str:
    return f"\n\n```\n{text}\n```"


@dataclass(frozen=True, kw_only=True)
class ReportRenderer:
    """Builds the markdown report for one set of aggregated results."""

    config: ReporterConfig
    console_logs: Sequence[ConsoleLogEntry] = ()

    def render(self, data: AggregatedResult | Mapping[str, Any] | None) -> str:
        """Render the full report.

        Raises:
            NoTestDataError: If there is no test data

        """
        test_data = load_test_data(data)
        ignored = parse_status_filter(self.config.get("status_ignore_filter"))
        return "".join(self._render(test_data, ignored)) + "\n"

    def _render(
        self, test_data: AggregatedResult, ignored: frozenset[str]
    ) -> Iterator[str]:
        yield f"# {self.config.get('page_title')}"

        if logo := self.config.get("logo"):
            yield f"\n\n![]({logo})"

        yield from self.render_timestamp(test_data.start_time)
        yield from self.render_summary(test_data, ignored)

        for suite in sort_suites(test_data.test_results, self.config.get("sort")):
            yield from self.render_suite(suite, ignored)

    def render_timestamp(self, start_time: float | None) -> Iterator[str]:
        """Render the start time of the run, if the host provided one."""
        if not start_time or not math.isfinite(start_time):
            return
        try:
            started = datetime.fromtimestamp(start_time / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            log.debug("Ignoring out of range start time %r", start_time)
            return
        iso = started.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        formatted = format_date(started.astimezone(), self.config.get("date_format"))
        yield f'\n\nStarted: <time datetime="{iso}">{formatted}</time>'

    def render_summary(
        self, test_data: AggregatedResult, ignored: frozenset[str]
    ) -> Iterator[str]:
        """Render suite and test counters, and obsolete snapshots if enabled."""
        yield "\n\n## Summary"
        yield self._render_counts(
            "Suites",
            test_data.num_passed_test_suites,
            test_data.num_failed_test_suites,
            test_data.num_pending_test_suites,
            test_data.num_total_test_suites,
            ignored,
        )
        yield self._render_counts(
            "Tests",
            test_data.num_passed_tests,
            test_data.num_failed_tests,
            test_data.num_pending_tests,
            test_data.num_total_tests,
            ignored,
        )

        snapshot = test_data.snapshot
        if (
            snapshot
            and snapshot.unchecked > 0
            and self.config.get("include_obsolete_snapshots")
        ):
            yield f"\n\n### Snapshots\n\n{snapshot.unchecked} obsolete snapshots"

    def _render_counts(
        self,
        title: str,
        passed: int,
        failed: int,
        pending: int,
        total: int,
        ignored: frozenset[str],
    ) -> str:
        lines = [f"\n\n### {title}\n"]
        for status, count in (
            ("passed", passed),
            ("failed", failed),
            ("pending", pending),
        ):
            glyph = (
                f"{STATUS_GLYPHS[status]} "
                if count > 0 and status not in ignored
                else ""
            )
            lines.append(f" - {glyph}{status.capitalize()}: {count}")
        lines.append(f" - **Total**: {total}")
        return "\n".join(lines)

    def render_suite_info(self, suite: SuiteResult) -> str:
        """Render the suite path and its execution time."""
        elapsed = suite.perf_stats.elapsed / 1000
        threshold = self.config.get("execution_time_warning_threshold")
        icon = f"{WARNING_GLYPH} " if elapsed > threshold else ""
        seconds = format_seconds(suite.perf_stats.elapsed)
        return f"\n\n# {suite.test_file_path}\n\n{icon}{seconds}s"

    def render_suite(
        self, suite: SuiteResult, ignored: frozenset[str]
    ) -> Iterator[str]:
        """Render one suite with its test cases, console logs and snapshots."""
        if not suite.test_results:
            if suite.failure_message and self.config.get("include_suite_failure"):
                yield self.render_suite_info(suite)
                message = sanitize_output(suite.failure_message)
                yield f"\n\n{STATUS_GLYPHS['failed']} {message}"
            return

        yield self.render_suite_info(suite)

        for test in suite.test_results:
            if test.status in ignored:
                continue
            yield from self.render_test(test)

        if self.console_logs and self.config.get("include_console_log"):
            yield from self.render_console_logs(suite)

        if (
            suite.snapshot
            and suite.snapshot.unchecked > 0
            and self.config.get("include_obsolete_snapshots")
        ):
            yield _fenced("\n".join(suite.snapshot.unchecked_keys))

    def render_test(self, test: TestCaseResult) -> Iterator[str]:
        """Render a test case line and, if enabled, its failure messages."""
        glyph = f"{STATUS_GLYPHS[test.status]} " if test.status in STATUS_GLYPHS else ""
        yield (
            f"\n\n### {test.full_title}"
            f"\n\n{glyph}**{test.status}** in **{format_seconds(test.duration)}s**"
        )

        if test.failure_messages and self.config.get("include_failure_msg"):
            for message in test.failure_messages:
                yield _fenced(sanitize_output(message))

    def render_console_logs(self, suite: SuiteResult) -> Iterator[str]:
        """Render the console output captured for the suite's file."""
        entry = next(
            (e for e in self.console_logs if e.file_path == suite.test_file_path),
            None,
        )
        if entry is None or not entry.logs:
            return
        yield _fenced(
            "\n".join(
                f"{sanitize_output(log.origin)}: {sanitize_output(log.message)}"
                for log in entry.logs
            )
        )

"""Ordering of suite results in the report."""

from collections.abc import Callable, Mapping, Sequence

from jest_markdown_reporter.models.result import SuiteResult, TestCaseResult

STATUS_ORDER: Mapping[str, int] = {"pending": 0, "failed": 1}


def _status_rank(test: TestCaseResult) -> int:
    return STATUS_ORDER.get(test.status, len(STATUS_ORDER))


def sort_by_status(suites: Sequence[SuiteResult]) -> list[SuiteResult]:
    """Put suites with pending tests first, then failing suites, then the rest.

    A suite is classified by its test case statuses as well as by the host
    counters, which are absent from ``jest --json`` output. Test cases inside
    each suite are reordered the same way.
    """
    pending: list[SuiteResult] = []
    failing: list[SuiteResult] = []
    passing: list[SuiteResult] = []

    for suite in suites:
        ordered = suite.model_copy(
            update={"test_results": sorted(suite.test_results, key=_status_rank)}
        )
        statuses = {test.status for test in suite.test_results}
        if suite.num_pending_tests > 0 or "pending" in statuses:
            pending.append(ordered)
        elif suite.num_failing_tests > 0 or "failed" in statuses:
            failing.append(ordered)
        else:
            passing.append(ordered)

    return [*pending, *failing, *passing]


def _sort_by_key(
    key: Callable[[SuiteResult], float | str], *, reverse: bool
) -> Callable[[Sequence[SuiteResult]], list[SuiteResult]]:
    def sort(suites: Sequence[SuiteResult]) -> list[SuiteResult]:
        return sorted(suites, key=key, reverse=reverse)

    return sort


SORTERS: Mapping[str, Callable[[Sequence[SuiteResult]], list[SuiteResult]]] = {
    "status": sort_by_status,
    "executiondesc": _sort_by_key(lambda s: s.perf_stats.elapsed, reverse=True),
    "executionasc": _sort_by_key(lambda s: s.perf_stats.elapsed, reverse=False),
    "titledesc": _sort_by_key(lambda s: s.test_file_path, reverse=True),
    "titleasc": _sort_by_key(lambda s: s.test_file_path, reverse=False),
}


def sort_suites(
    suites: Sequence[SuiteResult], sort: str | None = None
) -> list[SuiteResult]:
    """Return the suites ordered by the given sort mode.

    Args:
        suites: Suite results in the order the host reported them
        sort: One of ``status``, ``executiondesc``, ``executionasc``,
            ``titledesc``, ``titleasc``; anything else keeps the original order

    Returns:
        A new list; the input sequence is never modified

    """
    if sort is None or (sorter := SORTERS.get(sort)) is None:
        return list(suites)
    return sorter(suites)

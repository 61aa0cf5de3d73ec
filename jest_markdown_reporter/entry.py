"""Entry points called by the test-running host.

The host either hands over the final results once (results processor) or
registers a listener notified after every suite and at the end of the run.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from jest_markdown_reporter.config import ConfigSources
from jest_markdown_reporter.models.options import ReporterOptions
from jest_markdown_reporter.models.result import (
    AggregatedResult,
    ConsoleLogEntry,
    RunConfig,
    SuiteResult,
)
from jest_markdown_reporter.reporter import generate_report

log = logging.getLogger(__name__)

type Options = ReporterOptions | Mapping[str, Any] | None


async def _generate_safely(
    test_data: AggregatedResult | Mapping[str, Any] | None,
    options: Options,
    *,
    run_config: RunConfig | Mapping[str, Any] | None = None,
    console_logs: Sequence[ConsoleLogEntry] = (),
    sources: ConfigSources | None = None,
) -> str | None:
    try:
        return await generate_report(
            test_data,
            options,
            run_config=run_config,
            console_logs=console_logs,
            sources=sources,
        )
    except Exception as e:
        log.error("Report generation failed: %s", e, exc_info=e)
        return None


@dataclass(kw_only=True)
class ResultsProcessor:
    """Generates the report from final results and hands them back untouched."""

    options: Options = None
    sources: ConfigSources | None = None
    background_tasks: set[asyncio.Task[str | None]] = field(
        default_factory=set, repr=False
    )

    def process[T: AggregatedResult | Mapping[str, Any]](self, results: T) -> T:
        """Trigger report generation and return ``results`` as received.

        Inside a running event loop generation is scheduled without being
        awaited; otherwise it runs to completion first.
        """
        generation = _generate_safely(results, self.options, sources=self.sources)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(generation)
        else:
            task = loop.create_task(generation)
            self.background_tasks.add(task)
            task.add_done_callback(self.background_tasks.discard)
        return results


@dataclass(kw_only=True)
class ReportListener:
    """Collects console output per suite and reports once the run completes."""

    run_config: RunConfig | Mapping[str, Any] | None = None
    options: Options = None
    sources: ConfigSources | None = None
    console_logs: list[ConsoleLogEntry] = field(default_factory=list)

    def on_test_result(self, result: SuiteResult | Mapping[str, Any]) -> None:
        """Record the console output of a finished suite, if it carries any.

        Hosts only attach console output when they do not print it themselves.
        """
        try:
            suite = (
                result
                if isinstance(result, SuiteResult)
                else SuiteResult.model_validate(result)
            )
        except ValueError as e:
            log.warning("Ignoring unreadable suite result: %s", e)
            return

        if suite.console:
            self.console_logs.append(
                ConsoleLogEntry(file_path=suite.test_file_path, logs=suite.console)
            )

    async def on_run_complete(
        self, results: AggregatedResult | Mapping[str, Any] | None
    ) -> str | None:
        """Generate the report for the completed run."""
        return await _generate_safely(
            results,
            self.options,
            run_config=self.run_config,
            console_logs=list(self.console_logs),
            sources=self.sources,
        )


def has_test_results(host_data: Any) -> bool:
    """Tell whether the host passed final results rather than run configuration."""
    if isinstance(host_data, AggregatedResult):
        return True
    return isinstance(host_data, Mapping) and (
        "testResults" in host_data or "test_results" in host_data
    )


def create_reporter(
    host_data: Any, options: Options = None, sources: ConfigSources | None = None
) -> Any:
    """Single entry point for hosts that call the reporter the same way in both modes.

    Returns:
        ``host_data`` unchanged when it holds final results (after generating
        the report), otherwise a ``ReportListener`` using it as run
        configuration

    """
    if has_test_results(host_data):
        return ResultsProcessor(options=options, sources=sources).process(host_data)
    return ReportListener(run_config=host_data, options=options, sources=sources)

"""Report generation: configuration, rendering and writing for one run."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from jest_markdown_reporter.config import ConfigSources, ReporterConfig
from jest_markdown_reporter.models.options import ReporterOptions
from jest_markdown_reporter.models.result import (
    AggregatedResult,
    ConsoleLogEntry,
    RunConfig,
)
from jest_markdown_reporter.renderer import NoTestDataError, ReportRenderer
from jest_markdown_reporter.writer import ReportWriter, resolve_output_path

log = logging.getLogger(__name__)


async def generate_report(
    test_data: AggregatedResult | Mapping[str, Any] | None,
    options: ReporterOptions | Mapping[str, Any] | None = None,
    *,
    run_config: RunConfig | Mapping[str, Any] | None = None,
    console_logs: Sequence[ConsoleLogEntry] = (),
    sources: ConfigSources | None = None,
) -> str | None:
    """Render the report for a finished run and write it to disk.

    Args:
        test_data: Aggregated results handed over by the host
        options: Call-time reporter options
        run_config: Host run configuration, used for ``<rootDir>``
        console_logs: Console output captured per suite during the run
        sources: Environment and working directory for configuration lookup

    Returns:
        The rendered report, or None when there was nothing to render

    """
    try:
        config = ReporterConfig.build(options, sources)
        if not isinstance(run_config, RunConfig):
            run_config = RunConfig.model_validate(run_config or {})
        for resolved in config.describe():
            log.debug(
                "Option %s=%r (from %s)", resolved.key, resolved.value, resolved.source
            )
        report = ReportRenderer(config=config, console_logs=console_logs).render(
            test_data
        )
    except NoTestDataError as e:
        log.error("%s", e)
        return None
    except ValueError as e:
        log.error("Invalid test results or options: %s", e)
        return None

    output_path = resolve_output_path(run_config.root_dir, config.get("output_path"))
    writer = ReportWriter(append=config.get("append"))
    return await asyncio.to_thread(writer.write, output_path, report)

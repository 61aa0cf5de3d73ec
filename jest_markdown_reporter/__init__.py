"""Markdown report generation for Jest test results."""

from jest_markdown_reporter.config import ConfigSources, ReporterConfig
from jest_markdown_reporter.entry import (
    ReportListener,
    ResultsProcessor,
    create_reporter,
)
from jest_markdown_reporter.models.options import ReporterOptions
from jest_markdown_reporter.models.result import AggregatedResult, RunConfig
from jest_markdown_reporter.reporter import generate_report

__all__ = [
    "AggregatedResult",
    "ConfigSources",
    "ReportListener",
    "ReporterConfig",
    "ReporterOptions",
    "ResultsProcessor",
    "RunConfig",
    "create_reporter",
    "generate_report",
]

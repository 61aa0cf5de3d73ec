"""Call-time options accepted by the reporter."""

from typing import Literal

from jest_markdown_reporter.models.base import Model

type SortType = Literal[
    "status", "executiondesc", "executionasc", "titledesc", "titleasc"
]


class ReporterOptions(Model):
    """Options passed by the host when registering the reporter.

    Every option is optional; unset options fall back to configuration files,
    environment variables and defaults.
    """

    append: bool | None = None
    date_format: str | None = None
    execution_time_warning_threshold: float | None = None
    include_console_log: bool | None = None
    include_failure_msg: bool | None = None
    include_suite_failure: bool | None = None
    include_obsolete_snapshots: bool | None = None
    logo: str | None = None
    output_path: str | None = None
    page_title: str | None = None
    sort: SortType | str | None = None
    status_ignore_filter: str | None = None
    style_override_path: str | None = None

"""Resolution of reporter settings from environment, files and options."""

import json
import logging
import os
import tomllib
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal

from jest_markdown_reporter.models.options import ReporterOptions

log = logging.getLogger(__name__)

ENV_PREFIX = "JEST_MARKDOWN_REPORTER_"
CONFIG_FILE_NAME = "jestmarkdownreporter.config.json"
MANIFEST_SECTION = "jest-markdown-reporter"
DEFAULT_REPORT_NAME = "test-report.md"

TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})

type OptionKind = Literal["bool", "number", "string"]
type ConfigSource = Literal[
    "environment", "config-file", "package-json", "pyproject", "options", "default"
]


@dataclass(frozen=True, kw_only=True)
class ConfigSources:
    """Process state the configuration is read from.

    Passing this explicitly keeps resolution independent of the live
    environment and working directory.
    """

    environ: Mapping[str, str] = field(default_factory=dict)
    cwd: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_process(cls) -> "ConfigSources":
        """Capture the current environment and working directory."""
        return cls(environ=dict(os.environ), cwd=Path.cwd())


@dataclass(kw_only=True)
class ConfigOption:
    """A single option: where it can be overridden and its fallback value."""

    environment_variable: str
    default_value: Any
    kind: OptionKind = "string"
    config_value: Any = None
    config_source: ConfigSource = "options"


@dataclass(frozen=True, kw_only=True)
class ResolvedValue:
    """Effective value of an option and the source that supplied it."""

    key: str
    value: Any
    source: ConfigSource


def option_definitions(cwd: Path) -> Mapping[str, tuple[str, Any, OptionKind]]:
    """Environment variable suffix, default value and kind for every option."""
    return {
        "append": ("APPEND", False, "bool"),
        "date_format": ("DATE_FORMAT", "yyyy-mm-dd HH:MM:ss", "string"),
        "execution_time_warning_threshold": (
            "EXECUTION_TIME_WARNING_THRESHOLD",
            5,
            "number",
        ),
        "include_console_log": ("INCLUDE_CONSOLE_LOG", False, "bool"),
        "include_failure_msg": ("INCLUDE_FAILURE_MSG", False, "bool"),
        "include_suite_failure": ("INCLUDE_SUITE_FAILURE", False, "bool"),
        "include_obsolete_snapshots": ("INCLUDE_OBSOLETE_SNAPSHOTS", False, "bool"),
        "logo": ("LOGO", None, "string"),
        "output_path": ("OUTPUT_PATH", str(cwd / DEFAULT_REPORT_NAME), "string"),
        "page_title": ("PAGE_TITLE", "Test Report", "string"),
        "sort": ("SORT", None, "string"),
        "status_ignore_filter": ("STATUS_FILTER", None, "string"),
        "style_override_path": ("STYLE_OVERRIDE_PATH", None, "string"),
    }


def coerce_value(value: Any, kind: OptionKind) -> Any:
    """Convert a raw option value to the type its consumers expect.

    Raises:
        ValueError: If a number option cannot be parsed

    """
    if kind == "bool":
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY_VALUES
        return bool(value)
    if kind == "number":
        if isinstance(value, bool):
            raise ValueError(f"Expected a number, got {value!r}")
        return float(value)
    return value


def _read_config_file(cwd: Path) -> Any:
    return json.loads((cwd / CONFIG_FILE_NAME).read_text(encoding="utf-8"))


def _read_package_json(cwd: Path) -> Any:
    manifest = json.loads((cwd / "package.json").read_text(encoding="utf-8"))
    return manifest.get(MANIFEST_SECTION) if isinstance(manifest, dict) else None


def _read_pyproject(cwd: Path) -> Any:
    with (cwd / "pyproject.toml").open("rb") as handle:
        manifest = tomllib.load(handle)
    return manifest.get("tool", {}).get(MANIFEST_SECTION)


FILE_SOURCES: Sequence[tuple[ConfigSource, Callable[[Path], Any]]] = (
    ("config-file", _read_config_file),
    ("package-json", _read_package_json),
    ("pyproject", _read_pyproject),
)


def load_file_overrides(cwd: Path) -> tuple[ConfigSource, ReporterOptions] | None:
    """Load options from the first readable configuration file in ``cwd``.

    Sources are tried in order: the reporter's JSON config file, the
    ``jest-markdown-reporter`` section of ``package.json`` and the
    ``[tool.jest-markdown-reporter]`` table of ``pyproject.toml``. Missing or
    malformed sources are skipped.
    """
    for source, read in FILE_SOURCES:
        try:
            overrides = ReporterOptions.model_validate(read(cwd))
        except (OSError, ValueError) as e:
            log.debug("Skipping %s configuration: %s", source, e)
            continue
        return source, overrides
    return None


class ReporterConfig:
    """Effective reporter configuration for a single report generation."""

    def __init__(
        self, options: Mapping[str, ConfigOption], environ: Mapping[str, str]
    ) -> None:
        self._options = dict(options)
        self._environ = environ

    @classmethod
    def build(
        cls,
        options: ReporterOptions | Mapping[str, Any] | None = None,
        sources: ConfigSources | None = None,
    ) -> "ReporterConfig":
        """Build the configuration from call-time options and file overrides.

        Args:
            options: Sparse call-time options, camelCase or snake_case
            sources: Environment and working directory to read from
                (default: the current process)

        Returns:
            Configuration with one entry per known option

        """
        sources = sources or ConfigSources.from_process()
        if not isinstance(options, ReporterOptions):
            options = ReporterOptions.model_validate(options or {})

        config = {
            key: ConfigOption(
                environment_variable=f"{ENV_PREFIX}{suffix}",
                default_value=default,
                kind=kind,
                config_value=getattr(options, key),
            )
            for key, (suffix, default, kind) in option_definitions(sources.cwd).items()
        }

        if (loaded := load_file_overrides(sources.cwd)) is not None:
            source, overrides = loaded
            log.debug("Using %s configuration from %s", source, sources.cwd)
            for key in overrides.model_fields_set:
                config[key].config_value = getattr(overrides, key)
                config[key].config_source = source

        return cls(config, sources.environ)

    @property
    def options(self) -> Mapping[str, ConfigOption]:
        """Read-only view of the option table."""
        return MappingProxyType(self._options)

    def resolve(self, key: str) -> ResolvedValue:
        """Resolve an option: environment variable > configured value > default.

        Raises:
            KeyError: If ``key`` is not a known option

        """
        option = self._options[key]

        if env_value := self._environ.get(option.environment_variable):
            try:
                return ResolvedValue(
                    key=key,
                    value=coerce_value(env_value, option.kind),
                    source="environment",
                )
            except ValueError:
                log.warning(
                    "Ignoring invalid value %r for %s",
                    env_value,
                    option.environment_variable,
                )

        if option.config_value:
            try:
                return ResolvedValue(
                    key=key,
                    value=coerce_value(option.config_value, option.kind),
                    source=option.config_source,
                )
            except ValueError:
                log.warning(
                    "Ignoring invalid value %r for %s", option.config_value, key
                )

        return ResolvedValue(key=key, value=option.default_value, source="default")

    def get(self, key: str) -> Any:
        """Return the effective value of an option."""
        return self.resolve(key).value

    def describe(self) -> Sequence[ResolvedValue]:
        """Resolve every option, for diagnostics."""
        return [self.resolve(key) for key in self._options]

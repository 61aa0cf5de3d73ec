"""Shared fixtures for unit tests."""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import pytest

from jest_markdown_reporter.config import ConfigSources, ReporterConfig


@pytest.fixture
def sources(tmp_path: Path) -> ConfigSources:
    """Empty environment rooted in a temporary working directory."""
    return ConfigSources(environ={}, cwd=tmp_path)


@pytest.fixture
def make_config(
    sources: ConfigSources,
) -> Callable[..., ReporterConfig]:
    """Build a configuration from call-time options and extra env vars."""

    def build(
        options: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ReporterConfig:
        return ReporterConfig.build(
            options,
            ConfigSources(environ=dict(environ or {}), cwd=sources.cwd),
        )

    return build

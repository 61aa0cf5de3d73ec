"""Tests for CLI module."""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from jest_markdown_reporter.cli import main, run

JSON_REPORT = {
    "numFailedTestSuites": 1,
    "numPassedTestSuites": 0,
    "numPendingTestSuites": 0,
    "numTotalTestSuites": 1,
    "numFailedTests": 1,
    "numPassedTests": 0,
    "numPendingTests": 0,
    "numTotalTests": 1,
    "startTime": 1593000000000,
    "success": False,
    "testResults": [
        {
            "name": "/repo/math.test.js",
            "startTime": 1593000000000,
            "endTime": 1593000001200,
            "message": "math > divides",
            "status": "failed",
            "assertionResults": [
                {
                    "ancestorTitles": ["math"],
                    "title": "divides",
                    "status": "failed",
                    "duration": 7,
                    "failureMessages": ["Error: expected 2"],
                }
            ],
        }
    ],
}


@pytest.fixture
def results_file(tmp_path: Path) -> Path:
    """A results file as written by jest --json."""
    path = tmp_path / "results.json"
    path.write_text(json.dumps(JSON_REPORT), encoding="utf-8")
    return path


class TestRun:
    """Tests for run function."""

    async def test_returns_zero_when_report_generated(
        self,
        results_file: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Renders the results file and writes the report."""
        monkeypatch.chdir(tmp_path)

        exit_code = await run(
            results_file,
            json.dumps({"includeFailureMsg": True, "outputPath": "<rootDir>/out.md"}),
            root_dir=str(tmp_path),
        )

        assert exit_code == 0
        content = (tmp_path / "out.md").read_text(encoding="utf-8")
        assert "# /repo/math.test.js\n\n1.2s" in content
        assert "### math divides\n\n❌ **failed** in **0.007s**" in content
        assert "```\nError: expected 2\n```" in content

    async def test_returns_one_for_empty_results(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Fails when the results file holds no data."""
        monkeypatch.chdir(tmp_path)
        empty = tmp_path / "empty.json"
        empty.write_text("{}", encoding="utf-8")

        assert await run(empty) == 1


class TestMain:
    """Tests for the argument parsing entry point."""

    def test_exits_with_run_code(
        self,
        results_file: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Exits with the code returned by run."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(sys, "argv", ["jest-markdown-reporter", str(results_file)])

        with (
            patch("jest_markdown_reporter.cli.configure_logging") as mock_configure,
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 0
        assert (tmp_path / "test-report.md").exists()
        mock_configure.assert_called_once_with(logging.INFO)

    def test_rejects_missing_results_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Reports a usage error for a missing results file."""
        monkeypatch.setattr(
            sys, "argv", ["jest-markdown-reporter", str(tmp_path / "missing.json")]
        )

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 2

    def test_verbose_enables_debug_logging(
        self, results_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Configures debug logging with --verbose."""
        monkeypatch.setattr(
            sys, "argv", ["jest-markdown-reporter", str(results_file), "--verbose"]
        )

        with (
            patch("jest_markdown_reporter.cli.configure_logging") as mock_configure,
            patch("jest_markdown_reporter.cli.asyncio.run", return_value=0) as mock_run,
            pytest.raises(SystemExit),
        ):
            main()

        mock_configure.assert_called_once_with(logging.DEBUG)
        mock_run.assert_called_once()
        mock_run.call_args.args[0].close()

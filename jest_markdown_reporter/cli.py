"""CLI entry point for rendering a report from a saved results file."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from jest_markdown_reporter.log import configure_logging
from jest_markdown_reporter.models.result import RunConfig
from jest_markdown_reporter.reporter import generate_report


async def run(
    results_path: Path,
    options_json: str = "{}",
    root_dir: str | None = None,
) -> int:
    """Generate a report from a results file and return the exit code."""
    log = logging.getLogger("jest_markdown_reporter")

    log.info("Loading test results from %s", results_path)
    test_data = json.loads(results_path.read_text(encoding="utf-8"))
    options = json.loads(options_json)

    report = await generate_report(
        test_data, options, run_config=RunConfig(root_dir=root_dir)
    )
    return 0 if report is not None else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Render a markdown report from Jest test results"
    )
    parser.add_argument(
        "results",
        type=Path,
        help="JSON file with the aggregated results (e.g. from jest --json)",
    )
    parser.add_argument(
        "--options",
        default="{}",
        help="JSON object with reporter options (e.g. '{\"includeFailureMsg\": true}')",
    )
    parser.add_argument(
        "--root-dir",
        default=None,
        help="Directory substituted for <rootDir> in the output path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log resolved configuration values",
    )

    args = parser.parse_args()
    if not args.results.is_file():
        parser.error(f"results file not found: {args.results}")

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    exit_code = asyncio.run(
        run(
            results_path=args.results,
            options_json=args.options,
            root_dir=args.root_dir,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

"""Persistence of rendered reports."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

ROOT_DIR_TOKEN = "<rootDir>"

BODY_CONTENT = re.compile(r"<body>(.*?)</body>", re.DOTALL)
CLOSING_BODY_TAG = "</body>"


def resolve_output_path(root_dir: str | Path | None, path: str | Path) -> Path:
    """Replace a leading ``<rootDir>`` token with the given root directory.

    Paths without the token are returned unchanged. When ``root_dir`` is
    empty the token resolves against the current working directory.
    """
    path = str(path)
    if not path.startswith(ROOT_DIR_TOKEN):
        return Path(path)

    suffix = os.path.normpath("./" + path[len(ROOT_DIR_TOKEN) :])
    return (Path(root_dir or "") / suffix).absolute()


def merge_into_existing(existing: str, report: str) -> str:
    """Splice a report into an existing document.

    Only the ``<body>`` content of the report is used when it has one. The
    body tags themselves are left out, so the result never holds a nested
    ``<body>``, and the content may span several lines. It is inserted right
    before the first ``</body>`` of the existing document, or at its start
    when there is no such tag.
    """
    if match := BODY_CONTENT.search(report):
        report = match.group(1)

    index = existing.find(CLOSING_BODY_TAG)
    if index < 0:
        index = 0
    return existing[:index] + report + existing[index:]


@dataclass(frozen=True, kw_only=True)
class ReportWriter:
    """Writes a report to disk, either replacing or appending to the target."""

    append: bool = False

    def write(self, path: Path, report: str) -> str:
        """Write the report and return it.

        File system errors are logged, not raised; the report text is returned
        either way.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if self.append:
                self.append_to_file(path, report)
            else:
                path.write_text(report, encoding="utf-8")
        except OSError as e:
            log.error("Failed to write report to %s: %s", path, e)
            return report

        log.info("Report generated (%s)", path)
        return report

    def append_to_file(self, path: Path, report: str) -> None:
        """Merge the report into an existing file, or append when there is none."""
        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        if existing:
            path.write_text(merge_into_existing(existing, report), encoding="utf-8")
            return

        with path.open("a", encoding="utf-8") as handle:
            handle.write(report)

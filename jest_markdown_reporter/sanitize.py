"""Cleanup of free text captured from test output."""

import re

ANSI_ESCAPE = re.compile(
    r"[\u001b\u009b][\[\]()#;?]*"
    r"(?:(?:(?:(?:;[-a-zA-Z\d/#&.:=?%@~_]+)*"
    r"|[a-zA-Z\d]+(?:;[-a-zA-Z\d/#&.:=?%@~_]*)*)?\u0007)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PR-TZcf-nq-uy=><~]))"
)

INVALID_CHARACTERS = re.compile(
    r"[^\t\n\r\x20-\ud7ff\ue000-\ufffc\U00010000-\U0010ffff]"
)


def sanitize_output(text: str | None) -> str:
    """Strip terminal escape sequences and characters unsafe for the report.

    Escape sequences go first: their leading ESC is itself a control
    character and would otherwise leave the rest of the sequence behind.
    """
    if not text:
        return ""
    return INVALID_CHARACTERS.sub("", ANSI_ESCAPE.sub("", text))

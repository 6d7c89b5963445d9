r"""Normalize raw Markdown into the canonical form consumed downstream.

Stored documents arrive with mixed line endings and with inline ``<br>`` tags
used as hard breaks inside paragraphs and table cells. :func:`normalize`
unifies line endings and turns standalone break tags into real line breaks,
leaving fenced code regions untouched so examples keep their literal text.

Example
-------
>>> from docs_nav.normalizer import normalize
>>> normalize("one<br>\r\ntwo\n```\n<br>\n```")
'one\n\ntwo\n```\n<br>\n```'
"""

from __future__ import annotations

import re

LINE_ENDING_PATTERN = re.compile(r"\r\n?")
BREAK_TAG_PATTERN = re.compile(r"<br\s*/?>(?=\s|$)", re.IGNORECASE)
FENCE_MARKER = "```"


def is_fence_line(line: str) -> bool:
    """Return ``True`` when ``line`` opens or closes a fenced code region."""
    return line.lstrip().startswith(FENCE_MARKER)


def normalize(raw: str) -> str:
    """Return ``raw`` with unified line endings and expanded break tags.

    Parameters
    ----------
    raw : str
        Document text using ``\n``, ``\r\n``, or ``\r`` line endings.

    Returns
    -------
    str
        Text using ``\n`` line endings where every ``<br>``, ``<br/>``, or
        ``<br />`` (any case) followed by whitespace or end-of-line is replaced
        by a newline. Lines inside fenced code regions, and the fence lines
        themselves, are passed through unchanged.

    Notes
    -----
    Fence state toggles on every line whose left-stripped content starts with
    three backticks; fences never nest. Indented code blocks are not fences.
    """
    lines = LINE_ENDING_PATTERN.sub("\n", raw).split("\n")
    out: list[str] = []
    in_fence = False
    for line in lines:
        if is_fence_line(line):
            in_fence = not in_fence
            out.append(line)
        elif in_fence:
            out.append(line)
        else:
            out.append(BREAK_TAG_PATTERN.sub("\n", line))
    return "\n".join(out)


__all__ = ["BREAK_TAG_PATTERN", "is_fence_line", "normalize"]

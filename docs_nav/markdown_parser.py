r"""Extract headings, titles, and anchor slugs from normalized Markdown.

This module powers the table of contents and the topic titles. It scans
normalized Markdown line by line for ATX headings, produces a flat outline of
:class:`TocEntry` dataclasses, and exposes the :func:`slugify` rule shared by
the outline, the rendered heading anchors, and intra-page links.

Example
-------
>>> from docs_nav.markdown_parser import extract_outline
>>> outline = extract_outline("# Title\n\n## Sub `code` Heading\n")
>>> [(entry.level, entry.text, entry.id) for entry in outline]
[(1, 'Title', 'title'), (2, 'Sub code Heading', 'sub-code-heading')]
"""

from __future__ import annotations

import dataclasses as dc
import re

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
TITLE_PATTERN = re.compile(r"^[ \t]*#[ \t]+(.+)$", re.MULTILINE)
_SLUG_STRIP_PATTERN = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dc.dataclass(slots=True, frozen=True)
class TocEntry:
    """Heading metadata used for table-of-contents links.

    Attributes
    ----------
    id : str
        Anchor identifier derived with :func:`slugify`; may repeat within a
        document when two headings normalize to the same text.
    text : str
        Heading text with backticks removed.
    level : int
        Heading depth between 1 and 6.
    """

    id: str
    text: str
    level: int


def slugify(text: str) -> str:
    """Convert ``text`` into a lowercase, hyphen-separated anchor slug.

    Characters outside ``[a-z0-9]``, whitespace, and ``-`` are dropped after
    lowercasing; the result is trimmed and whitespace runs become a single
    hyphen. Existing hyphens are kept as-is, so the function is idempotent.

    Examples
    --------
    >>> slugify("Hello, World! 2.0")
    'hello-world-20'
    >>> slugify("  multi   space  ")
    'multi-space'
    """
    lowered = _SLUG_STRIP_PATTERN.sub("", text.lower())
    return _WHITESPACE_PATTERN.sub("-", lowered.strip())


def _clean_heading(text: str) -> str:
    """Return heading text with inline-code backticks removed."""
    return text.replace("`", "").strip()


def extract_outline(markdown_text: str) -> list[TocEntry]:
    """Return the flat heading outline of ``markdown_text`` in document order.

    Parameters
    ----------
    markdown_text : str
        Normalized Markdown (``\n`` line endings).

    Returns
    -------
    list[TocEntry]
        One entry per line whose stripped form is one to six ``#`` characters,
        whitespace, and text. Entries are neither filtered nor deduplicated,
        and headings inside fenced code blocks are included.
    """
    entries: list[TocEntry] = []
    for line in markdown_text.split("\n"):
        match = HEADING_PATTERN.match(line.strip())
        if not match:
            continue
        text = _clean_heading(match.group(2))
        entries.append(TocEntry(id=slugify(text), text=text, level=len(match.group(1))))
    return entries


def filter_outline(entries: list[TocEntry], max_level: int) -> list[TocEntry]:
    """Return the entries at or above ``max_level`` for sidebar display."""
    return [entry for entry in entries if entry.level <= max_level]


def extract_title(markdown_text: str) -> str | None:
    """Return the text of the first level-one heading, or ``None``."""
    match = TITLE_PATTERN.search(markdown_text)
    if not match:
        return None
    return match.group(1).strip() or None


__all__ = [
    "HEADING_PATTERN",
    "TocEntry",
    "extract_outline",
    "extract_title",
    "filter_outline",
    "slugify",
]

"""Render normalized document Markdown into HTML with highlighted code.

The renderer expects text already passed through
:func:`docs_nav.normalizer.normalize`, and agrees with it on what a fence is:
any line whose left-stripped content starts with three backticks. Python-Markdown
only recognizes fences at the start of a line, so fence delimiters are
left-aligned before conversion while the fenced body keeps its indentation.
"""

from __future__ import annotations

import typing as typ

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from docs_nav.normalizer import is_fence_line

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODEHILITE_CLASS = "codehilite"


def align_fences(text: str) -> str:
    """Strip leading whitespace from fence delimiter lines only.

    >>> align_fences("  ```sh\\n  make\\n  ```")
    '```sh\\n  make\\n```'
    """
    return "\n".join(
        line.lstrip() if is_fence_line(line) else line for line in text.split("\n")
    )


class HtmlContentRenderer:
    """Convert one language's documents to HTML with a shared Markdown instance."""

    def __init__(
        self, pygments_style: str = "monokai", link_extension: Extension | None = None
    ) -> None:
        """Configure highlighting and optional doc-link routing.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style used for code blocks and :attr:`stylesheet`.
        link_extension : Extension, optional
            Extension that routes ``./topic`` links and anchors headings,
            usually a :class:`~docs_nav.rendering.DocLinkExtension`.
        """
        self.pygments_style = pygments_style
        extensions: list[Extension | str] = ["fenced_code", "codehilite", "tables"]
        if link_extension is not None:
            extensions.append(link_extension)
        self._md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "guess_lang": False,
                    "css_class": CODEHILITE_CLASS,
                    "pygments_style": pygments_style,
                }
            },
        )

    @property
    def stylesheet(self) -> str:
        """Return the Pygments CSS scoped to highlighted blocks."""
        formatter = HtmlFormatter(style=self.pygments_style)
        return formatter.get_style_defs(f".{CODEHILITE_CLASS}")

    def markdown(self, text: str) -> str:
        """Return the HTML body for ``text``; blank documents render empty."""
        if not text.strip():
            return ""
        self._md.reset()
        return self._md.convert(align_fences(text))


__all__ = ["HtmlContentRenderer", "align_fences"]

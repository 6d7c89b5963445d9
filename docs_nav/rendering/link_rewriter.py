"""Markdown tree processors for doc links and heading anchors."""

from __future__ import annotations

import re
import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from docs_nav.markdown_parser import slugify
from docs_nav.navigation import build_doc_path, relative_link_slug

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

EXTERNAL_LINK_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
ANCHORED_HEADINGS = frozenset({"h1", "h2", "h3", "h4"})


class DocLinkExtension(Extension):
    """Route relative topic links and anchor headings for a docs language.

    Insert this extension into a ``markdown.Markdown`` instance so that
    ``./topic`` and ``./topic.md`` links point at the language-prefixed doc
    path used by the sidebar, external ``http(s)`` links open in a new tab,
    and ``h1``-``h4`` headings carry the same ``slugify`` ids as the table of
    contents.
    """

    def __init__(self, language: str, base_path: str) -> None:
        self.language = language
        self.base_path = base_path

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the link and heading treeprocessors on the Markdown instance."""
        md.treeprocessors.register(
            DocLinkTreeprocessor(md, self.language, self.base_path),
            "docs_nav_links",
            15,
        )
        md.treeprocessors.register(
            HeadingAnchorTreeprocessor(md), "docs_nav_heading_anchors", 14
        )


class DocLinkTreeprocessor(Treeprocessor):
    """Rewrite relative topic links to language-prefixed doc paths."""

    def __init__(self, md: Markdown, language: str, base_path: str) -> None:
        super().__init__(md)
        self.language = language
        self.base_path = base_path

    def run(self, root: Element) -> Element:
        """Rewrite anchors in the parsed markdown tree."""
        for element in root.iter("a"):
            href = element.get("href") or ""
            if EXTERNAL_LINK_PATTERN.match(href):
                element.set("target", "_blank")
                element.set("rel", "noopener noreferrer")
                continue
            rewritten = self._rewrite(href)
            if rewritten:
                element.set("href", rewritten)
        return root

    def _rewrite(self, target: str) -> str | None:
        """Return the doc path for a ``./slug`` link, keeping any fragment."""
        path, _, fragment = target.partition("#")
        slug = relative_link_slug(path)
        if slug is None:
            return None
        url = build_doc_path(self.language, slug, base_path=self.base_path)
        if fragment:
            url = f"{url}#{fragment}"
        return url


class HeadingAnchorTreeprocessor(Treeprocessor):
    """Stamp ``h1``-``h4`` elements with ids matching the outline."""

    def run(self, root: Element) -> Element:
        """Assign an ``id`` to each anchored heading lacking one."""
        for element in root.iter():
            if element.tag not in ANCHORED_HEADINGS or element.get("id"):
                continue
            text = "".join(element.itertext())
            element.set("id", slugify(text))
        return root


__all__ = [
    "DocLinkExtension",
    "DocLinkTreeprocessor",
    "HeadingAnchorTreeprocessor",
]

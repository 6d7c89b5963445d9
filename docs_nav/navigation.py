"""Language prefixes, doc paths, and sibling navigation for resolved topics.

These helpers are the addressing rules shared by the sidebar, the
previous/next links, and relative links inside documents: every topic lives at
``/<language>/<base_path>/<slug>``, with the slug omitted for ``index``.

Examples
--------
>>> from docs_nav.navigation import build_doc_path, normalize_language_code
>>> build_doc_path("en", "intro")
'/en/docs/intro'
>>> build_doc_path("en", "index")
'/en/docs'
>>> normalize_language_code("ko-KR", supported=("en", "ko"), default="en")
'ko'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_BASE_PATH, DOC_SUFFIX, INDEX_SLUG

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .markdown_parser import TocEntry


@dc.dataclass(slots=True, frozen=True)
class TopicSummary:
    """Sidebar entry for a topic.

    Attributes
    ----------
    slug : str
        Display slug used in navigation paths.
    title : str
        Extracted heading title, or the fallback title until it is known.
    """

    slug: str
    title: str


@dc.dataclass(slots=True, frozen=True)
class DocumentView:
    """Renderer-facing snapshot of the currently displayed topic.

    Attributes
    ----------
    language : str
        Language the topic was resolved in.
    current_slug : str
        Requested topic slug.
    content : str
        Normalized Markdown, or the not-found placeholder.
    topics : list[TopicSummary]
        Ordered sidebar topics.
    toc : list[TocEntry]
        Flat heading outline of ``content``.
    previous : TopicSummary | None
        Topic before the current one in sidebar order.
    next : TopicSummary | None
        Topic after the current one in sidebar order.
    not_found : bool
        ``True`` when ``content`` is the placeholder document.
    """

    language: str
    current_slug: str
    content: str
    topics: list[TopicSummary]
    toc: list[TocEntry]
    previous: TopicSummary | None = None
    next: TopicSummary | None = None
    not_found: bool = False


def normalize_language_code(
    code: str | None, *, supported: cabc.Sequence[str], default: str
) -> str:
    """Return the supported language matching ``code`` or ``default``.

    The code is lowercased and reduced to its primary subtag, so ``en-US`` and
    ``en_GB`` both map to ``en``.
    """
    if not code:
        return default
    primary = code.strip().lower().replace("_", "-").split("-", 1)[0]
    if primary in supported:
        return primary
    return default


def build_language_prefix(language: str) -> str:
    """Return the URL prefix for ``language`` (for example ``/en``)."""
    return f"/{language}"


def build_doc_path(
    language: str, slug: str | None = None, *, base_path: str = DEFAULT_BASE_PATH
) -> str:
    """Return the path of ``slug`` in ``language``, omitting ``index``."""
    base = f"{build_language_prefix(language)}/{base_path.strip('/')}"
    if slug and slug != INDEX_SLUG:
        return f"{base}/{slug}"
    return base


def relative_link_slug(href: str) -> str | None:
    """Return the topic slug addressed by a ``./slug`` or ``./slug.md`` link."""
    if not href.startswith("./"):
        return None
    slug = href[2:]
    if slug.endswith(DOC_SUFFIX):
        slug = slug[: -len(DOC_SUFFIX)]
    return slug


def find_neighbours(
    topics: cabc.Sequence[TopicSummary], current_slug: str
) -> tuple[TopicSummary | None, TopicSummary | None]:
    """Return the ``(previous, next)`` topics around ``current_slug``.

    The current topic is the last entry carrying ``current_slug``, the same
    entry the resolver loads when display slugs collide. Neighbours sharing the
    current slug are skipped. Both are ``None`` when the slug is not part of
    ``topics``.
    """
    index = topic_index(topics, current_slug)
    if index < 0:
        return None, None
    previous = next(
        (
            topic
            for topic in reversed(topics[:index])
            if topic.slug != current_slug
        ),
        None,
    )
    following = topics[index + 1] if index < len(topics) - 1 else None
    return previous, following


def topic_index(topics: cabc.Sequence[TopicSummary], slug: str) -> int:
    """Return the position of the last topic with ``slug``, or ``-1``."""
    for idx in range(len(topics) - 1, -1, -1):
        if topics[idx].slug == slug:
            return idx
    return -1


__all__ = [
    "DocumentView",
    "TopicSummary",
    "build_doc_path",
    "build_language_prefix",
    "find_neighbours",
    "normalize_language_code",
    "relative_link_slug",
    "topic_index",
]

"""Template context dataclasses used by the static page builder."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class NavLink:
    """Sidebar or sibling link rendered in the page template.

    Attributes
    ----------
    label : str
        Visible link text (the topic title).
    href : str
        Language-prefixed doc path.
    slug : str
        Display slug of the linked topic.
    is_current : bool
        ``True`` for the topic being displayed.
    """

    label: str
    href: str
    slug: str
    is_current: bool = False


@dc.dataclass(slots=True)
class PageModel:
    """Structured data passed to the doc page template.

    Attributes
    ----------
    language : str
        Language of the page.
    title : str
        Page title (the topic title or the placeholder heading).
    body_html : str
        Rendered document HTML.
    nav_links : list[NavLink]
        Ordered sidebar entries.
    toc_items : list[dict[str, str | int]]
        Table-of-contents entries with ``id``, ``text``, and ``level``.
    previous : NavLink | None
        Link to the preceding topic.
    next : NavLink | None
        Link to the following topic.
    """

    language: str
    title: str
    body_html: str
    nav_links: list[NavLink]
    toc_items: list[dict[str, str | int]]
    previous: NavLink | None = None
    next: NavLink | None = None


__all__ = ["NavLink", "PageModel"]

"""Render resolved documents into static HTML pages."""

from .link_rewriter import DocLinkExtension
from .models import NavLink, PageModel
from .page_builder import DocsSiteBuilder
from .renderer import HtmlContentRenderer

__all__ = [
    "DocLinkExtension",
    "DocsSiteBuilder",
    "HtmlContentRenderer",
    "NavLink",
    "PageModel",
]

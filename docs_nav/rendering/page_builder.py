"""Write static HTML pages for every language and topic of a docs site.

:class:`DocsSiteBuilder` drives a :class:`~docs_nav.resolver.TopicResolver`
through each topic of each configured language, converts the resulting
:class:`~docs_nav.navigation.DocumentView` into a :class:`PageModel`, and
renders it with the ``doc_page.jinja`` template. Output paths mirror the doc
addressing rule, so ``/en/docs/intro`` is written to
``<output_dir>/en/docs/intro/index.html`` and the ``index`` topic to
``<output_dir>/en/docs/index.html``.

Example
-------
>>> import asyncio
>>> from pathlib import Path
>>> from docs_nav.config import load_site_config
>>> from docs_nav.rendering import DocsSiteBuilder
>>> site = load_site_config(Path("docs-nav.yaml"))  # doctest: +SKIP
>>> asyncio.run(DocsSiteBuilder(site).build())  # doctest: +SKIP
[PosixPath('public/en/docs/index.html'), ...]
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from docs_nav.markdown_parser import filter_outline
from docs_nav.navigation import build_doc_path
from docs_nav.repository import DocumentRepository
from docs_nav.resolver import TopicResolver
from docs_nav.store import build_store

from .link_rewriter import DocLinkExtension
from .models import NavLink, PageModel
from .renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from docs_nav.config import SiteConfig
    from docs_nav.navigation import DocumentView, TopicSummary

log = logging.getLogger(__name__)


class DocsSiteBuilder:
    """Render every topic of every configured language into static HTML."""

    def __init__(
        self,
        site_config: SiteConfig,
        *,
        repository: DocumentRepository | None = None,
        templates_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the builder with configuration and template context.

        Parameters
        ----------
        site_config : SiteConfig
            Parsed configuration (see :func:`docs_nav.config.load_site_config`).
        repository : DocumentRepository, optional
            Repository to read from; defaults to one over the configured source.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package templates.
        output_dir : Path, optional
            Override for the HTML output directory.
        """
        self.site = site_config
        self.repository = repository or DocumentRepository(
            build_store(site_config.source)
        )
        self.output_dir = output_dir or site_config.output_dir
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("doc_page.jinja")

    async def build(self) -> list[Path]:
        """Render all languages and return the written file paths in order."""
        written: list[Path] = []
        for language in self.site.languages:
            written.extend(await self.build_language(language))
        return written

    async def build_language(self, language: str) -> list[Path]:
        """Render every topic of ``language`` and return the written paths."""
        entries = self.repository.list_documents(language)
        if not entries:
            log.warning("No documents found for language %s", language)
            return []
        resolver = TopicResolver(self.repository)
        renderer = HtmlContentRenderer(
            self.site.pygments_style,
            link_extension=DocLinkExtension(language, self.site.base_path),
        )
        written: list[Path] = []
        for entry in entries:
            await resolver.resolve(language, entry.display_slug)
            html = self.render_view(resolver.view(), renderer)
            path = self._output_path(language, entry.display_slug)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
            log.debug("Wrote %s", path)
            written.append(path)
        return written

    def render_view(self, view: DocumentView, renderer: HtmlContentRenderer) -> str:
        """Return the full HTML page for ``view``."""
        model = self._build_page_model(view, renderer)
        return self.template.render(
            page=model,
            theme=self.site.theme,
            pygments_css=renderer.stylesheet,
        )

    def _build_page_model(
        self, view: DocumentView, renderer: HtmlContentRenderer
    ) -> PageModel:
        nav_links = [
            self._nav_link(view.language, topic, view.current_slug)
            for topic in view.topics
        ]
        current = next((link for link in nav_links if link.is_current), None)
        title = "404" if view.not_found or current is None else current.label
        toc_items: list[dict[str, str | int]] = [
            {"id": entry.id, "text": entry.text, "level": entry.level}
            for entry in filter_outline(view.toc, self.site.toc_max_level)
        ]
        previous = following = None
        if view.previous:
            previous = self._nav_link(view.language, view.previous, view.current_slug)
        if view.next:
            following = self._nav_link(view.language, view.next, view.current_slug)
        return PageModel(
            language=view.language,
            title=title,
            body_html=renderer.markdown(view.content),
            nav_links=nav_links,
            toc_items=toc_items,
            previous=previous,
            next=following,
        )

    def _nav_link(
        self, language: str, topic: TopicSummary, current_slug: str
    ) -> NavLink:
        return NavLink(
            label=topic.title,
            href=build_doc_path(language, topic.slug, base_path=self.site.base_path),
            slug=topic.slug,
            is_current=topic.slug == current_slug,
        )

    def _output_path(self, language: str, slug: str) -> Path:
        """Map a doc path onto ``<output_dir>/.../index.html``."""
        doc_path = build_doc_path(language, slug, base_path=self.site.base_path)
        return self.output_dir.joinpath(*doc_path.strip("/").split("/"), "index.html")


__all__ = ["DocsSiteBuilder"]

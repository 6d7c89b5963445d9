"""Cyclopts CLI entrypoint for inspecting and building localized docs.

The ``docs-nav`` console script defined here resolves topics through the same
repository and resolver used by docs viewers. ``docs-nav topics`` lists the
ordered topics of a language, ``docs-nav show`` prints a topic's normalized
Markdown and table of contents (or the whole document view as JSON), and
``docs-nav build`` renders every topic of every language into static HTML.

Examples
--------
List the English topics of the default configuration:

>>> from docs_nav.cli import app
>>> app(["topics", "--language", "en"])  # doctest: +SKIP

Dump the document view of one topic as JSON:

>>> app(["show", "--topic", "getting-started", "--json"])  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import logging
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json as msgspec_json
from cyclopts import App, Parameter

from .config import load_site_config
from .navigation import normalize_language_code
from .rendering import DocsSiteBuilder
from .repository import DocumentRepository
from .resolver import TopicResolver
from .store import build_store

if typ.TYPE_CHECKING:
    from .config import SiteConfig

DEFAULT_CONFIG = Path("docs-nav.yaml")

app = App(name="docs-nav", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    """Send library logs to stderr at DEBUG when ``verbose`` else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_resolver(site: SiteConfig) -> TopicResolver:
    return TopicResolver(DocumentRepository(build_store(site.source)))


def _resolve_language(site: SiteConfig, language: str | None) -> str:
    return normalize_language_code(
        language, supported=site.languages, default=site.default_language
    )


@app.command(help="List the ordered topics of a language.")
def topics(
    *,
    language: typ.Annotated[
        str | None, Parameter(help="Language code", env_var="INPUT_LANGUAGE")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: bool = False,
) -> None:
    """Print ``slug<TAB>title`` for each topic in sidebar order.

    Parameters
    ----------
    language : str or None, optional
        Language to list; unsupported or missing codes fall back to the
        configured default language.
    config : Path, optional
        Path to the ``docs-nav.yaml`` configuration file.
    verbose : bool, optional
        Emit DEBUG logs on stderr.
    """
    _configure_logging(verbose)
    site = load_site_config(config)
    lang = _resolve_language(site, language)
    resolver = _build_resolver(site)
    result = asyncio.run(resolver.resolve(lang))
    for topic in result.topics:
        print(f"{topic.slug}\t{topic.title}")


@app.command(help="Print a topic's normalized Markdown and table of contents.")
def show(
    *,
    topic: typ.Annotated[
        str | None, Parameter(help="Topic slug", env_var="INPUT_TOPIC")
    ] = None,
    language: typ.Annotated[
        str | None, Parameter(help="Language code", env_var="INPUT_LANGUAGE")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    json: typ.Annotated[
        bool, Parameter(help="Print the full document view as JSON")
    ] = False,
    verbose: bool = False,
) -> None:
    """Resolve ``topic`` and print its content, outline, and neighbours.

    Parameters
    ----------
    topic : str or None, optional
        Topic slug; defaults to ``index``.
    language : str or None, optional
        Language code, normalized against the configured languages.
    config : Path, optional
        Path to the ``docs-nav.yaml`` configuration file.
    json : bool, optional
        Emit the :class:`~docs_nav.navigation.DocumentView` as JSON instead of
        the human-readable layout.
    verbose : bool, optional
        Emit DEBUG logs on stderr.

    Notes
    -----
    Unknown topics print the ``# 404`` placeholder rather than failing.
    """
    _configure_logging(verbose)
    site = load_site_config(config)
    lang = _resolve_language(site, language)
    resolver = _build_resolver(site)
    asyncio.run(resolver.resolve(lang, topic))
    view = resolver.view()
    if json:
        print(msgspec_json.format(msgspec_json.encode(view), indent=2).decode("utf-8"))
        return
    print(view.content)
    print()
    print("Contents:")
    for entry in view.toc:
        if entry.level <= site.toc_max_level:
            indent = "  " * (entry.level - 1)
            print(f"{indent}- {entry.text} (#{entry.id})")
    if view.previous:
        print(f"Previous: {view.previous.slug} ({view.previous.title})")
    if view.next:
        print(f"Next: {view.next.slug} ({view.next.title})")


@app.command(help="Render static HTML pages for every language and topic.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    verbose: bool = False,
) -> None:
    """Write one HTML page per topic under the output directory.

    Parameters
    ----------
    config : Path, optional
        Path to the ``docs-nav.yaml`` configuration file.
    output_dir : Path or None, optional
        Override for the configured ``output_dir``.
    verbose : bool, optional
        Emit DEBUG logs on stderr.
    """
    _configure_logging(verbose)
    site = load_site_config(config)
    builder = DocsSiteBuilder(site, output_dir=output_dir)
    for path in asyncio.run(builder.build()):
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docs-nav`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

"""Typed dataclasses describing docs_nav site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from .._constants import DEFAULT_BASE_PATH, DEFAULT_TOC_MAX_LEVEL


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SourceConfig:
    """Where raw documents are read from.

    Attributes
    ----------
    kind : str
        ``"filesystem"`` or ``"http"``.
    root : Path | None
        Directory holding ``<language>/<file>.md`` for filesystem sources.
    base_url : str | None
        URL prefix documents are fetched from for HTTP sources.
    manifest_url : str | None
        URL of the JSON list of ``language/file.md`` paths for HTTP sources.
    """

    kind: str = "filesystem"
    root: Path | None = Path("content")
    base_url: str | None = None
    manifest_url: str | None = None


@dc.dataclass(slots=True)
class ThemeConfig:
    """Labels applied to generated documentation pages."""

    site_name: str = "Docs"
    doc_label: str = "Docs"
    toc_heading: str = "On this page"


@dc.dataclass(slots=True)
class SiteConfig:
    """Fully resolved site configuration."""

    source: SourceConfig = dc.field(default_factory=SourceConfig)
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    languages: list[str] = dc.field(default_factory=lambda: ["en"])
    default_language: str = "en"
    base_path: str = DEFAULT_BASE_PATH
    toc_max_level: int = DEFAULT_TOC_MAX_LEVEL
    output_dir: Path = Path("public")
    pygments_style: str = "monokai"


__all__ = ["SiteConfig", "SiteConfigError", "SourceConfig", "ThemeConfig"]

"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .._constants import DEFAULT_BASE_PATH, DEFAULT_TOC_MAX_LEVEL
from .helpers import (
    _build_source_config,
    _build_theme_config,
    _normalize_languages,
    _optional_str,
    _parse_toc_level,
)
from .models import SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing document sources and output.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``docs-nav.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with the document source, supported languages,
        addressing, and rendering defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If the source section is missing required fields or names an unknown
        source type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docs_nav.config import load_site_config
    >>> config = load_site_config(Path("docs-nav.yaml"))  # doctest: +SKIP
    >>> config.languages  # doctest: +SKIP
    ['en', 'ko']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = raw.get("defaults", {}) or {}
    source_raw = raw.get("source")
    if not isinstance(source_raw, dict):
        msg = "Configuration must define a 'source' mapping."
        raise SiteConfigError(msg)

    default_language = (_optional_str(defaults.get("default_language")) or "en").lower()
    languages = _normalize_languages(defaults.get("languages"), default_language)
    base_path = (_optional_str(defaults.get("base_path")) or DEFAULT_BASE_PATH).strip("/")
    output_dir = Path(defaults.get("output_dir", "public"))
    if not output_dir.is_absolute():
        output_dir = path.parent / output_dir

    return SiteConfig(
        source=_build_source_config(source_raw, relative_to=path.parent),
        theme=_build_theme_config(defaults.get("theme", {}) or {}),
        languages=languages,
        default_language=default_language,
        base_path=base_path,
        toc_max_level=_parse_toc_level(
            defaults.get("toc_max_level"), DEFAULT_TOC_MAX_LEVEL
        ),
        output_dir=output_dir,
        pygments_style=defaults.get("pygments_style", "monokai"),
    )


__all__ = ["load_site_config"]

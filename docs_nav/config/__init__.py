"""Load and validate site configuration YAML for docs_nav.

This subpackage parses the project's ``docs-nav.yaml`` file, applies defaults
for languages, addressing, and rendering, validates the document source, and
produces typed dataclasses (:class:`SiteConfig`, :class:`SourceConfig`,
:class:`ThemeConfig`) consumed by the CLI and the page builder. The primary
entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from docs_nav.config import load_site_config
>>> site = load_site_config(Path("docs-nav.yaml"))  # doctest: +SKIP
>>> site.source.kind  # doctest: +SKIP
'filesystem'
"""

from .loader import load_site_config
from .models import SiteConfig, SiteConfigError, SourceConfig, ThemeConfig

__all__ = [
    "SiteConfig",
    "SiteConfigError",
    "SourceConfig",
    "ThemeConfig",
    "load_site_config",
]

"""Utility helpers shared by the docs_nav configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import SiteConfigError, SourceConfig, ThemeConfig

SOURCE_KINDS = frozenset({"filesystem", "http"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_languages(value: object | None, default: str) -> list[str]:
    """Return a de-duplicated list of lowercase language codes."""
    if isinstance(value, str):
        candidates: list[object] = [value]
    elif isinstance(value, list):
        candidates = value
    else:
        candidates = []
    languages: list[str] = []
    for candidate in candidates:
        code = _optional_str(candidate)
        if code and code.lower() not in languages:
            languages.append(code.lower())
    if default not in languages:
        languages.insert(0, default)
    return languages


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    return ThemeConfig(
        site_name=payload.get("site_name", base.site_name),
        doc_label=payload.get("doc_label", base.doc_label),
        toc_heading=payload.get("toc_heading", base.toc_heading),
    )


def _build_source_config(
    payload: typ.Mapping[str, typ.Any], *, relative_to: Path
) -> SourceConfig:
    """Build and validate the document source section.

    Relative filesystem roots are resolved against ``relative_to`` (the
    directory holding the configuration file).
    """
    kind = (_optional_str(payload.get("type")) or "filesystem").lower()
    if kind not in SOURCE_KINDS:
        known = ", ".join(sorted(SOURCE_KINDS))
        msg = f"Unknown source type '{kind}'. Known types: {known}"
        raise SiteConfigError(msg)

    if kind == "http":
        base_url = _optional_str(payload.get("base_url"))
        if not base_url:
            msg = "HTTP sources require 'base_url'."
            raise SiteConfigError(msg)
        manifest_url = _optional_str(payload.get("manifest_url")) or (
            f"{base_url.rstrip('/')}/manifest.json"
        )
        return SourceConfig(
            kind=kind, root=None, base_url=base_url, manifest_url=manifest_url
        )

    root_value = _optional_str(payload.get("root"))
    if not root_value:
        msg = "Filesystem sources require 'root'."
        raise SiteConfigError(msg)
    root = Path(root_value)
    if not root.is_absolute():
        root = relative_to / root
    return SourceConfig(kind=kind, root=root)


def _parse_toc_level(value: object | None, default: int) -> int:
    """Return a TOC depth clamped to the 1-6 heading range."""
    if value is None:
        return default
    try:
        level = int(str(value))
    except ValueError as exc:
        msg = f"'toc_max_level' must be an integer, got {value!r}"
        raise SiteConfigError(msg) from exc
    return min(max(level, 1), 6)


__all__ = [
    "SOURCE_KINDS",
    "_build_source_config",
    "_build_theme_config",
    "_normalize_languages",
    "_optional_str",
    "_parse_toc_level",
]

"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from apiref._constants import DEFAULT_INDEXES

from .models import HighlightConfig, NavigationConfig, SiteConfig, SiteConfigError

DEFAULT_NAV_FILENAME = "apiref-nav.html"
DEFAULT_STYLESHEET_FILENAME = "apiref-highlight.css"


def load_site_config(path: Path, *, site_dir: Path | None = None) -> SiteConfig:
    """Load the YAML configuration describing a generated documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``apiref.yaml``).
    site_dir : Path, optional
        Overrides the configured ``site_dir``; paths defaulted from it follow.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required fields are missing or have the wrong shape.

    Examples
    --------
    >>> from pathlib import Path
    >>> from apiref.config import load_site_config
    >>> config = load_site_config(Path("apiref.yaml"))  # doctest: +SKIP
    >>> config.highlight.language  # doctest: +SKIP
    'cpp'
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
    return build_site_config(loaded, site_dir=site_dir)


def build_site_config(
    raw: typ.Mapping[str, typ.Any], *, site_dir: Path | None = None
) -> SiteConfig:
    """Build a :class:`SiteConfig` from a decoded mapping.

    ``site_dir`` overrides the mapping's ``site_dir`` entry, which lets the CLI
    run without a configuration file.
    """
    site_dir_value = site_dir or raw.get("site_dir")
    if not site_dir_value:
        msg = "Site configuration is missing 'site_dir'."
        raise SiteConfigError(msg)
    resolved_site_dir = Path(site_dir_value)

    highlight = _build_highlight_config(raw.get("highlight") or {})
    indexes = _string_list(raw.get("indexes"), "indexes") or list(DEFAULT_INDEXES)
    navigation = _build_navigation_config(
        raw.get("navigation") or {}, site_dir=resolved_site_dir, indexes=indexes
    )
    stylesheet_raw = raw.get("stylesheet_output")
    stylesheet_output = (
        Path(stylesheet_raw)
        if stylesheet_raw
        else resolved_site_dir / DEFAULT_STYLESHEET_FILENAME
    )

    return SiteConfig(
        site_dir=resolved_site_dir,
        highlight=highlight,
        navigation=navigation,
        indexes=indexes,
        stylesheet_output=stylesheet_output,
    )


def _build_highlight_config(payload: typ.Mapping[str, typ.Any]) -> HighlightConfig:
    """Build a HighlightConfig, keeping defaults for absent keys."""
    if not isinstance(payload, dict):
        msg = "'highlight' must be a mapping."
        raise SiteConfigError(msg)
    base = HighlightConfig()
    language = payload.get("language", base.language)
    if not isinstance(language, str) or not language.strip():
        msg = "'highlight.language' must be a non-empty string."
        raise SiteConfigError(msg)
    return HighlightConfig(
        language=language.strip().lower(),
        pygments_style=payload.get("pygments_style", base.pygments_style),
        css_class=payload.get("css_class", base.css_class),
        fragment_selector=payload.get("fragment_selector", base.fragment_selector),
        line_selector=payload.get("line_selector", base.line_selector),
        strip_selector=payload.get("strip_selector", base.strip_selector) or None,
    )


def _build_navigation_config(
    payload: typ.Mapping[str, typ.Any], *, site_dir: Path, indexes: list[str]
) -> NavigationConfig:
    """Build a NavigationConfig rooted in ``site_dir`` unless overridden."""
    if not isinstance(payload, dict):
        msg = "'navigation' must be a mapping."
        raise SiteConfigError(msg)
    output = Path(payload.get("output") or site_dir / DEFAULT_NAV_FILENAME)
    index = payload.get("index") or indexes[0]
    if index not in indexes:
        msg = f"Navigation index '{index}' is not listed under 'indexes'."
        raise SiteConfigError(msg)
    return NavigationConfig(
        output=output,
        title=payload.get("title", "API Reference"),
        index=index,
    )


def _string_list(value: object, key: str) -> list[str]:
    """Return ``value`` as a list of non-empty strings."""
    match value:
        case None:
            return []
        case str():
            return [value]
        case list():
            return [str(item).strip() for item in value if str(item).strip()]
        case _:
            msg = f"'{key}' must be a string or a list of strings."
            raise SiteConfigError(msg)


__all__ = ["build_site_config", "load_site_config"]

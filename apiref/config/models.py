"""Typed dataclasses describing apiref site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from apiref._constants import (
    DEFAULT_CSS_CLASS,
    DEFAULT_FRAGMENT_SELECTOR,
    DEFAULT_INDEXES,
    DEFAULT_LANGUAGE,
    DEFAULT_LINE_SELECTOR,
    DEFAULT_PYGMENTS_STYLE,
    INDEX_SCRIPT_TEMPLATE,
)


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class HighlightConfig:
    """How source fragments are located and highlighted on every page."""

    language: str = DEFAULT_LANGUAGE
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    css_class: str = DEFAULT_CSS_CLASS
    fragment_selector: str = DEFAULT_FRAGMENT_SELECTOR
    line_selector: str = DEFAULT_LINE_SELECTOR
    strip_selector: str | None = None


@dc.dataclass(slots=True)
class NavigationConfig:
    """Output location and heading of the rendered navigation page."""

    output: Path
    title: str = "API Reference"
    index: str = DEFAULT_INDEXES[0]


@dc.dataclass(slots=True)
class SiteConfig:
    """A generated documentation site and the processing applied to it."""

    site_dir: Path
    highlight: HighlightConfig
    navigation: NavigationConfig
    indexes: list[str] = dc.field(default_factory=lambda: list(DEFAULT_INDEXES))
    stylesheet_output: Path | None = None

    def index_path(self, name: str) -> Path:
        """Return the path of the generator index script called ``name``."""
        return self.site_dir / INDEX_SCRIPT_TEMPLATE.format(name=name)


__all__ = ["HighlightConfig", "NavigationConfig", "SiteConfig", "SiteConfigError"]

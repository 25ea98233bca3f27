"""Load and validate the apiref site configuration.

The primary entry point is :func:`load_site_config`, which reads
``apiref.yaml``, applies defaults, and returns a :class:`SiteConfig` consumed
by the rehydrator and the navigation builder.

Examples
--------
>>> from pathlib import Path
>>> from apiref.config import load_site_config
>>> site = load_site_config(Path("apiref.yaml"))  # doctest: +SKIP
>>> site.index_path("concepts")  # doctest: +SKIP
PosixPath('html/concepts.js')
"""

from .loader import build_site_config, load_site_config
from .models import HighlightConfig, NavigationConfig, SiteConfig, SiteConfigError

__all__ = [
    "HighlightConfig",
    "NavigationConfig",
    "SiteConfig",
    "SiteConfigError",
    "build_site_config",
    "load_site_config",
]

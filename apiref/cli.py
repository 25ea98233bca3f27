"""Cyclopts CLI entrypoint for post-processing generated API reference sites.

The ``apiref`` console script rehydrates the line-split source listings of a
generated site into highlighted blocks, renders the entity navigation page, and
queries the entity index from the terminal.

Examples
--------
Rehydrate every page of the configured site:

>>> from apiref.cli import main
>>> main()  # doctest: +SKIP

Search the class index without a configuration file:

>>> from apiref.cli import app
>>> app(["search", "Box", "--site-dir", "html"])  # doctest: +SKIP
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import build_site_config, load_site_config
from .navigation import NavigationPageBuilder, load_forest
from .rehydrate import SiteRehydrator

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .index import Forest

DEFAULT_CONFIG = Path("apiref.yaml")

app = App(name="apiref", config=cyclopts.config.Env("APIREF_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="APIREF_CONFIG")
]
SiteDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the generated site folder", env_var="APIREF_SITE_DIR"),
]
IndexOption = typ.Annotated[
    str | None, Parameter(help="Index script name, e.g. 'hierarchy'")
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config(config: Path, site_dir: Path | None) -> SiteConfig:
    """Load ``config`` when present, falling back to defaults rooted in ``site_dir``."""
    if config.exists():
        return load_site_config(config, site_dir=site_dir)
    if site_dir is None:
        msg = f"Configuration file '{config}' not found and no --site-dir given."
        raise FileNotFoundError(msg)
    return build_site_config({}, site_dir=site_dir)


def _load_forest(site_config: SiteConfig, index: str | None) -> Forest:
    """Return the forest for ``index`` or the configured navigation index."""
    return load_forest(site_config, index or site_config.navigation.index)


@app.command(help="Highlight the line-split source listings of every page.")
def rehydrate(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    site_dir: SiteDirOption = None,
) -> None:
    """Rehydrate all source fragments of the generated site in place.

    Parameters
    ----------
    config : Path, optional
        Path to the ``apiref.yaml`` configuration file (overridable via
        ``APIREF_CONFIG``).
    site_dir : Path or None, optional
        Generated site folder; overrides the configured ``site_dir`` and
        allows running without a configuration file.

    Returns
    -------
    None
        Rewrites pages in place and prints each written path. Pages whose
        highlighting failed keep their original listing and are reported.
    """
    site_config = _resolve_config(config, site_dir)
    rehydrator = SiteRehydrator(site_config)
    written = rehydrator.run()
    for path in written:
        print(f"wrote {_format_path(path)}")
    for page, report in rehydrator.reports.items():
        if report.failed:
            print(
                f"{_format_path(page)}: {report.failed} block(s) left unhighlighted",
                file=sys.stderr,
            )


@app.command(help="Render the entity navigation page.")
def nav(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    site_dir: SiteDirOption = None,
    index: IndexOption = None,
) -> None:
    """Render the navigation tree for one entity index.

    Parameters
    ----------
    config : Path, optional
        Path to the ``apiref.yaml`` configuration file.
    site_dir : Path or None, optional
        Generated site folder override.
    index : str or None, optional
        Index script to render; defaults to the configured navigation index.
    """
    site_config = _resolve_config(config, site_dir)
    forest = _load_forest(site_config, index)
    output = NavigationPageBuilder(forest, site_config).run()
    print(f"wrote {_format_path(output)}")


@app.command(help="List entities whose label contains QUERY.")
def search(
    query: str,
    /,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    site_dir: SiteDirOption = None,
    index: IndexOption = None,
    limit: typ.Annotated[int, Parameter(help="Maximum matches to print")] = 20,
    case_sensitive: bool = False,
) -> None:
    """Print matching entity paths in document order.

    Parameters
    ----------
    query : str
        Substring searched for in every entity label.
    config : Path, optional
        Path to the ``apiref.yaml`` configuration file.
    site_dir : Path or None, optional
        Generated site folder override.
    index : str or None, optional
        Index script to search; defaults to the configured navigation index.
    limit : int, optional
        Stop after this many matches. Defaults to 20.
    case_sensitive : bool, optional
        Match case exactly instead of case-insensitively.
    """
    site_config = _resolve_config(config, site_dir)
    forest = _load_forest(site_config, index)
    results = forest.search(query, case_insensitive=not case_sensitive)
    for node, path in results.first(limit):
        target = node.target or "-"
        print(f"{' / '.join(path)}\t{target}")


@app.command(help="Show the entity at the given label path.")
def show(
    *segments: str,
    config: ConfigOption = DEFAULT_CONFIG,
    site_dir: SiteDirOption = None,
    index: IndexOption = None,
) -> None:
    """Print the breadcrumbs, target and children of one entity.

    Parameters
    ----------
    *segments : str
        Labels from a root down to the entity, one per argument.
    config : Path, optional
        Path to the ``apiref.yaml`` configuration file.
    site_dir : Path or None, optional
        Generated site folder override.
    index : str or None, optional
        Index script to query; defaults to the configured navigation index.

    Raises
    ------
    SystemExit
        With status 1 when no entity exists at the path.
    """
    site_config = _resolve_config(config, site_dir)
    forest = _load_forest(site_config, index)
    node = forest.find_by_path(segments)
    crumbs = forest.breadcrumbs(segments)
    if node is None or crumbs is None:
        print(f"no entity at {' / '.join(segments) or '<empty path>'}", file=sys.stderr)
        raise SystemExit(1)
    print(" > ".join(crumb.label for crumb in crumbs))
    print(f"target: {node.target or '-'}")
    for child in forest.children_of(node):
        print(f"  {child.label}\t{child.target or '-'}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``apiref`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

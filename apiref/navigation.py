"""Render the entity navigation page for a generated documentation site.

The builder walks one loaded :class:`~apiref.index.Forest` in declared order and
renders ``nav_page.jinja`` into a nested list of links. Each item carries its
full path so the page can deep-link by path rather than by label, since labels
such as ``impl`` repeat across namespaces.

>>> from pathlib import Path
>>> from apiref.config import load_site_config
>>> from apiref.navigation import NavigationPageBuilder, load_forest
>>> site = load_site_config(Path("apiref.yaml"))  # doctest: +SKIP
>>> forest = load_forest(site, site.navigation.index)  # doctest: +SKIP
>>> NavigationPageBuilder(forest, site).run()  # doctest: +SKIP
PosixPath('html/apiref-nav.html')
"""

from __future__ import annotations

import datetime as dt
import os
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .index import Forest, ScriptDirectoryResolver, load_index_file

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .index import EntityNode, EntityPath


def load_forest(site_config: SiteConfig, name: str) -> Forest:
    """Load the index script called ``name`` from the site directory.

    Deferred child indexes are resolved against the same directory.

    Raises
    ------
    FileNotFoundError
        If the index script is missing.
    MalformedIndexError
        If the script does not hold a well-formed index.
    """
    path = site_config.index_path(name)
    if not path.is_file():
        msg = f"Index script '{path}' not found."
        raise FileNotFoundError(msg)
    return load_index_file(path, resolver=ScriptDirectoryResolver(site_config.site_dir))


def load_forests(site_config: SiteConfig) -> dict[str, Forest]:
    """Load every configured index script, keyed by index name."""
    return {name: load_forest(site_config, name) for name in site_config.indexes}


class NavigationPageBuilder:
    """Render a tree of entity links from a loaded forest."""

    def __init__(
        self,
        forest: Forest,
        site_config: SiteConfig,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the builder and Jinja environment.

        Parameters
        ----------
        forest : Forest
            Entity forest driving the navigation tree.
        site_config : SiteConfig
            Parsed site configuration providing the output path and title.
        templates_dir : Path, optional
            Directory containing Jinja templates. Defaults to
            ``apiref/templates`` when ``None``.
        """
        self.forest = forest
        self.site_config = site_config
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("nav_page.jinja")

    def run(self) -> Path:
        """Render the navigation HTML file to the configured output path."""
        navigation = self.site_config.navigation
        output_path = navigation.output
        output_path.parent.mkdir(parents=True, exist_ok=True)
        context = {
            "title": navigation.title,
            "items": self.build_items(),
            "generated_at": dt.datetime.now(dt.UTC),
        }
        html = self.template.render(**context)
        if not html.endswith("\n"):
            html += "\n"
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def build_items(self) -> list[dict[str, typ.Any]]:
        """Return nested item dictionaries for every root in declared order."""
        return [self._build_item(root, (root.label,)) for root in self.forest.roots]

    def _build_item(self, node: EntityNode, path: EntityPath) -> dict[str, typ.Any]:
        children = [
            self._build_item(child, (*path, child.label))
            for child in self.forest.children_of(node)
        ]
        return {
            "label": node.label,
            "href": self._href(node.target),
            "path": "/".join(path),
            "children": children,
        }

    def _href(self, target: str | None) -> str | None:
        """Return ``target`` relative to the navigation page's directory."""
        if not target:
            return None
        page, _, anchor = target.partition("#")
        relative_to = self.site_config.navigation.output.parent
        rel_path = Path(
            os.path.relpath(self.site_config.site_dir / page, start=relative_to)
        ).as_posix()
        return f"{rel_path}#{anchor}" if anchor else rel_path


__all__ = ["NavigationPageBuilder", "load_forest", "load_forests"]

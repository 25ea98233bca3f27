"""Rehydrate every page of a generated documentation site in place.

Typical usage pairs the loader with a site config:

>>> from pathlib import Path
>>> from apiref.config import load_site_config
>>> from apiref.rehydrate import SiteRehydrator
>>> site = load_site_config(Path("apiref.yaml"))  # doctest: +SKIP
>>> SiteRehydrator(site).run()  # doctest: +SKIP
[PosixPath('html/box_8hpp_source.html'), ...]

Pages are parsed with BeautifulSoup's ``html.parser`` and written back only
when at least one block was inserted. The Pygments stylesheet matching the
configured style is written next to the pages.
"""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup

from .highlighter import PygmentsHighlighter
from .rehydrator import CodeBlockRehydrator, RehydrationReport

if typ.TYPE_CHECKING:
    from pathlib import Path

    from apiref.config import SiteConfig

    from .highlighter import Highlighter


class SiteRehydrator:
    """Apply :class:`CodeBlockRehydrator` to every HTML page under ``site_dir``."""

    def __init__(
        self, site_config: SiteConfig, *, highlighter: Highlighter | None = None
    ) -> None:
        """Initialize the site rehydrator.

        Parameters
        ----------
        site_config : SiteConfig
            Parsed configuration naming the site directory and highlight
            options.
        highlighter : Highlighter, optional
            Highlighting capability; defaults to a :class:`PygmentsHighlighter`
            using the configured style and css class.
        """
        options = site_config.highlight
        self.site_config = site_config
        self.pygments = PygmentsHighlighter(options.pygments_style, options.css_class)
        self.rehydrator = CodeBlockRehydrator(
            highlighter or self.pygments,
            language=options.language,
            fragment_selector=options.fragment_selector,
            line_selector=options.line_selector,
            strip_selector=options.strip_selector,
            css_class=options.css_class,
        )
        self.reports: dict[Path, RehydrationReport] = {}

    def run(self) -> list[Path]:
        """Rehydrate all pages and return the paths that were written.

        Raises
        ------
        FileNotFoundError
            If the configured site directory does not exist.
        """
        site_dir = self.site_config.site_dir
        if not site_dir.is_dir():
            msg = f"Site directory '{site_dir}' not found."
            raise FileNotFoundError(msg)

        written: list[Path] = []
        for page in sorted(site_dir.rglob("*.html")):
            if self.rehydrate_file(page):
                written.append(page)
        stylesheet = self._write_stylesheet()
        if stylesheet is not None:
            written.append(stylesheet)
        return written

    def rehydrate_file(self, page: Path) -> bool:
        """Rehydrate a single page, returning ``True`` when it was rewritten."""
        document = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
        report = self.rehydrator.rehydrate_page(document)
        self.reports[page] = report
        if not report.changed:
            return False
        page.write_text(str(document), encoding="utf-8")
        return True

    def _write_stylesheet(self) -> Path | None:
        output = self.site_config.stylesheet_output
        if output is None:
            return None
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(self.pygments.stylesheet + "\n", encoding="utf-8")
        return output


__all__ = ["SiteRehydrator"]

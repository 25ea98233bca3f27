"""Rebuild line-split source listings and layer highlighted blocks over them.

Generated reference pages render each listing as a container of per-line
elements::

    <div class="fragment">
      <div class="line">int x = 1;</div>
      <div class="line"></div>
      <div class="line">return x;</div>
    </div>

:class:`CodeBlockRehydrator` joins the line texts back into one source string,
hands it to a :class:`~apiref.rehydrate.highlighter.Highlighter`, and inserts
the colourised ``<pre>`` right after the container. The container itself stays
in the document.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from html import escape

from bs4 import BeautifulSoup, Tag

from apiref._constants import (
    DEFAULT_CSS_CLASS,
    DEFAULT_FRAGMENT_SELECTOR,
    DEFAULT_LANGUAGE,
    DEFAULT_LINE_SELECTOR,
    REHYDRATED_MARKER,
)

from .highlighter import HighlightUnavailableError

if typ.TYPE_CHECKING:
    from .highlighter import Highlighter

log = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class CodeFragment:
    """Ordered line texts extracted from one source fragment container."""

    lines: tuple[str, ...]

    @property
    def source(self) -> str:
        """Return the lines joined with one newline between neighbours."""
        return "\n".join(self.lines)


@dc.dataclass(slots=True)
class RehydrationReport:
    """Outcome counts for one rehydration pass over a document."""

    highlighted: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def changed(self) -> bool:
        """Return ``True`` when at least one block was inserted."""
        return self.highlighted > 0


class CodeBlockRehydrator:
    """Replace the presentation of line-split listings with highlighted blocks."""

    def __init__(
        self,
        highlighter: Highlighter,
        *,
        language: str = DEFAULT_LANGUAGE,
        fragment_selector: str = DEFAULT_FRAGMENT_SELECTOR,
        line_selector: str = DEFAULT_LINE_SELECTOR,
        strip_selector: str | None = None,
        css_class: str = DEFAULT_CSS_CLASS,
    ) -> None:
        """Initialize the rehydrator.

        Parameters
        ----------
        highlighter : Highlighter
            Capability that colourises the reconstructed source.
        language : str, optional
            Language tag used for every block of the deployment.
        fragment_selector : str, optional
            CSS selector for source fragment containers.
        line_selector : str, optional
            CSS selector, relative to a container, for its line elements.
        strip_selector : str, optional
            CSS selector for line descendants whose text is dropped during
            extraction, such as generator-printed line numbers.
        css_class : str, optional
            Class applied to the inserted ``<pre>`` and ``<code>`` elements.
        """
        self.highlighter = highlighter
        self.language = language
        self.fragment_selector = fragment_selector
        self.line_selector = line_selector
        self.strip_selector = strip_selector
        self.css_class = css_class

    def extract_fragment(self, container: Tag) -> CodeFragment:
        """Return the text of every line element of ``container`` in DOM order."""
        return CodeFragment(
            tuple(self._line_text(line) for line in container.select(self.line_selector))
        )

    def rehydrate(self, container: Tag) -> Tag | None:
        """Insert a highlighted copy of ``container`` directly after it.

        Parameters
        ----------
        container : Tag
            Source fragment element attached to a document.

        Returns
        -------
        Tag | None
            The inserted ``<pre>`` block, or ``None`` when highlighting failed
            and the original presentation was left untouched.
        """
        source = self.extract_fragment(container).source
        try:
            markup = self.highlighter.highlight(
                source, self.language, tolerate_errors=True
            )
        except HighlightUnavailableError as exc:
            log.warning("Leaving source fragment unhighlighted: %s", exc)
            return None
        except Exception:
            # Any highlighter may be plugged in; a crash stays local to this container.
            log.warning(
                "Leaving source fragment unhighlighted after highlighter error",
                exc_info=True,
            )
            return None
        block = self._build_block(markup)
        container.insert_after(block)
        return block

    def rehydrate_page(self, document: BeautifulSoup | Tag) -> RehydrationReport:
        """Rehydrate every source fragment in ``document`` in document order.

        Containers already followed by a block from an earlier pass are
        skipped, so running twice over the same page inserts nothing new.
        """
        report = RehydrationReport()
        for container in document.select(self.fragment_selector):
            if self.is_rehydrated(container):
                report.skipped += 1
                continue
            if self.rehydrate(container) is None:
                report.failed += 1
            else:
                report.highlighted += 1
        return report

    @staticmethod
    def is_rehydrated(container: Tag) -> bool:
        """Return ``True`` when ``container`` is already followed by a rehydrated block."""
        sibling = container.find_next_sibling()
        return isinstance(sibling, Tag) and sibling.get(REHYDRATED_MARKER) is not None

    def _line_text(self, line: Tag) -> str:
        if not self.strip_selector:
            return line.get_text()
        stripped = {id(tag) for tag in line.select(self.strip_selector)}
        return "".join(
            text
            for text in line.strings
            if not any(id(parent) in stripped for parent in text.parents)
        )

    def _build_block(self, markup: str) -> Tag:
        css_class = escape(self.css_class, quote=True)
        language = escape(self.language, quote=True)
        html = (
            f'<pre class="{css_class}" data-language="{language}" '
            f'{REHYDRATED_MARKER}="">'
            f'<code class="{css_class}">{markup}</code></pre>'
        )
        block = BeautifulSoup(html, "html.parser").pre
        return typ.cast("Tag", block)


__all__ = ["CodeBlockRehydrator", "CodeFragment", "RehydrationReport"]

"""Pygments-backed highlighting capability used by the rehydrator."""

from __future__ import annotations

import typing as typ

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound


class HighlightUnavailableError(RuntimeError):
    """Raised when the highlighting engine cannot colourise a source blob."""


class Highlighter(typ.Protocol):
    """Capability turning raw source text into styled markup."""

    def highlight(
        self, source: str, language: str, *, tolerate_errors: bool = True
    ) -> str:
        """Return markup with embedded styling spans for ``source``."""
        ...


class PygmentsHighlighter:
    """Highlight source text with Pygments and expose the matching stylesheet."""

    def __init__(self, style: str = "monokai", css_class: str = "codehilite") -> None:
        """Initialize a highlighter for one Pygments style.

        Parameters
        ----------
        style : str, optional
            Name of the Pygments style. Defaults to ``"monokai"``.
        css_class : str, optional
            CSS class scoping the generated stylesheet. Defaults to
            ``"codehilite"``.
        """
        self.style = style
        self.css_class = css_class
        self._formatter = HtmlFormatter(style=style, cssclass=css_class, nowrap=True)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(f".{self.css_class}")

    def highlight(
        self, source: str, language: str, *, tolerate_errors: bool = True
    ) -> str:
        """Render ``source`` into span markup without a wrapping block.

        Parameters
        ----------
        source : str
            Source text to colourise.
        language : str
            Pygments lexer alias such as ``"cpp"``.
        tolerate_errors : bool, optional
            When ``True`` (default), unknown languages fall back to plain text
            and illegal tokens are rendered as error spans. When ``False``,
            either case fails.

        Returns
        -------
        str
            HTML made of styled ``<span>`` elements.

        Raises
        ------
        HighlightUnavailableError
            If the lexer cannot be resolved in strict mode or Pygments fails.
        """
        try:
            lexer = get_lexer_by_name(language, stripnl=False, ensurenl=False)
        except ClassNotFound as exc:
            if not tolerate_errors:
                msg = f"No lexer available for language '{language}'."
                raise HighlightUnavailableError(msg) from exc
            lexer = get_lexer_by_name("text", stripnl=False, ensurenl=False)
        if not tolerate_errors:
            lexer.add_filter("raiseonerror")
        try:
            markup = highlight(source, lexer, self._formatter)
        except Exception as exc:
            msg = f"Pygments failed to highlight {language} source: {exc}"
            raise HighlightUnavailableError(msg) from exc
        # The formatter terminates its output with a newline the source may lack.
        if markup.endswith("\n") and not source.endswith("\n"):
            markup = markup[:-1]
        return markup


__all__ = ["HighlightUnavailableError", "Highlighter", "PygmentsHighlighter"]

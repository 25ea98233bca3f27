"""Rehydrate line-split source listings into syntax-highlighted blocks."""

from .highlighter import HighlightUnavailableError, Highlighter, PygmentsHighlighter
from .rehydrator import CodeBlockRehydrator, CodeFragment, RehydrationReport
from .site import SiteRehydrator

__all__ = [
    "CodeBlockRehydrator",
    "CodeFragment",
    "HighlightUnavailableError",
    "Highlighter",
    "PygmentsHighlighter",
    "RehydrationReport",
    "SiteRehydrator",
]

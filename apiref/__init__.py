"""Post-process generated C++ API reference sites.

This package loads the entity index scripts written by the documentation
generator, renders navigation from them, and rehydrates line-split source
listings into syntax-highlighted blocks. The ``apiref`` console script exposes
all of it.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from apiref import app
>>> app(["rehydrate", "--site-dir", "html"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]

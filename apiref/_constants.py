"""Common literal values used across apiref.

These constants keep selectors, filenames and marker attributes centralized so
the rehydrator, site driver, config loader and tests agree on them.

Examples
--------
>>> from apiref import _constants
>>> _constants.INDEX_SCRIPT_TEMPLATE.format(name="concepts")
'concepts.js'
"""

DEFAULT_LANGUAGE = "cpp"
DEFAULT_FRAGMENT_SELECTOR = "div.fragment"
DEFAULT_LINE_SELECTOR = "div.line"
DEFAULT_CSS_CLASS = "codehilite"
DEFAULT_PYGMENTS_STYLE = "monokai"
DEFAULT_INDEXES = ("annotated_dup", "hierarchy", "concepts")
INDEX_SCRIPT_TEMPLATE = "{name}.js"
REHYDRATED_MARKER = "data-apiref-rehydrated"

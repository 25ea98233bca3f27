"""Load and re-emit entity index payloads produced by the documentation generator.

The generator writes each index as a JavaScript assignment::

    var annotated_dup =
    [
        [ "crab", "namespacecrab.html", [
          [ "impl", null, [ ... ] ],
          [ "Box", "classcrab_1_1boxed_1_1Box.html", "classcrab_1_1boxed_1_1Box" ]
        ] ]
    ];

The right-hand side is plain JSON. Every entry is ``[label, target, children]``
where ``target`` is a page reference or ``null`` and ``children`` is a nested
list, ``null`` for leaves, or the name of another script holding the children.

Examples
--------
>>> forest = load_index([["A", None, [["B", "b.html", None]]]])
>>> dump_index(forest)
[['A', None, [['B', 'b.html', None]]]]
>>> parse_index_script('var concepts = [["C", "c.html", null]];')
('concepts', [['C', 'c.html', None]])
"""

from __future__ import annotations

import json
import re
import typing as typ
from pathlib import Path

from .forest import ChildIndexResolver, Forest
from .models import (
    ChildIndexRef,
    Children,
    EntityNode,
    MalformedIndexError,
    make_node,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SCRIPT_NAME_PATTERN = r"[A-Za-z_$][\w$]*"
INDEX_SCRIPT_PATTERN = re.compile(
    rf"\A\s*var\s+(?P<name>{SCRIPT_NAME_PATTERN})\s*=\s*(?P<payload>.*?)\s*;?\s*\Z",
    re.DOTALL,
)
_SCRIPT_NAME = re.compile(SCRIPT_NAME_PATTERN)


def load_index(
    raw: object, *, resolver: ChildIndexResolver | None = None
) -> Forest:
    """Parse the nested-list wire format into a :class:`Forest`.

    Parameters
    ----------
    raw : object
        Decoded index payload: a list of ``[label, target, children]`` entries.
    resolver : callable, optional
        Loader for deferred child index scripts, passed through to the forest.

    Returns
    -------
    Forest
        Immutable forest preserving the declared order at every level.

    Raises
    ------
    MalformedIndexError
        If the payload is not a list of well-formed entries, or an entry has
        neither a target nor children.
    """
    return Forest(_parse_nodes(raw, ()), resolver=resolver)


def parse_nodes(raw: object) -> tuple[EntityNode, ...]:
    """Parse a list of wire entries into nodes without wrapping them in a forest."""
    return _parse_nodes(raw, ())


def _parse_nodes(raw: object, parent: tuple[str, ...]) -> tuple[EntityNode, ...]:
    if not isinstance(raw, list):
        where = " / ".join(parent) or "<root>"
        msg = f"Expected a list of entries under '{where}', got {type(raw).__name__}."
        raise MalformedIndexError(msg)
    return tuple(_parse_node(entry, parent) for entry in raw)


def _parse_node(entry: object, parent: tuple[str, ...]) -> EntityNode:
    if not isinstance(entry, list) or len(entry) != 3:
        where = " / ".join(parent) or "<root>"
        msg = f"Malformed entry under '{where}': expected [label, target, children]."
        raise MalformedIndexError(msg)
    label, target, children_raw = entry
    if not isinstance(label, str):
        msg = f"Entry label must be a string, got {type(label).__name__}."
        raise MalformedIndexError(msg)
    path = (*parent, label)
    if target is not None and not isinstance(target, str):
        msg = f"Target of '{' / '.join(path)}' must be a string or null."
        raise MalformedIndexError(msg)

    children: Children | None
    match children_raw:
        case None:
            children = None
        case str() as ref:
            children = ChildIndexRef(ref)
        case list():
            children = _parse_nodes(children_raw, path)
        case _:
            msg = (
                f"Children of '{' / '.join(path)}' must be a list, a child index "
                "name, or null."
            )
            raise MalformedIndexError(msg)
    return make_node(label, target, children)


def dump_index(forest: Forest | cabc.Iterable[EntityNode]) -> list[list[typ.Any]]:
    """Re-serialize nodes to the nested-list wire format.

    Deferred children are written back as their script name, so
    ``dump_index(load_index(raw)) == raw`` for every well-formed ``raw``.
    """
    roots = forest.roots if isinstance(forest, Forest) else forest
    return [_dump_node(node) for node in roots]


def _dump_node(node: EntityNode) -> list[typ.Any]:
    children = node.children
    if children is None:
        encoded: object = None
    elif isinstance(children, ChildIndexRef):
        encoded = children.name
    else:
        encoded = [_dump_node(child) for child in children]
    return [node.label, node.target, encoded]


def parse_index_script(text: str) -> tuple[str, object]:
    """Split a ``var <name> = <payload>;`` script into its name and decoded payload.

    Raises
    ------
    MalformedIndexError
        If the script is not a single variable assignment or its payload is not
        valid JSON.
    """
    match = INDEX_SCRIPT_PATTERN.match(text)
    if match is None:
        msg = "Index script must be a single 'var <name> = [...];' assignment."
        raise MalformedIndexError(msg)
    try:
        payload = json.loads(match.group("payload"))
    except json.JSONDecodeError as exc:
        msg = f"Index script '{match.group('name')}' is not valid JSON: {exc.msg}."
        raise MalformedIndexError(msg) from exc
    return match.group("name"), payload


def load_index_file(
    path: Path, *, resolver: ChildIndexResolver | None = None
) -> Forest:
    """Load a generator index script from disk.

    When ``resolver`` is omitted, deferred children are looked up as sibling
    scripts in the same directory.
    """
    text = path.read_text(encoding="utf-8")
    _name, payload = parse_index_script(text)
    if resolver is None:
        resolver = ScriptDirectoryResolver(path.parent)
    return load_index(payload, resolver=resolver)


class ScriptDirectoryResolver:
    """Resolve deferred child index names to ``<directory>/<name>.js`` scripts."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def __call__(self, name: str) -> tuple[EntityNode, ...]:
        """Load the children stored under ``name``.

        A missing script yields no children; the generator only writes member
        scripts for classes it documented in full.

        Raises
        ------
        MalformedIndexError
            If ``name`` is not a plain script identifier, such as a relative
            path reaching outside ``directory``.
        """
        if _SCRIPT_NAME.fullmatch(name) is None:
            msg = f"Deferred child index name {name!r} is not a script identifier."
            raise MalformedIndexError(msg)
        script = self.directory / f"{name}.js"
        if not script.is_file():
            return ()
        _name, payload = parse_index_script(script.read_text(encoding="utf-8"))
        return parse_nodes(payload)


__all__ = [
    "INDEX_SCRIPT_PATTERN",
    "SCRIPT_NAME_PATTERN",
    "ScriptDirectoryResolver",
    "dump_index",
    "load_index",
    "load_index_file",
    "parse_index_script",
    "parse_nodes",
]

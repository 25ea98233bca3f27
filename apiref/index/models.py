"""Typed node variants describing the documented entity hierarchy.

The generator emits each entity as ``[label, target_or_null, children_or_null]``.
Carrying that shape around with optional fields would allow a node with neither
a page nor children, so the loader maps every entry onto one of three variants
instead:

- :class:`PageNode`: a leaf entity with its own detail page.
- :class:`GroupNode`: a grouping (for example an ``impl`` namespace) without a
  page of its own.
- :class:`PageGroupNode`: an entity that has a page and also contains children.

Nodes compare by identity. Labels repeat across the forest (``impl`` appears
under most namespaces), so two entities are only the same when their full
paths agree.

Examples
--------
>>> leaf = PageNode(label="Box", target="classcrab_1_1boxed_1_1Box.html")
>>> group = GroupNode(label="boxed", children=(leaf,))
>>> group.children[0] is leaf
True
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ


class MalformedIndexError(ValueError):
    """Raised when an index payload violates the nested-list wire format."""


@dc.dataclass(frozen=True, slots=True)
class ChildIndexRef:
    """Reference to a separately generated index script holding a node's children.

    Doxygen splits large class member lists into their own ``<name>.js`` files
    and writes ``name`` in place of the inline children list.
    """

    name: str


Children = tuple["EntityNode", ...] | ChildIndexRef


@dc.dataclass(frozen=True, slots=True, eq=False)
class PageNode:
    """Leaf entity rendered on its own detail page."""

    label: str
    target: str

    @property
    def children(self) -> None:
        return None


@dc.dataclass(frozen=True, slots=True, eq=False)
class GroupNode:
    """Grouping entity without a standalone page."""

    label: str
    children: Children

    @property
    def target(self) -> None:
        return None


@dc.dataclass(frozen=True, slots=True, eq=False)
class PageGroupNode:
    """Entity with a detail page that also contains nested entities."""

    label: str
    target: str
    children: Children


EntityNode = PageNode | GroupNode | PageGroupNode

EntityPath = tuple[str, ...]


@dc.dataclass(frozen=True, slots=True)
class Crumb:
    """One breadcrumb step reconstructed from an entity path."""

    label: str
    target: str | None


def make_node(
    label: str, target: str | None, children: Children | None
) -> EntityNode:
    """Return the node variant matching the presence of ``target`` and ``children``.

    Raises
    ------
    MalformedIndexError
        If both ``target`` and ``children`` are absent.
    """
    match (target, children):
        case (None, None):
            msg = f"Entity '{label}' has neither a target page nor children."
            raise MalformedIndexError(msg)
        case (str(), None):
            return PageNode(label=label, target=target)
        case (None, _):
            return GroupNode(label=label, children=typ.cast("Children", children))
        case _:
            return PageGroupNode(
                label=label,
                target=typ.cast("str", target),
                children=typ.cast("Children", children),
            )


__all__ = [
    "ChildIndexRef",
    "Children",
    "Crumb",
    "EntityNode",
    "EntityPath",
    "GroupNode",
    "MalformedIndexError",
    "PageGroupNode",
    "PageNode",
    "make_node",
]

"""Read-only access patterns over a loaded entity forest.

A :class:`Forest` is built once by :func:`apiref.index.load_index` and passed
explicitly to whatever renders navigation or resolves cross-references. It
serves the three lookups a documentation UI needs:

- ``children_of`` for tree widgets,
- ``find_by_path`` for deep links,
- ``search`` for filter-as-you-type.

Lookups are keyed by full path. A label on its own is ambiguous, so
``paths_for_label`` returns every candidate rather than picking one.

Examples
--------
>>> from apiref.index import load_index
>>> forest = load_index([["A", None, [["B", "b.html", None]]]])
>>> forest.find_by_path(["A", "B"]).target
'b.html'
>>> forest.find_by_path(["A", "C"]) is None
True
"""

from __future__ import annotations

import copy
import typing as typ

from .models import ChildIndexRef, Crumb, EntityNode, EntityPath, MalformedIndexError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

ChildIndexResolver = typ.Callable[[str], tuple[EntityNode, ...]]


class Forest:
    """Ordered, immutable collection of root entity trees."""

    def __init__(
        self,
        roots: cabc.Iterable[EntityNode],
        *,
        resolver: ChildIndexResolver | None = None,
    ) -> None:
        """Initialize the forest.

        Parameters
        ----------
        roots : Iterable[EntityNode]
            Root-level nodes in declaration order.
        resolver : callable, optional
            Loads the children stored in a deferred child index script, given
            its name. When ``None``, deferred children read as empty.
        """
        self._roots: tuple[EntityNode, ...] = tuple(roots)
        self._resolver = resolver
        self._deferred: dict[int, tuple[EntityNode, tuple[EntityNode, ...]]] = {}

    @property
    def roots(self) -> tuple[EntityNode, ...]:
        """Return the root-level nodes in declaration order."""
        return self._roots

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self) -> cabc.Iterator[EntityNode]:
        return iter(self._roots)

    def children_of(self, node: EntityNode) -> tuple[EntityNode, ...]:
        """Return the declared children of ``node`` in original order."""
        children = node.children
        if children is None:
            return ()
        if isinstance(children, ChildIndexRef):
            return self._resolve_deferred(node, children)
        return children

    def find_by_path(self, path: cabc.Sequence[str]) -> EntityNode | None:
        """Return the node addressed by ``path`` or ``None`` when any segment misses.

        Matching is positional: the first segment selects a root, each further
        segment selects among the children of the previous match. When two
        siblings share a label the first declared sibling wins, mirroring the
        order the generator emitted.
        """
        if not path:
            return None
        level: tuple[EntityNode, ...] = self._roots
        node: EntityNode | None = None
        for segment in path:
            node = next((child for child in level if child.label == segment), None)
            if node is None:
                return None
            level = self.children_of(node)
        return node

    def walk(self) -> cabc.Iterator[tuple[EntityNode, EntityPath]]:
        """Yield every ``(node, path)`` pair lazily in pre-order.

        Raises
        ------
        MalformedIndexError
            If a deferred child index script is reached again from within its
            own children, which would make the traversal endless.
        """
        stack: list[tuple[EntityNode, EntityPath, tuple[str, ...]]] = [
            (root, (root.label,), ()) for root in reversed(self._roots)
        ]
        while stack:
            node, path, refs = stack.pop()
            yield node, path
            if isinstance(node.children, ChildIndexRef):
                name = node.children.name
                if name in refs:
                    chain = " -> ".join((*refs, name))
                    msg = f"Deferred child index '{name}' refers back to itself: {chain}."
                    raise MalformedIndexError(msg)
                refs = (*refs, name)
            children = self.children_of(node)
            stack.extend(
                (child, (*path, child.label), refs) for child in reversed(children)
            )

    def search(self, substring: str, *, case_insensitive: bool = True) -> SearchResults:
        """Return a restartable, lazily evaluated search over every label.

        Parameters
        ----------
        substring : str
            Text that must occur within a node's label.
        case_insensitive : bool, optional
            Compare with Unicode case folding when ``True`` (default).

        Returns
        -------
        SearchResults
            Iterable of ``(node, path)`` pairs in pre-order. Each iteration
            starts a fresh traversal; stopping early leaves the rest unwalked.
        """
        return SearchResults(self, substring, case_insensitive=case_insensitive)

    def breadcrumbs(self, path: cabc.Sequence[str]) -> list[Crumb] | None:
        """Return the crumbs from a root down to ``path`` or ``None`` if it misses."""
        crumbs: list[Crumb] = []
        level: tuple[EntityNode, ...] = self._roots
        for segment in path:
            node = next((child for child in level if child.label == segment), None)
            if node is None:
                return None
            crumbs.append(Crumb(label=node.label, target=node.target))
            level = self.children_of(node)
        return crumbs or None

    def paths_for_label(self, label: str) -> list[EntityPath]:
        """Return every full path whose final segment equals ``label``."""
        return [path for node, path in self.walk() if node.label == label]

    def _resolve_deferred(
        self, owner: EntityNode, ref: ChildIndexRef
    ) -> tuple[EntityNode, ...]:
        # Memoised per owning node: two owners naming the same script each get
        # their own child objects, so every node keeps a single path.
        if self._resolver is None:
            return ()
        cached = self._deferred.get(id(owner))
        if cached is None:
            children = copy.deepcopy(tuple(self._resolver(ref.name)))
            cached = (owner, children)
            self._deferred[id(owner)] = cached
        return cached[1]


class SearchResults:
    """Restartable view over the nodes whose labels contain a substring."""

    def __init__(
        self, forest: Forest, substring: str, *, case_insensitive: bool = True
    ) -> None:
        self.forest = forest
        self.substring = substring
        self.case_insensitive = case_insensitive

    def __iter__(self) -> cabc.Iterator[tuple[EntityNode, EntityPath]]:
        needle = self._normalize(self.substring)
        for node, path in self.forest.walk():
            if needle in self._normalize(node.label):
                yield node, path

    def first(self, limit: int) -> list[tuple[EntityNode, EntityPath]]:
        """Return at most ``limit`` matches without walking past the last one."""
        matches: list[tuple[EntityNode, EntityPath]] = []
        if limit <= 0:
            return matches
        for match in self:
            matches.append(match)
            if len(matches) >= limit:
                break
        return matches

    def _normalize(self, text: str) -> str:
        return text.casefold() if self.case_insensitive else text


__all__ = ["ChildIndexResolver", "Forest", "SearchResults"]

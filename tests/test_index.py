"""Unit tests for the entity index data model.

These tests load the ``annotated_dup`` fixture from ``conftest.py`` and cover
the three access patterns the navigation UI relies on: ``children_of``,
``find_by_path`` and ``search``. They also pin down the wire format contract
(round-trip re-serialisation and rejection of malformed entries) and the
deferred child index scripts the generator writes for large classes.

Usage
-----
Run ``pytest tests/test_index.py -v``. Only pytest's built-in ``tmp_path`` is
needed beyond the fixtures in ``conftest.py``.
"""

from __future__ import annotations

import typing as typ

import pytest

from apiref.index import (
    Crumb,
    GroupNode,
    MalformedIndexError,
    PageGroupNode,
    PageNode,
    ScriptDirectoryResolver,
    dump_index,
    load_index,
    load_index_file,
    parse_index_script,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_find_by_path_scenario() -> None:
    """Nested lookup returns the addressed node and misses cleanly."""
    forest = load_index([["A", None, [["B", "b.html", None]]]])
    node = forest.find_by_path(["A", "B"])
    assert node is not None, "expected A / B to resolve"
    assert node.target == "b.html", f"unexpected target {node.target!r}"
    assert forest.find_by_path(["A", "C"]) is None, "expected A / C to be NotFound"


def test_find_by_path_rejects_empty_and_overlong_paths() -> None:
    forest = load_index([["A", None, [["B", "b.html", None]]]])
    assert forest.find_by_path([]) is None
    assert forest.find_by_path(["A", "B", "C"]) is None


def test_round_trip_preserves_structure(annotated_index: list[typ.Any]) -> None:
    """Re-serialising a loaded forest yields the original payload."""
    forest = load_index(annotated_index)
    assert dump_index(forest) == annotated_index, "round trip changed the payload"


def test_node_variants_follow_target_and_children() -> None:
    forest = load_index(
        [
            ["leaf", "leaf.html", None],
            ["group", None, [["x", "x.html", None]]],
            ["both", "both.html", [["y", "y.html", None]]],
        ]
    )
    leaf, group, both = forest.roots
    assert isinstance(leaf, PageNode)
    assert isinstance(group, GroupNode)
    assert isinstance(both, PageGroupNode)
    assert leaf.children is None
    assert group.target is None


def test_node_without_target_or_children_is_rejected() -> None:
    with pytest.raises(MalformedIndexError, match="neither a target page nor children"):
        load_index([["Foo", None, None]])


def test_nested_invalid_node_is_rejected() -> None:
    with pytest.raises(MalformedIndexError):
        load_index([["ns", None, [["Foo", None, None]]]])


@pytest.mark.parametrize(
    "raw",
    [
        {"crab": "namespacecrab.html"},
        ["crab"],
        [["crab", "namespacecrab.html"]],
        [["crab", "namespacecrab.html", None, "extra"]],
        [[42, "x.html", None]],
        [["crab", 7, None]],
        [["crab", "namespacecrab.html", {"impl": None}]],
    ],
    ids=[
        "mapping",
        "bare-string",
        "short-entry",
        "long-entry",
        "numeric-label",
        "numeric-target",
        "mapping-children",
    ],
)
def test_malformed_structures_are_rejected(raw: object) -> None:
    with pytest.raises(MalformedIndexError):
        load_index(raw)


def test_children_of_preserves_declared_order(annotated_index: list[typ.Any]) -> None:
    forest = load_index(annotated_index)
    crab = forest.find_by_path(["crab"])
    assert crab is not None
    labels = [child.label for child in forest.children_of(crab)]
    assert labels == ["assertion", "boxed", "opt", "rc"], (
        f"sibling order changed: {labels}"
    )


def test_children_of_leaf_is_empty(annotated_index: list[typ.Any]) -> None:
    forest = load_index(annotated_index)
    leaf = forest.find_by_path(["crab", "assertion", "PanicInfo"])
    assert leaf is not None
    assert forest.children_of(leaf) == ()


def test_duplicate_labels_resolve_by_full_path(annotated_index: list[typ.Any]) -> None:
    """Equal leaf labels under different parents are distinct entities."""
    forest = load_index(annotated_index)
    opt_storage = forest.find_by_path(["crab", "opt", "impl", "Storage"])
    rc_storage = forest.find_by_path(["crab", "rc", "impl", "Storage"])
    assert opt_storage is not None
    assert rc_storage is not None
    assert opt_storage is not rc_storage, "distinct paths returned the same node"
    assert opt_storage.target != rc_storage.target


def test_distinct_paths_never_share_a_node(annotated_index: list[typ.Any]) -> None:
    forest = load_index(annotated_index)
    seen: dict[int, tuple[str, ...]] = {}
    for _node, path in forest.walk():
        found = forest.find_by_path(path)
        assert found is not None, f"walked path {path} did not resolve"
        previous = seen.setdefault(id(found), path)
        assert previous == path, f"{path} and {previous} resolved to one node"


def test_paths_for_label_returns_every_candidate(
    annotated_index: list[typ.Any],
) -> None:
    forest = load_index(annotated_index)
    assert forest.paths_for_label("impl") == [
        ("crab", "boxed", "impl"),
        ("crab", "opt", "impl"),
        ("crab", "rc", "impl"),
    ]


def test_search_matches_brute_force_in_pre_order(
    annotated_index: list[typ.Any],
) -> None:
    """Search yields exactly the matching nodes, once each, in pre-order."""
    forest = load_index(annotated_index)
    for needle in ("impl", "STORAGE", "crab", "", "zzz"):
        expected = [
            path
            for node, path in forest.walk()
            if needle.casefold() in node.label.casefold()
        ]
        actual = [path for _node, path in forest.search(needle)]
        assert actual == expected, f"search({needle!r}) returned {actual}"
        assert len(set(actual)) == len(actual), "search yielded duplicates"


def test_search_pre_order_visits_parents_first(
    annotated_index: list[typ.Any],
) -> None:
    forest = load_index(annotated_index)
    paths = [path for _node, path in forest.search("impl")]
    assert paths == [
        ("crab", "boxed", "impl"),
        ("crab", "opt", "impl"),
        ("crab", "rc", "impl"),
        ("false_type", "crab::ty::impl::is_const< const T >"),
    ]


def test_search_case_sensitive() -> None:
    forest = load_index([["Box", "box.html", None], ["box", "box2.html", None]])
    matches = [node.target for node, _ in forest.search("Box", case_insensitive=False)]
    assert matches == ["box.html"]


def test_search_is_restartable(annotated_index: list[typ.Any]) -> None:
    forest = load_index(annotated_index)
    results = forest.search("storage")
    first = [path for _node, path in results]
    second = [path for _node, path in results]
    assert first == second
    assert len(first) == 3


def test_search_stops_without_walking_remainder(
    annotated_index: list[typ.Any], box_members: list[typ.Any]
) -> None:
    """Taking the first match never resolves deferred children further on."""
    requested: list[str] = []

    def resolver(name: str) -> tuple[typ.Any, ...]:
        requested.append(name)
        return load_index(box_members).roots

    forest = load_index(annotated_index, resolver=resolver)
    first = forest.search("panic").first(1)
    assert [path for _node, path in first] == [("crab", "assertion", "panic_handler")]
    assert requested == [], "search walked into the Box member index"


def test_deferred_children_resolve_once(
    annotated_index: list[typ.Any], box_members: list[typ.Any]
) -> None:
    requested: list[str] = []

    def resolver(name: str) -> tuple[typ.Any, ...]:
        requested.append(name)
        return load_index(box_members).roots

    forest = load_index(annotated_index, resolver=resolver)
    box = forest.find_by_path(["crab", "boxed", "Box"])
    assert box is not None
    labels = [child.label for child in forest.children_of(box)]
    assert labels == ["Box", "as_ptr", "leak"]
    forest.children_of(box)
    assert requested == ["classcrab_1_1boxed_1_1Box"], "resolver was not memoised"
    leak = forest.find_by_path(["crab", "boxed", "Box", "leak"])
    assert leak is not None
    assert leak.target == "classcrab_1_1boxed_1_1Box.html#a77e0"


def test_deferred_children_without_resolver_read_as_empty(
    annotated_index: list[typ.Any],
) -> None:
    forest = load_index(annotated_index)
    box = forest.find_by_path(["crab", "boxed", "Box"])
    assert box is not None
    assert forest.children_of(box) == ()


def test_breadcrumbs_rebuild_ancestors(annotated_index: list[typ.Any]) -> None:
    forest = load_index(annotated_index)
    crumbs = forest.breadcrumbs(["crab", "boxed", "impl", "BoxStorage"])
    assert crumbs == [
        Crumb("crab", "namespacecrab.html"),
        Crumb("boxed", "namespacecrab_1_1boxed.html"),
        Crumb("impl", None),
        Crumb("BoxStorage", "structcrab_1_1boxed_1_1impl_1_1BoxStorage.html"),
    ]
    assert forest.breadcrumbs(["crab", "missing"]) is None


def test_parse_index_script_reads_generator_output() -> None:
    text = (
        "var concepts =\n"
        "[\n"
        '    [ "crab", "namespacecrab.html", [\n'
        '      [ "impl", null, [\n'
        '        [ "takeable", "conceptcrab_1_1mem_1_1impl_1_1takeable.html", null ]\n'
        "      ] ]\n"
        "    ] ]\n"
        "];"
    )
    name, payload = parse_index_script(text)
    assert name == "concepts"
    assert payload == [
        [
            "crab",
            "namespacecrab.html",
            [["impl", None, [["takeable", "conceptcrab_1_1mem_1_1impl_1_1takeable.html", None]]]],
        ]
    ]


@pytest.mark.parametrize(
    "text",
    ["[1, 2, 3];", "var = [];", "var broken = [[\"a\", null,];"],
    ids=["no-assignment", "no-name", "bad-json"],
)
def test_parse_index_script_rejects_other_shapes(text: str) -> None:
    with pytest.raises(MalformedIndexError):
        parse_index_script(text)


def test_load_index_file_resolves_sibling_scripts(
    site_dir: Path,
) -> None:
    forest = load_index_file(site_dir / "annotated_dup.js")
    box = forest.find_by_path(["crab", "boxed", "Box"])
    assert box is not None
    assert [child.label for child in forest.children_of(box)] == [
        "Box",
        "as_ptr",
        "leak",
    ]


def test_script_directory_resolver_tolerates_missing_scripts(tmp_path: Path) -> None:
    resolver = ScriptDirectoryResolver(tmp_path)
    assert resolver("classmissing") == ()


def test_shared_deferred_script_gives_each_owner_its_own_children(
    box_members: list[typ.Any],
) -> None:
    """Two owners naming one member script never share child nodes."""
    raw = [
        ["X", None, [["Box", "x.html", "classcrab_1_1boxed_1_1Box"]]],
        ["Y", None, [["Box", "y.html", "classcrab_1_1boxed_1_1Box"]]],
    ]
    forest = load_index(raw, resolver=lambda _name: load_index(box_members).roots)
    under_x = forest.find_by_path(["X", "Box", "leak"])
    under_y = forest.find_by_path(["Y", "Box", "leak"])
    assert under_x is not None
    assert under_y is not None
    assert under_x is not under_y, "one node reachable through two paths"
    assert under_x is forest.find_by_path(["X", "Box", "leak"]), (
        "children of one owner should be memoised"
    )


def test_shared_deferred_script_is_detached_from_resolver_result(
    box_members: list[typ.Any],
) -> None:
    shared = load_index(box_members).roots
    raw = [
        ["X", "x.html", "classcrab_1_1boxed_1_1Box"],
        ["Y", "y.html", "classcrab_1_1boxed_1_1Box"],
    ]
    forest = load_index(raw, resolver=lambda _name: shared)
    nodes = [node for node, _path in forest.walk()]
    assert len({id(node) for node in nodes}) == len(nodes) == 8


@pytest.mark.parametrize(
    "scripts",
    [
        {"selfref": [["A", "a.html", "selfref"]]},
        {"first": [["B", "b.html", "second"]], "second": [["C", "c.html", "first"]]},
    ],
    ids=["direct", "indirect"],
)
def test_cyclic_deferred_scripts_are_rejected(
    scripts: dict[str, list[typ.Any]],
) -> None:
    start = next(iter(scripts))
    forest = load_index(
        [["A", "a.html", start]], resolver=lambda name: load_index(scripts[name]).roots
    )
    with pytest.raises(MalformedIndexError, match="refers back to itself"):
        list(forest.search("zzz"))


def test_script_directory_resolver_rejects_path_like_names(tmp_path: Path) -> None:
    resolver = ScriptDirectoryResolver(tmp_path / "html")
    (tmp_path / "secret.js").write_text('var secret = [["S", "s.html", null]];')
    with pytest.raises(MalformedIndexError, match="not a script identifier"):
        resolver("../secret")

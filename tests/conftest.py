"""Shared fixtures for apiref tests.

The fixtures model a small slice of a generated C++ reference site: an
``annotated_dup`` index with repeated ``impl`` groupings, a deferred member
script for ``Box``, and a source listing page split into ``div.line`` elements.
"""

from __future__ import annotations

import copy
import json
import typing as typ

import pytest

from apiref.rehydrate import HighlightUnavailableError

if typ.TYPE_CHECKING:
    from pathlib import Path

ANNOTATED_INDEX: list[typ.Any] = [
    [
        "crab",
        "namespacecrab.html",
        [
            [
                "assertion",
                None,
                [
                    ["panic_handler", "structcrab_1_1assertion_1_1panic__handler.html", None],
                    ["PanicInfo", "structcrab_1_1assertion_1_1PanicInfo.html", None],
                ],
            ],
            [
                "boxed",
                "namespacecrab_1_1boxed.html",
                [
                    [
                        "impl",
                        None,
                        [["BoxStorage", "structcrab_1_1boxed_1_1impl_1_1BoxStorage.html", None]],
                    ],
                    ["Box", "classcrab_1_1boxed_1_1Box.html", "classcrab_1_1boxed_1_1Box"],
                ],
            ],
            [
                "opt",
                None,
                [
                    [
                        "impl",
                        None,
                        [["Storage", "structcrab_1_1opt_1_1impl_1_1Storage.html", None]],
                    ],
                ],
            ],
            [
                "rc",
                None,
                [
                    [
                        "impl",
                        None,
                        [["Storage", "structcrab_1_1rc_1_1impl_1_1Storage.html", None]],
                    ],
                ],
            ],
        ],
    ],
    ["false_type", None, [["crab::ty::impl::is_const< const T >", "structis__const.html", None]]],
]

BOX_MEMBERS: list[typ.Any] = [
    ["Box", "classcrab_1_1boxed_1_1Box.html#a1f0c", None],
    ["as_ptr", "classcrab_1_1boxed_1_1Box.html#a2b31", None],
    ["leak", "classcrab_1_1boxed_1_1Box.html#a77e0", None],
]

SOURCE_PAGE = """<!DOCTYPE html>
<html>
<head><title>box.hpp Source File</title></head>
<body>
<div class="contents">
<div class="fragment"><div class="line"><a id="l00001" name="l00001"></a><span class="lineno">    1</span><span class="preprocessor">#pragma once</span></div>
<div class="line"><a id="l00002" name="l00002"></a><span class="lineno">    2</span> </div>
<div class="line"><a id="l00003" name="l00003"></a><span class="lineno">    3</span><span class="keyword">namespace</span> crab {}</div>
</div>
<p>Between listings.</p>
<div class="fragment"><div class="line">int x = 1;</div>
<div class="line"></div>
<div class="line">return x;</div>
</div>
</div>
</body>
</html>
"""


class RecordingHighlighter:
    """Highlighter double that records calls and optionally fails."""

    def __init__(self, *, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, str, bool]] = []
        self.fail_on = fail_on

    def highlight(
        self, source: str, language: str, *, tolerate_errors: bool = True
    ) -> str:
        self.calls.append((source, language, tolerate_errors))
        if self.fail_on is not None and self.fail_on in source:
            msg = "highlighter offline"
            raise HighlightUnavailableError(msg)
        return f'<span class="hl">{source}</span>'


def write_index_script(directory: Path, name: str, payload: object) -> Path:
    """Write ``payload`` as a generator-style ``var <name> = ...;`` script."""
    path = directory / f"{name}.js"
    path.write_text(
        f"var {name} =\n{json.dumps(payload, indent=4)};\n", encoding="utf-8"
    )
    return path


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Return a generated site directory with index scripts and a source page."""
    root = tmp_path / "html"
    root.mkdir()
    write_index_script(root, "annotated_dup", ANNOTATED_INDEX)
    write_index_script(root, "classcrab_1_1boxed_1_1Box", BOX_MEMBERS)
    write_index_script(root, "hierarchy", [["crab::Error", "classcrab_1_1Error.html", None]])
    write_index_script(root, "concepts", [["crab", "namespacecrab.html", []]])
    (root / "box_8hpp_source.html").write_text(SOURCE_PAGE, encoding="utf-8")
    (root / "index.html").write_text(
        "<html><body><p>No listings here.</p></body></html>", encoding="utf-8"
    )
    return root


@pytest.fixture
def annotated_index() -> list[typ.Any]:
    """Return a fresh copy of the ``annotated_dup`` wire payload."""
    return copy.deepcopy(ANNOTATED_INDEX)


@pytest.fixture
def box_members() -> list[typ.Any]:
    """Return a fresh copy of the deferred ``Box`` member payload."""
    return copy.deepcopy(BOX_MEMBERS)


@pytest.fixture
def source_page() -> str:
    """Return a generated source listing page."""
    return SOURCE_PAGE


@pytest.fixture
def highlighter_factory() -> type[RecordingHighlighter]:
    """Return the recording highlighter class for per-test construction."""
    return RecordingHighlighter


@pytest.fixture
def index_script_writer() -> typ.Callable[[Path, str, object], Path]:
    """Return the helper writing generator-style index scripts."""
    return write_index_script

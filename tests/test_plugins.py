"""Tests for spaplan.plugins."""

from __future__ import annotations

import json
from pathlib import Path

from spaplan.config import ProjectConfig
from spaplan.libraries import LibraryPlan
from spaplan.models import (
    INFINITY,
    ChunkDirective,
    CopyEntry,
    ExternalsTable,
    ExtractCssDirective,
    HtmlEmitDirective,
    PrecacheDirective,
    ServiceWorkerRegisterDirective,
)
from spaplan.pages import Page
from spaplan.plugins import HTML_MINIFY_OPTIONS, RuntimeFlags, assemble_plugins

WORKSPACE = Path("/work/site")
PAGES = [Page(template="about.html", name="about"), Page(template="index.html", name="index")]


def _config() -> ProjectConfig:
    return ProjectConfig(workspace=WORKSPACE, build_path=WORKSPACE / "build", html_inject="body")


def _libraries() -> LibraryPlan:
    return LibraryPlan(
        entries={"assets/jquery": ("/work/site/src/lib/jquery.js",), "assets/polyfill": ("/p.js",)},
        directives=(
            ChunkDirective(name="assets/jquery", members=("assets/jquery",), min_chunks=INFINITY),
            ChunkDirective(name="assets/polyfill", members=("assets/polyfill",), min_chunks=INFINITY),
        ),
    )


def _externals() -> ExternalsTable:
    return ExternalsTable(
        aliases={"jquery": "jQuery"},
        copies=(CopyEntry(source=WORKSPACE / "vendor" / "jquery.js", destination=WORKSPACE / "build" / "assets"),),
        includes=("assets/jquery.js",),
    )


def _assemble(mode: str, **kwargs):
    return assemble_plugins(
        mode=mode,
        config=_config(),
        pages=PAGES,
        libraries=_libraries(),
        externals=_externals(),
        flags=RuntimeFlags(node_env=mode, debug=False),
        **kwargs,
    )


def _kinds(pipeline) -> list[str]:
    return [directive.kind for directive in pipeline]


def test_development_pipeline_order() -> None:
    pipeline = _assemble("development")

    assert _kinds(pipeline) == [
        "module-concatenation",
        "min-chunk-size",
        "named-modules",
        "hot-module-replacement",
        "html-emit",
        "html-emit",
        "copy",
        "include-assets",
        "chunk",
        "chunk",
        "chunk",
        "define",
    ]


def test_production_pipeline_uses_hashing_and_loader_plugins() -> None:
    pipeline = _assemble("production", loader_plugins=(ExtractCssDirective(),))

    kinds = _kinds(pipeline)
    assert kinds[2:4] == ["hashed-module-ids", "chunk-hash"]
    assert "named-modules" not in kinds
    assert "hot-module-replacement" not in kinds
    assert kinds.index("extract-css") == kinds.index("copy") - 1


def test_html_emit_chunk_order_and_minify_by_mode() -> None:
    dev_html = [d for d in _assemble("development") if isinstance(d, HtmlEmitDirective)]
    prod_html = [d for d in _assemble("production") if isinstance(d, HtmlEmitDirective)]

    index = dev_html[1]
    assert index.filename == "index.html"
    assert index.template == "/work/site/src/app/index.html"
    assert index.inject == "body"
    assert index.chunks == ("assets/jquery", "assets/polyfill", "assets/commonLibs", "index")
    assert index.minify is False

    minify = prod_html[0].to_dict()["options"]["minify"]
    assert minify == dict(HTML_MINIFY_OPTIONS)
    assert minify["keepClosingSlash"] is True
    assert minify["removeEmptyAttributes"] is False


def test_library_chunks_precede_commons_chunk() -> None:
    chunks = [d for d in _assemble("production") if isinstance(d, ChunkDirective)]

    assert [c.name for c in chunks] == ["assets/jquery", "assets/polyfill", "assets/commonLibs"]
    assert chunks[-1].members == ("about", "index")


def test_externals_directives_are_emitted_in_both_modes() -> None:
    for mode in ("development", "production"):
        rendered = [d.to_dict() for d in _assemble(mode)]
        copy = next(item for item in rendered if item["kind"] == "copy")
        include = next(item for item in rendered if item["kind"] == "include-assets")
        assert copy["options"]["patterns"] == [
            {"from": "/work/site/vendor/jquery.js", "to": "/work/site/build/assets"}
        ]
        assert include["options"] == {"assets": ["assets/jquery.js"], "append": False}


def test_define_directive_bakes_literals() -> None:
    pipeline = assemble_plugins(
        mode="production",
        config=_config(),
        pages=PAGES,
        libraries=_libraries(),
        externals=_externals(),
        flags=RuntimeFlags(node_env="production", debug=True),
    )

    define = pipeline[-1].to_dict()
    assert define == {
        "kind": "define",
        "options": {"process.env.NODE_ENV": '"production"', "process.env.DEBUG": "true"},
    }


def test_precache_directives_close_the_pipeline() -> None:
    precache = (PrecacheDirective(), ServiceWorkerRegisterDirective(prefix="/app/"))

    pipeline = _assemble("production", precache=precache)

    assert _kinds(pipeline)[-3:] == ["define", "precache-manifest", "sw-register"]


def test_pipeline_is_deterministic() -> None:
    first = json.dumps([d.to_dict() for d in _assemble("production")])
    second = json.dumps([d.to_dict() for d in _assemble("production")])

    assert first == second

"""Tests for spaplan.libraries."""

from __future__ import annotations

import math

import pytest

from spaplan.config import load_project_config
from spaplan.errors import CollisionError, ResolutionError
from spaplan.libraries import COMMONS_CHUNK, commons_directive, merge_entries, plan_libraries
from tests._fixtures.workspace_builder import WorkspaceBuilder


def _seed_libraries(workspace: WorkspaceBuilder) -> None:
    workspace.write(
        {
            "src/lib/jquery.js": "window.$ = {};\n",
            "src/lib/jquery.plugin.js": "window.$.plugin = {};\n",
            "src/lib/es5-shim.js": "/* shim */\n",
        }
    )
    workspace.descriptor(
        {
            "libiary": {
                "jquery": ["lib/jquery.js", "lib/jquery.plugin.js"],
                "polyfill": ["lib/es5-shim.js"],
            }
        }
    )


def test_library_entries_keep_declaration_order(workspace: WorkspaceBuilder) -> None:
    _seed_libraries(workspace)
    config = load_project_config(workspace.path())

    plan = plan_libraries(config)

    assert plan.chunk_names == ("assets/jquery", "assets/polyfill")
    assert plan.entries["assets/jquery"] == (
        (config.source_root / "lib" / "jquery.js").as_posix(),
        (config.source_root / "lib" / "jquery.plugin.js").as_posix(),
    )


def test_each_library_gets_its_own_infinite_chunk(workspace: WorkspaceBuilder) -> None:
    _seed_libraries(workspace)
    config = load_project_config(workspace.path())

    plan = plan_libraries(config)

    assert [directive.name for directive in plan.directives] == ["assets/jquery", "assets/polyfill"]
    for directive in plan.directives:
        assert directive.members == (directive.name,)
        assert math.isinf(directive.min_chunks)
        assert directive.to_dict()["options"]["minChunks"] == "Infinity"

    member_sets = [set(directive.members) for directive in plan.directives]
    assert member_sets[0].isdisjoint(member_sets[1])


def test_missing_library_file_raises_resolution_error(workspace: WorkspaceBuilder) -> None:
    workspace.descriptor({"libiary": {"vendor": ["lib/missing.js"]}})
    config = load_project_config(workspace.path())

    with pytest.raises(ResolutionError) as excinfo:
        plan_libraries(config)

    assert excinfo.value.path.name == "missing.js"


def test_library_named_common_libs_collides(workspace: WorkspaceBuilder) -> None:
    workspace.write({"src/lib/a.js": "\n"})
    workspace.descriptor({"libiary": {"commonLibs": ["lib/a.js"]}})
    config = load_project_config(workspace.path())

    with pytest.raises(CollisionError):
        plan_libraries(config)


def test_commons_directive_covers_page_entries_only() -> None:
    directive = commons_directive(["about", "index"])

    assert directive.name == COMMONS_CHUNK
    assert directive.members == ("about", "index")
    assert "minChunks" not in directive.to_dict()["options"]


def test_merge_entries_places_pages_before_libraries() -> None:
    merged = merge_entries({"index": ("index.js",)}, {"assets/vendor": ("v.js",)})

    assert list(merged) == ["index", "assets/vendor"]


def test_merge_entries_rejects_duplicates() -> None:
    with pytest.raises(CollisionError):
        merge_entries({"assets/vendor": ("page.js",)}, {"assets/vendor": ("v.js",)})

"""Tests for spaplan.externals."""

from __future__ import annotations

import logging

import pytest

from spaplan.config import load_project_config
from spaplan.errors import VendorCopyError
from spaplan.externals import copy_vendor_assets, resolve_externals
from tests._fixtures.workspace_builder import WorkspaceBuilder


def test_alias_and_vendor_facets_are_independent(workspace: WorkspaceBuilder) -> None:
    workspace.descriptor(
        {
            "externals": {
                "A": {"alias": "a"},
                "B": {"path": "lib/b.js"},
                "C": {"alias": "c", "path": "lib/c.js"},
            }
        }
    )
    config = load_project_config(workspace.path())

    table = resolve_externals(config)

    assert dict(table.aliases) == {"A": "a", "C": "c"}
    assert [entry.source for entry in table.copies] == [
        workspace.path() / "lib" / "b.js",
        workspace.path() / "lib" / "c.js",
    ]
    assert {entry.destination for entry in table.copies} == {config.build_path / "assets"}
    assert table.includes == ("assets/b.js", "assets/c.js")


def test_external_without_facets_is_ignored_with_warning(
    workspace: WorkspaceBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    workspace.descriptor({"externals": {"ghost": {}}})
    config = load_project_config(workspace.path())

    logger = logging.getLogger("spaplan")
    logger.propagate = True
    with caplog.at_level(logging.WARNING, logger="spaplan.externals"):
        table = resolve_externals(config)

    assert dict(table.aliases) == {}
    assert table.copies == ()
    assert "ghost" in caplog.text


def test_missing_vendor_file_is_not_checked_at_plan_time(workspace: WorkspaceBuilder) -> None:
    workspace.descriptor({"externals": {"gone": {"path": "vendor/gone.js"}}})
    config = load_project_config(workspace.path())

    table = resolve_externals(config)

    assert table.includes == ("assets/gone.js",)


def test_copy_vendor_assets_writes_into_assets_dir(workspace: WorkspaceBuilder) -> None:
    workspace.write({"vendor/jquery.min.js": "/* jquery */\n"})
    workspace.descriptor({"externals": {"jquery": {"alias": "jQuery", "path": "vendor/jquery.min.js"}}})
    config = load_project_config(workspace.path())

    written = copy_vendor_assets(resolve_externals(config))

    target = config.build_path / "assets" / "jquery.min.js"
    assert written == [target]
    assert target.read_text(encoding="utf-8") == "/* jquery */\n"


def test_copy_vendor_assets_fails_on_missing_source(workspace: WorkspaceBuilder) -> None:
    workspace.descriptor({"externals": {"gone": {"path": "vendor/gone.js"}}})
    config = load_project_config(workspace.path())

    with pytest.raises(VendorCopyError) as excinfo:
        copy_vendor_assets(resolve_externals(config))

    assert excinfo.value.source == workspace.path() / "vendor" / "gone.js"

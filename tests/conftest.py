from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.workspace_builder import WorkspaceBuilder


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a workspace builder with two pages and an empty descriptor."""
    builder = WorkspaceBuilder(tmp_path)
    builder.page("index")
    builder.page("about")
    builder.descriptor({})
    return builder

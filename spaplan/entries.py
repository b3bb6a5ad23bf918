"""Per-page entry construction."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Optional, Sequence, Tuple

from .config import ProjectConfig
from .errors import CollisionError, ConfigurationError, ResolutionError
from .logging import get_logger
from .models import DEVELOPMENT, EntryGraph
from .pages import Page

REACT_HOT_LOADER_PATCH = "react-hot-loader/patch"

_logger = get_logger("entries")


def hot_reload_prefix(
    config: ProjectConfig,
    *,
    port: int,
    modules_path: Path,
) -> Tuple[str, ...]:
    """Return the development bootstrap modules, in load order."""
    prefix = []
    if config.hot_reload and config.framework == "react":
        prefix.append(REACT_HOT_LOADER_PATCH)
    prefix.append(f"{(modules_path / 'webpack-dev-server' / 'client').as_posix()}?http://localhost:{port}")
    prefix.append((modules_path / "webpack" / "hot" / "dev-server").as_posix())
    return tuple(prefix)


def page_script(config: ProjectConfig, page: Page) -> Path:
    """Return the script backing ``page``, which must exist."""
    script = config.pages_root / f"{page.name}.js"
    if not script.is_file():
        raise ResolutionError(script, f"Page script for '{page.name}' not found: {script}")
    return script


def build_entries(
    pages: Sequence[Page],
    config: ProjectConfig,
    mode: str,
    *,
    port: Optional[int],
    modules_path: Path,
) -> EntryGraph:
    """Return one ordered module list per page.

    Development entries start with the hot-reload bootstrap modules so the
    dev-server client and hot runtime initialise before the page code runs.
    Production entries hold only the page script.
    """
    prefix: Tuple[str, ...] = ()
    if mode == DEVELOPMENT:
        if port is None:
            raise ConfigurationError("A dev-server port is required in development mode")
        prefix = hot_reload_prefix(config, port=port, modules_path=modules_path)

    entries: Dict[str, Tuple[str, ...]] = {}
    for page in pages:
        if page.name in entries:
            raise CollisionError(
                page.name, f"Templates for page '{page.name}' resolve to the same entry"
            )
        script = page_script(config, page)
        entries[page.name] = prefix + (script.as_posix(),)

    _logger.debug("Built %d page entries (%s)", len(entries), mode)
    return MappingProxyType(entries)


__all__ = ["REACT_HOT_LOADER_PATCH", "build_entries", "hot_reload_prefix", "page_script"]

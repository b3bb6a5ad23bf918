"""Shared-library chunk planning."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Tuple

from .config import ProjectConfig
from .errors import CollisionError, ResolutionError
from .logging import get_logger
from .models import INFINITY, ChunkDirective, EntryGraph

LIBRARY_PREFIX = "assets/"
COMMONS_CHUNK = "assets/commonLibs"

_logger = get_logger("libraries")


@dataclass(frozen=True)
class LibraryPlan:
    """Library entries and their extraction directives, in declaration order."""

    entries: EntryGraph
    directives: Tuple[ChunkDirective, ...]

    @property
    def chunk_names(self) -> Tuple[str, ...]:
        return tuple(self.entries)


def library_entry_name(group: str) -> str:
    return f"{LIBRARY_PREFIX}{group}"


def plan_libraries(config: ProjectConfig) -> LibraryPlan:
    """Resolve every library group into an entry plus a dedicated chunk directive."""
    entries: Dict[str, Tuple[str, ...]] = {}
    directives = []
    for group, files in config.libraries.items():
        name = library_entry_name(group)
        if name == COMMONS_CHUNK:
            raise CollisionError(name, f"Library group '{group}' collides with {COMMONS_CHUNK}")

        resolved = []
        for file in files:
            path = (config.source_root / file).resolve()
            if not path.is_file():
                raise ResolutionError(path, f"Library '{group}' file not found: {path}")
            resolved.append(path.as_posix())

        entries[name] = tuple(resolved)
        directives.append(ChunkDirective(name=name, members=(name,), min_chunks=INFINITY))
        _logger.debug("Library %s resolved %d files", name, len(resolved))

    return LibraryPlan(entries=MappingProxyType(entries), directives=tuple(directives))


def commons_directive(page_names: Iterable[str]) -> ChunkDirective:
    """Return the catch-all chunk shared by every page entry.

    It must be declared after the library directives so modules already
    committed to a library chunk are not captured again.
    """
    return ChunkDirective(name=COMMONS_CHUNK, members=tuple(page_names))


def merge_entries(pages: EntryGraph, libraries: EntryGraph) -> EntryGraph:
    """Combine page and library entries, rejecting duplicate names."""
    merged: Dict[str, Tuple[str, ...]] = dict(pages)
    for name, modules in libraries.items():
        if name in merged:
            raise CollisionError(name)
        merged[name] = modules
    if COMMONS_CHUNK in merged:
        raise CollisionError(COMMONS_CHUNK)
    return MappingProxyType(merged)


__all__ = [
    "COMMONS_CHUNK",
    "LibraryPlan",
    "commons_directive",
    "library_entry_name",
    "merge_entries",
    "plan_libraries",
]

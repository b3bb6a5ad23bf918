"""Externals resolution: import aliases and vendored copies."""

from __future__ import annotations

import posixpath
import shutil
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List

from .config import ProjectConfig
from .errors import VendorCopyError
from .logging import get_logger
from .models import CopyEntry, ExternalsTable

ASSETS_DIR = "assets"

_logger = get_logger("externals")


def resolve_externals(config: ProjectConfig) -> ExternalsTable:
    """Split declared externals into aliases, copies and manual includes.

    ``alias`` and ``path`` are independent: one dependency may be both
    aliased to a global and copied from a vendor file. Vendor files are not
    checked here; a missing file fails at copy time.
    """
    aliases: Dict[str, str] = {}
    copies: List[CopyEntry] = []
    includes: List[str] = []
    destination = config.build_path / ASSETS_DIR

    for name, spec in config.externals.items():
        if spec.alias is None and spec.vendor_path is None:
            _logger.warning("External '%s' declares neither alias nor path; ignoring it", name)
            continue
        if spec.alias is not None:
            aliases[name] = spec.alias
        if spec.vendor_path is not None:
            copies.append(CopyEntry(source=config.workspace / spec.vendor_path, destination=destination))
            includes.append(posixpath.join(ASSETS_DIR, posixpath.basename(spec.vendor_path)))

    _logger.debug("Resolved %d aliases and %d vendored files", len(aliases), len(copies))
    return ExternalsTable(
        aliases=MappingProxyType(aliases),
        copies=tuple(copies),
        includes=tuple(includes),
    )


def copy_vendor_assets(table: ExternalsTable) -> List[Path]:
    """Copy every vendored external into the output assets directory.

    Any I/O failure aborts the copy with ``VendorCopyError``.
    """
    written: List[Path] = []
    for entry in table.copies:
        if not entry.source.is_file():
            raise VendorCopyError(entry.source, "file does not exist")
        try:
            entry.destination.mkdir(parents=True, exist_ok=True)
            target = entry.destination / entry.source.name
            shutil.copy2(entry.source, target)
        except OSError as exc:
            raise VendorCopyError(entry.source, str(exc)) from exc
        _logger.debug("Copied %s -> %s", entry.source, target)
        written.append(target)
    return written


__all__ = ["ASSETS_DIR", "copy_vendor_assets", "resolve_externals"]

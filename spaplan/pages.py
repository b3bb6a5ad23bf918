"""Page template discovery."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .errors import ResolutionError
from .logging import get_logger

_TEMPLATE_SUFFIX = re.compile(r"\.html?$")


@dataclass(frozen=True)
class Page:
    """A page template and the entry name derived from it."""

    template: str
    name: str


def page_name(template: str) -> str:
    """Strip the ``.htm``/``.html`` extension from a template filename."""
    return _TEMPLATE_SUFFIX.sub("", template)


class PageScanner:
    """Lists the page templates that live directly under the pages root."""

    def __init__(self) -> None:
        self.logger = get_logger("pages")

    def scan(self, root: Path | str) -> List[Page]:
        """Return discovered pages ordered by template filename."""
        root_path = Path(root)
        if not root_path.is_dir():
            raise ResolutionError(root_path, f"Pages directory not found: {root_path}")

        templates = sorted(
            entry.name
            for entry in root_path.iterdir()
            if entry.is_file() and _TEMPLATE_SUFFIX.search(entry.name)
        )
        self.logger.debug("Discovered %d page templates under %s", len(templates), root_path)
        return [Page(template=template, name=page_name(template)) for template in templates]


def discover_pages(root: Path | str) -> List[Page]:
    return PageScanner().scan(root)


__all__ = ["Page", "PageScanner", "discover_pages", "page_name"]

"""Base classes for loader factories."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from ..config import ProjectConfig
from ..models import Directive, RuleDescriptor


@dataclass(frozen=True)
class LoaderContext:
    """Inputs shared by every loader factory."""

    is_dev: bool
    browsers: str
    modules_path: Path
    config: ProjectConfig


@dataclass(frozen=True)
class LoaderOutput:
    rules: Tuple[RuleDescriptor, ...] = ()
    plugins: Tuple[Directive, ...] = field(default_factory=tuple)


class LoaderFactory(ABC):
    """Contract for factories that contribute module rules to the graph."""

    @abstractmethod
    def build(self, context: LoaderContext) -> LoaderOutput:
        """Return the rules (and any companion plugins) for this file type."""

"""Error types raised while assembling a build graph."""

from __future__ import annotations

from pathlib import Path


class PlanError(RuntimeError):
    """Base class for fatal build-planning failures."""


class ConfigurationError(PlanError):
    """Raised when the project descriptor is malformed or incomplete."""


class ResolutionError(PlanError):
    """Raised when a declared page or library source file does not exist."""

    def __init__(self, path: Path | str, message: str | None = None) -> None:
        self.path = Path(path)
        super().__init__(message or f"Source file not found: {self.path}")


class CollisionError(PlanError):
    """Raised when two entries or chunks resolve to the same key."""

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"Duplicate entry or chunk name: {key}")


class VendorCopyError(PlanError):
    """Raised when a vendored external cannot be copied into the build output."""

    def __init__(self, source: Path | str, reason: str) -> None:
        self.source = Path(source)
        super().__init__(f"Failed to copy vendored asset {self.source}: {reason}")


__all__ = [
    "CollisionError",
    "ConfigurationError",
    "PlanError",
    "ResolutionError",
    "VendorCopyError",
]

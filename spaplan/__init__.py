"""Build-graph planning for multi-page bundler projects."""

from .errors import CollisionError, ConfigurationError, PlanError, ResolutionError, VendorCopyError
from .planner import BuildOptions, Planner, build_config

__all__ = [
    "BuildOptions",
    "CollisionError",
    "ConfigurationError",
    "PlanError",
    "Planner",
    "ResolutionError",
    "VendorCopyError",
    "build_config",
]

"""Build graph assembly for development and production runs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .config import ProjectConfig, load_project_config
from .entries import build_entries
from .errors import ConfigurationError
from .externals import copy_vendor_assets, resolve_externals
from .libraries import merge_entries, plan_libraries
from .loaders import LoaderContext, LoaderFactory, build_rules, discover_loaders
from .logging import get_logger
from .models import DEVELOPMENT, MODES, BuildGraph
from .pages import PageScanner
from .plugins import RuntimeFlags, assemble_plugins
from .precache import configure_precache

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class BuildOptions:
    """Per-invocation options that are not part of the project descriptor."""

    port: Optional[int] = None
    modules_path: Optional[Path] = None
    environ: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    __hash__ = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BuildOptions":
        port = data.get("port")
        if port is not None and (isinstance(port, bool) or not isinstance(port, int)):
            raise ConfigurationError("port must be an integer")
        modules_path = data.get("modules_path")
        environ = data.get("environ") or {}
        return cls(
            port=port,
            modules_path=Path(modules_path) if modules_path else None,
            environ=MappingProxyType(dict(environ)),
        )


OptionsLike = Union[BuildOptions, Mapping[str, Any], None]


def runtime_flags(mode: str, environ: Mapping[str, str]) -> RuntimeFlags:
    node_env = environ.get("NODE_ENV") or mode
    debug = environ.get("DEBUG", "").strip().lower() in _TRUTHY
    return RuntimeFlags(node_env=node_env, debug=debug)


class Planner:
    """Coordinates the planning components into one build graph."""

    def __init__(
        self,
        page_scanner: PageScanner | None = None,
        loaders: Optional[Iterable[LoaderFactory]] = None,
    ) -> None:
        self.page_scanner = page_scanner or PageScanner()
        self._loader_overrides = list(loaders) if loaders is not None else None
        self.logger = get_logger("planner")

    def plan(
        self,
        mode: str = DEVELOPMENT,
        options: OptionsLike = None,
        *,
        workspace: Path | str | None = None,
    ) -> BuildGraph:
        """Return the build graph for ``workspace`` in ``mode``."""
        if mode not in MODES:
            raise ConfigurationError(f"Unknown mode {mode!r}; expected one of {', '.join(MODES)}")
        build_options = _coerce_options(options)
        root = Path(workspace) if workspace is not None else Path.cwd()
        self.logger.info("Planning %s build for %s", mode, root)

        config = load_project_config(root)
        return self.plan_config(config, mode, build_options)

    def plan_config(self, config: ProjectConfig, mode: str, options: BuildOptions) -> BuildGraph:
        """Assemble a graph from an already merged configuration."""
        is_dev = mode == DEVELOPMENT
        modules_path = options.modules_path or config.workspace / "node_modules"
        browsers = config.browsers_for(mode)

        pages = self.page_scanner.scan(config.pages_root)
        page_entries = build_entries(
            pages, config, mode, port=options.port, modules_path=modules_path
        )
        libraries = plan_libraries(config)
        entry = merge_entries(page_entries, libraries.entries)
        externals = resolve_externals(config)
        precache = configure_precache(config.offline_cache)

        context = LoaderContext(
            is_dev=is_dev, browsers=browsers, modules_path=modules_path, config=config
        )
        loader_output = build_rules(self._select_loaders(config), context)

        plugins = assemble_plugins(
            mode=mode,
            config=config,
            pages=pages,
            libraries=libraries,
            externals=externals,
            flags=runtime_flags(mode, options.environ),
            loader_plugins=loader_output.plugins,
            precache=precache,
        )

        output: Dict[str, Any] = {"path": config.build_path.as_posix(), "pathinfo": is_dev}
        if not is_dev:
            output["filename"] = "[name].[chunkhash:8].js"

        self.logger.debug(
            "Graph has %d entries, %d rules and %d directives",
            len(entry),
            len(loader_output.rules),
            len(plugins),
        )
        return BuildGraph(
            mode=mode,
            entry=entry,
            output=MappingProxyType(output),
            rules=loader_output.rules,
            externals=externals.aliases,
            plugins=plugins,
            devtool="cheap-module-source-map" if is_dev else "source-map",
            resolve_loader=MappingProxyType({"modules": (modules_path.as_posix(),)}),
        )

    def copy_externals(self, workspace: Path | str | None = None) -> List[Path]:
        """Copy vendored externals into the build output directory."""
        root = Path(workspace) if workspace is not None else Path.cwd()
        config = load_project_config(root)
        written = copy_vendor_assets(resolve_externals(config))
        self.logger.info("Copied %d vendored assets into %s", len(written), config.build_path)
        return written

    def _select_loaders(self, config: ProjectConfig) -> List[LoaderFactory]:
        if self._loader_overrides is not None:
            return list(self._loader_overrides)
        try:
            return discover_loaders(config.loaders)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc


def build_config(
    mode: str = DEVELOPMENT,
    options: OptionsLike = None,
    *,
    workspace: Path | str | None = None,
) -> BuildGraph:
    """Build the graph for ``mode``; each call loads a fresh configuration."""
    return Planner().plan(mode, options, workspace=workspace)


def default_options(port: Optional[int] = None) -> BuildOptions:
    """Options for command-line and service callers, reading the process environment."""
    return BuildOptions(port=port, environ=MappingProxyType(dict(os.environ)))


def _coerce_options(options: OptionsLike) -> BuildOptions:
    if options is None:
        return BuildOptions()
    if isinstance(options, BuildOptions):
        return options
    return BuildOptions.from_mapping(options)


__all__ = ["BuildOptions", "Planner", "build_config", "default_options", "runtime_flags"]

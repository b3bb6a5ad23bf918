"""Mode-dependent plugin pipeline assembly."""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

from .config import ProjectConfig
from .libraries import COMMONS_CHUNK, LibraryPlan, commons_directive
from .logging import get_logger
from .models import (
    DEVELOPMENT,
    ChunkHashDirective,
    CopyDirective,
    DefineDirective,
    Directive,
    ExternalsTable,
    HashedModuleIdsDirective,
    HotModuleReplacementDirective,
    HtmlEmitDirective,
    IncludeAssetsDirective,
    MinChunkSizeDirective,
    ModuleConcatenationDirective,
    NamedModulesDirective,
)
from .pages import Page

MIN_CHUNK_SIZE = 50000

HTML_MINIFY_OPTIONS: Mapping[str, bool] = MappingProxyType(
    {
        "removeComments": True,
        "collapseWhitespace": True,
        "removeRedundantAttributes": True,
        "useShortDoctype": True,
        "removeEmptyAttributes": False,
        "removeStyleLinkTypeAttributes": True,
        "keepClosingSlash": True,
        "minifyJS": True,
        "minifyCSS": True,
        "minifyURLs": True,
    }
)

_logger = get_logger("plugins")


@dataclass(frozen=True)
class RuntimeFlags:
    """Values baked into the bundle through the define directive."""

    node_env: str
    debug: bool


def base_directives() -> Tuple[Directive, ...]:
    return (ModuleConcatenationDirective(), MinChunkSizeDirective(min_chunk_size=MIN_CHUNK_SIZE))


def mode_directives(mode: str) -> Tuple[Directive, ...]:
    """Readable module names and hot replacement in development, stable hashes otherwise."""
    if mode == DEVELOPMENT:
        return (NamedModulesDirective(), HotModuleReplacementDirective())
    return (HashedModuleIdsDirective(), ChunkHashDirective())


def html_directives(
    pages: Sequence[Page],
    config: ProjectConfig,
    mode: str,
    library_chunks: Sequence[str],
) -> Tuple[HtmlEmitDirective, ...]:
    """Return one HTML emission directive per page.

    Chunks load as libraries, then shared code, then the page itself.
    """
    minify = False if mode == DEVELOPMENT else HTML_MINIFY_OPTIONS
    return tuple(
        HtmlEmitDirective(
            filename=page.template,
            template=(config.pages_root / page.template).as_posix(),
            inject=config.html_inject,
            chunks=tuple(library_chunks) + (COMMONS_CHUNK, page.name),
            minify=minify,
        )
        for page in pages
    )


def externals_directives(table: ExternalsTable) -> Tuple[Directive, ...]:
    return (
        CopyDirective(patterns=table.copies),
        IncludeAssetsDirective(assets=table.includes, append=False),
    )


def chunk_directives(libraries: LibraryPlan, pages: Sequence[Page]) -> Tuple[Directive, ...]:
    return libraries.directives + (commons_directive(page.name for page in pages),)


def define_directive(flags: RuntimeFlags) -> DefineDirective:
    return DefineDirective(
        definitions=MappingProxyType(
            {
                "process.env.NODE_ENV": json.dumps(flags.node_env),
                "process.env.DEBUG": json.dumps(flags.debug),
            }
        )
    )


def assemble_plugins(
    *,
    mode: str,
    config: ProjectConfig,
    pages: Sequence[Page],
    libraries: LibraryPlan,
    externals: ExternalsTable,
    flags: RuntimeFlags,
    loader_plugins: Sequence[Directive] = (),
    precache: Sequence[Directive] = (),
) -> Tuple[Directive, ...]:
    """Return the ordered directive pipeline for ``mode``.

    The result depends only on the arguments, so equal inputs always give an
    identical pipeline.
    """
    pipeline = (
        base_directives()
        + mode_directives(mode)
        + html_directives(pages, config, mode, libraries.chunk_names)
        + tuple(loader_plugins)
        + externals_directives(externals)
        + chunk_directives(libraries, pages)
        + (define_directive(flags),)
        + tuple(precache)
    )
    _logger.debug("Assembled %d directives for %s", len(pipeline), mode)
    return pipeline


__all__ = [
    "HTML_MINIFY_OPTIONS",
    "MIN_CHUNK_SIZE",
    "RuntimeFlags",
    "assemble_plugins",
    "base_directives",
    "chunk_directives",
    "define_directive",
    "externals_directives",
    "html_directives",
    "mode_directives",
]

"""Core data models shared across spaplan components."""

from __future__ import annotations

import hashlib
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from re import Pattern
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

DEVELOPMENT = "development"
PRODUCTION = "production"
MODES = (DEVELOPMENT, PRODUCTION)

INFINITY = math.inf
# Bundler default for a commons chunk: a module must occur in every member entry.
ALL_MEMBERS = "all-referencing-entries"

EntryGraph = Mapping[str, Tuple[str, ...]]


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of JSON-like data."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def plain(value: Any) -> Any:
    """Convert frozen or rich values back into JSON-serialisable data."""
    if isinstance(value, Mapping):
        return {str(key): plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain(item) for item in value]
    if isinstance(value, Pattern):
        return value.pattern
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, float) and math.isinf(value):
        return "Infinity"
    return value


@dataclass(frozen=True)
class ExternalSpec:
    """A dependency provided outside the bundle."""

    alias: Optional[str] = None
    vendor_path: Optional[str] = None


@dataclass(frozen=True)
class OfflineCachePolicy:
    """Merged service-worker precache policy."""

    enabled: bool = False
    url_prefix: str = "/"
    ignore_patterns: Tuple[Union[str, Pattern[str]], ...] = ()
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    # Instances hold read-only mappings and are compared by value only.
    __hash__ = None


@dataclass(frozen=True)
class CopyEntry:
    source: Path
    destination: Path

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.source.as_posix(), "to": self.destination.as_posix()}


@dataclass(frozen=True)
class ExternalsTable:
    """Alias table, copy manifest and manual-include list for externals."""

    aliases: Mapping[str, str]
    copies: Tuple[CopyEntry, ...]
    includes: Tuple[str, ...]

    __hash__ = None


@dataclass(frozen=True)
class LoaderUse:
    loader: str
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    __hash__ = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"loader": self.loader}
        if self.options:
            payload["options"] = plain(self.options)
        return payload


@dataclass(frozen=True)
class RuleDescriptor:
    """A module rule produced by a loader factory."""

    test: str
    use: Tuple[LoaderUse, ...]
    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    __hash__ = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "test": self.test,
            "use": [item.to_dict() for item in self.use],
        }
        if self.include:
            payload["include"] = list(self.include)
        if self.exclude:
            payload["exclude"] = list(self.exclude)
        return payload


@dataclass(frozen=True)
class Directive:
    """Tagged build directive interpreted by the bundler adapter."""

    kind: ClassVar[str] = "directive"

    def options(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "options": plain(self.options())}


@dataclass(frozen=True)
class ModuleConcatenationDirective(Directive):
    kind: ClassVar[str] = "module-concatenation"


@dataclass(frozen=True)
class MinChunkSizeDirective(Directive):
    kind: ClassVar[str] = "min-chunk-size"

    min_chunk_size: int = 50000

    def options(self) -> Dict[str, Any]:
        return {"minChunkSize": self.min_chunk_size}


@dataclass(frozen=True)
class NamedModulesDirective(Directive):
    kind: ClassVar[str] = "named-modules"


@dataclass(frozen=True)
class HotModuleReplacementDirective(Directive):
    kind: ClassVar[str] = "hot-module-replacement"


@dataclass(frozen=True)
class HashedModuleIdsDirective(Directive):
    kind: ClassVar[str] = "hashed-module-ids"


@dataclass(frozen=True)
class ChunkHashDirective(Directive):
    kind: ClassVar[str] = "chunk-hash"


@dataclass(frozen=True)
class HtmlEmitDirective(Directive):
    """Emit one HTML page with its ordered chunk list."""

    kind: ClassVar[str] = "html-emit"

    filename: str = ""
    template: str = ""
    inject: Union[bool, str] = True
    chunks: Tuple[str, ...] = ()
    minify: Union[bool, Mapping[str, bool]] = False
    chunks_sort_mode: str = "auto"

    __hash__ = None

    def options(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "template": self.template,
            "inject": self.inject,
            "chunksSortMode": self.chunks_sort_mode,
            "chunks": list(self.chunks),
            "minify": self.minify,
        }


@dataclass(frozen=True)
class ExtractCssDirective(Directive):
    kind: ClassVar[str] = "extract-css"

    filename: str = "[name].[contenthash:8].css"
    all_chunks: bool = True

    def options(self) -> Dict[str, Any]:
        return {"filename": self.filename, "allChunks": self.all_chunks}


@dataclass(frozen=True)
class CopyDirective(Directive):
    """Copy vendored externals verbatim into the build output."""

    kind: ClassVar[str] = "copy"

    patterns: Tuple[CopyEntry, ...] = ()

    def options(self) -> Dict[str, Any]:
        return {"patterns": [entry.to_dict() for entry in self.patterns]}


@dataclass(frozen=True)
class IncludeAssetsDirective(Directive):
    """Inject tags for assets the bundler's dependency graph cannot see."""

    kind: ClassVar[str] = "include-assets"

    assets: Tuple[str, ...] = ()
    append: bool = False

    def options(self) -> Dict[str, Any]:
        return {"assets": list(self.assets), "append": self.append}


@dataclass(frozen=True)
class ChunkDirective(Directive):
    """Extract modules referenced by ``members`` into the chunk ``name``."""

    kind: ClassVar[str] = "chunk"

    name: str = ""
    members: Tuple[str, ...] = ()
    min_chunks: Union[int, float, str] = ALL_MEMBERS

    def options(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name, "chunks": list(self.members)}
        if self.min_chunks != ALL_MEMBERS:
            payload["minChunks"] = self.min_chunks
        return payload


@dataclass(frozen=True)
class DefineDirective(Directive):
    """Bake literal values into the bundled output."""

    kind: ClassVar[str] = "define"

    definitions: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    __hash__ = None

    def options(self) -> Dict[str, Any]:
        return dict(self.definitions)


@dataclass(frozen=True)
class PrecacheDirective(Directive):
    kind: ClassVar[str] = "precache-manifest"

    settings: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    ignore_patterns: Tuple[Pattern[str], ...] = ()

    __hash__ = None

    def options(self) -> Dict[str, Any]:
        payload = dict(self.settings)
        payload["staticFileGlobsIgnorePatterns"] = list(self.ignore_patterns)
        return payload


@dataclass(frozen=True)
class ServiceWorkerRegisterDirective(Directive):
    kind: ClassVar[str] = "sw-register"

    file_path: str = "./sw-register.js"
    prefix: str = "/"

    def options(self) -> Dict[str, Any]:
        return {"filePath": self.file_path, "prefix": self.prefix}


@dataclass(frozen=True)
class BuildGraph:
    """Finished build graph handed to the bundler."""

    mode: str
    entry: EntryGraph
    output: Mapping[str, Any]
    rules: Tuple[RuleDescriptor, ...]
    externals: Mapping[str, str]
    plugins: Tuple[Directive, ...]
    devtool: str
    resolve_loader: Mapping[str, Any]
    target: str = "web"

    __hash__ = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry": {name: list(modules) for name, modules in self.entry.items()},
            "output": plain(self.output),
            "module": {"rules": [rule.to_dict() for rule in self.rules]},
            "externals": dict(self.externals),
            "target": self.target,
            "devtool": self.devtool,
            "resolveLoader": plain(self.resolve_loader),
            "plugins": [directive.to_dict() for directive in self.plugins],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def fingerprint(self) -> str:
        """Return a digest of the order-preserving graph rendering."""
        payload = json.dumps(self.to_dict(), separators=(",", ":"))
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def directives(self, kind: str) -> List[Directive]:
        return [directive for directive in self.plugins if directive.kind == kind]

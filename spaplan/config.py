"""Project descriptor loading and merging (defaults.yml + abc.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .errors import CollisionError, ConfigurationError
from .logging import get_logger
from .models import ExternalSpec, OfflineCachePolicy
from .precache import merge_policy, policy_from_mapping

DESCRIPTOR_FILENAME = "abc.json"
DEFAULTS_PATH = Path(__file__).with_name("defaults.yml")

SERVICE_WORKER_KEY = "serviceWorkConf"

_logger = get_logger("config")


@dataclass(frozen=True)
class ProjectConfig:
    """Effective, read-only project settings for one planning run."""

    workspace: Path
    build_path: Path
    libraries: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    externals: Mapping[str, ExternalSpec] = field(default_factory=lambda: MappingProxyType({}))
    browser_support: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    public_path: str = "/"
    html_inject: Union[bool, str] = True
    hot_reload: bool = False
    framework: Optional[str] = None
    base64_limit: int = 8192
    offline_cache: OfflineCachePolicy = field(default_factory=OfflineCachePolicy)
    loaders: Optional[Tuple[str, ...]] = None

    __hash__ = None

    @property
    def source_root(self) -> Path:
        return self.workspace / "src"

    @property
    def pages_root(self) -> Path:
        return self.source_root / "app"

    def browsers_for(self, mode: str) -> str:
        """Return the browser-support query for ``mode``."""
        key = mode.upper()
        try:
            return self.browser_support[key]
        except KeyError:
            raise ConfigurationError(f"browser_support has no entry for {key}") from None


def load_project_config(
    workspace: Path | str,
    *,
    defaults_path: Path | None = None,
) -> ProjectConfig:
    """Load defaults and the workspace descriptor into a fresh ProjectConfig."""
    root = Path(workspace).expanduser().resolve()
    defaults = load_defaults(defaults_path or DEFAULTS_PATH)
    override = read_descriptor(root / DESCRIPTOR_FILENAME)
    merged = merge_descriptors(defaults, override)
    _logger.debug("Merged descriptor keys: %s", ", ".join(sorted(merged)))
    return build_project_config(root, merged)


def load_defaults(path: Path) -> Dict[str, Any]:
    """Read the packaged default descriptor."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read default descriptor {path}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the root")
    return loaded


def read_descriptor(path: Path) -> Dict[str, Any]:
    """Read the workspace descriptor JSON document."""
    if not path.exists():
        raise ConfigurationError(f"Project descriptor not found: {path}")
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"), object_pairs_hook=_unique_keys)
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path.name} must contain an object at the root")
    return loaded


def _unique_keys(pairs: list[tuple[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise CollisionError(key, f"Duplicate key {key!r} in {DESCRIPTOR_FILENAME}")
        result[key] = value
    return result


def merge_descriptors(default: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge two descriptors into a new mapping; override wins per top-level key.

    The service worker policy is merged one level deeper so that a partial
    override keeps the remaining default policy fields.
    """
    merged: Dict[str, Any] = dict(default)
    merged.update(override)
    merged[SERVICE_WORKER_KEY] = merge_policy(
        _as_dict(default.get(SERVICE_WORKER_KEY), SERVICE_WORKER_KEY),
        _as_dict(override.get(SERVICE_WORKER_KEY), SERVICE_WORKER_KEY),
    )
    return merged


def build_project_config(workspace: Path, data: Mapping[str, Any]) -> ProjectConfig:
    """Validate a merged descriptor and freeze it into a ProjectConfig."""
    build_path_str = _as_str(data.get("build_path"), "build_path")
    if not build_path_str:
        raise ConfigurationError("build_path is required")

    browser_support = {
        str(mode).upper(): _as_query(query, f"browser_support.{mode}")
        for mode, query in _as_dict(data.get("browser_support"), "browser_support").items()
    }

    libraries = {
        str(name): tuple(_as_str_list(files, f"libiary.{name}"))
        for name, files in _as_dict(data.get("libiary"), "libiary").items()
    }

    externals = {
        str(name): _as_external(spec, str(name))
        for name, spec in _as_dict(data.get("externals"), "externals").items()
    }

    html_inject = data.get("htmlAssetsInject", True)
    if not isinstance(html_inject, (bool, str)):
        raise ConfigurationError("htmlAssetsInject must be a boolean or 'head'/'body'")

    base64_limit = data.get("base64", 8192)
    if isinstance(base64_limit, bool) or not isinstance(base64_limit, int):
        raise ConfigurationError("base64 must be an integer byte limit")

    return ProjectConfig(
        workspace=workspace,
        build_path=(workspace / build_path_str).resolve(),
        libraries=MappingProxyType(libraries),
        externals=MappingProxyType(externals),
        browser_support=MappingProxyType(browser_support),
        public_path=_as_str(data.get("publicPath"), "publicPath") or "/",
        html_inject=html_inject,
        hot_reload=_as_bool(data.get("enableReactHotLoader"), "enableReactHotLoader"),
        framework=_as_str(data.get("framework"), "framework"),
        base64_limit=base64_limit,
        offline_cache=policy_from_mapping(
            _as_dict(data.get(SERVICE_WORKER_KEY), SERVICE_WORKER_KEY)
        ),
        loaders=_as_loader_names(data.get("loaders")),
    )


def _as_external(value: Any, name: str) -> ExternalSpec:
    spec = _as_dict(value, f"externals.{name}")
    vendor_path = spec.get("path", spec.get("vendorPath"))
    return ExternalSpec(
        alias=_as_str(spec.get("alias"), f"externals.{name}.alias"),
        vendor_path=_as_str(vendor_path, f"externals.{name}.path"),
    )


def _as_loader_names(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ConfigurationError("loaders must be a list of loader names")


def _as_dict(value: Any, label: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{label} must be a mapping")
    return dict(value)


def _as_str(value: Any, label: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{label} must be a string")
    return value


def _as_bool(value: Any, label: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigurationError(f"{label} must be a boolean")
    return value


def _as_query(value: Any, label: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return ", ".join(value)
    raise ConfigurationError(f"{label} must be a browserslist query string")


def _as_str_list(value: Any, label: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigurationError(f"{label} must be a list of file paths")


__all__ = [
    "DESCRIPTOR_FILENAME",
    "ProjectConfig",
    "build_project_config",
    "load_defaults",
    "load_project_config",
    "merge_descriptors",
    "read_descriptor",
]

"""Loader factory implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from .assets import FileLoaderFactory, MarkupLoaderFactory, SvgLoaderFactory
from .base import LoaderContext, LoaderFactory, LoaderOutput
from .scripts import ScriptLoaderFactory
from .styles import StyleImageLoaderFactory

_ENTRY_POINT_GROUP = "spaplan.loaders"

# Order here is the order of ``module.rules`` in the build graph.
_BUILTIN_FACTORIES: dict[str, Callable[[], LoaderFactory]] = {
    "scripts": ScriptLoaderFactory,
    "styles": StyleImageLoaderFactory,
    "markup": MarkupLoaderFactory,
    "files": FileLoaderFactory,
    "svg": SvgLoaderFactory,
}


def discover_loaders(enabled: Sequence[str] | None = None) -> List[LoaderFactory]:
    """Return instantiated loader factories, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    factories: List[LoaderFactory] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], LoaderFactory]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, LoaderFactory):
            raise TypeError(f"Loader factory '{name}' did not return a LoaderFactory instance")
        factories.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load loader entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> LoaderFactory:
            return _coerce_factory(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown loaders requested: {missing}")

    return factories


def build_rules(factories: Iterable[LoaderFactory], context: LoaderContext) -> LoaderOutput:
    """Run factories in order and concatenate their rules and plugins."""
    rules = []
    plugins = []
    for factory in factories:
        output = factory.build(context)
        rules.extend(output.rules)
        plugins.extend(output.plugins)
    return LoaderOutput(rules=tuple(rules), plugins=tuple(plugins))


def _coerce_factory(obj: object) -> LoaderFactory:
    if isinstance(obj, LoaderFactory):
        return obj
    if isinstance(obj, type) and issubclass(obj, LoaderFactory):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, LoaderFactory):
            return instance
    raise TypeError("Loader entry point must be a LoaderFactory subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "LoaderContext",
    "LoaderFactory",
    "LoaderOutput",
    "build_rules",
    "discover_loaders",
]

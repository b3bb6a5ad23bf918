"""Offline precache (service worker) configuration."""

from __future__ import annotations

import re
from re import Pattern
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from .errors import ConfigurationError
from .logging import get_logger
from .models import (
    Directive,
    OfflineCachePolicy,
    PrecacheDirective,
    ServiceWorkerRegisterDirective,
    freeze,
)

REGISTER_SCRIPT_PATH = "./sw-register.js"

_ENABLE_KEY = "enable"
_PREFIX_KEY = "prefix"
_IGNORE_KEY = "staticFileGlobsIgnorePatterns"

_logger = get_logger("precache")


def merge_policy(default: Mapping[str, Any] | None, override: Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a new policy mapping where override values win per key."""
    merged: Dict[str, Any] = {}
    merged.update(default or {})
    merged.update(override or {})
    return merged


def policy_from_mapping(data: Mapping[str, Any]) -> OfflineCachePolicy:
    """Split a raw ``serviceWorkConf`` mapping into an ``OfflineCachePolicy``."""
    enabled = data.get(_ENABLE_KEY, False)
    if not isinstance(enabled, bool):
        raise ConfigurationError("serviceWorkConf.enable must be a boolean")

    prefix = data.get(_PREFIX_KEY, "/")
    if not isinstance(prefix, str):
        raise ConfigurationError("serviceWorkConf.prefix must be a string")

    patterns = data.get(_IGNORE_KEY) or []
    if isinstance(patterns, str):
        patterns = [patterns]
    if not isinstance(patterns, (list, tuple)) or not all(
        isinstance(item, (str, Pattern)) for item in patterns
    ):
        raise ConfigurationError(f"serviceWorkConf.{_IGNORE_KEY} must be a list of strings")

    passthrough = {
        key: value
        for key, value in data.items()
        if key not in {_ENABLE_KEY, _PREFIX_KEY, _IGNORE_KEY}
    }
    return OfflineCachePolicy(
        enabled=enabled,
        url_prefix=prefix,
        ignore_patterns=tuple(patterns),
        options=freeze(passthrough),
    )


def compile_ignore_patterns(
    patterns: Iterable[Union[str, Pattern[str]]]
) -> Tuple[Pattern[str], ...]:
    """Compile ignore rules into matchers; compiled patterns pass through unchanged."""
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, Pattern):
            compiled.append(pattern)
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid service worker ignore pattern {pattern!r}: {exc}"
            ) from exc
    return tuple(compiled)


def configure_precache(policy: OfflineCachePolicy) -> Tuple[Directive, ...]:
    """Return the precache manifest and registration directives for ``policy``.

    A disabled policy yields no directives. The registration directive always
    follows the manifest directive because the registration script loads the
    manifest's output by name.
    """
    if not policy.enabled:
        _logger.debug("Offline precache disabled")
        return ()

    ignore_patterns = compile_ignore_patterns(policy.ignore_patterns)
    _logger.debug(
        "Offline precache enabled with %d ignore patterns (prefix %s)",
        len(ignore_patterns),
        policy.url_prefix,
    )
    return (
        PrecacheDirective(settings=policy.options, ignore_patterns=ignore_patterns),
        ServiceWorkerRegisterDirective(file_path=REGISTER_SCRIPT_PATH, prefix=policy.url_prefix),
    )


__all__ = [
    "REGISTER_SCRIPT_PATH",
    "compile_ignore_patterns",
    "configure_precache",
    "merge_policy",
    "policy_from_mapping",
]

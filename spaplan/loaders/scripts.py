"""JavaScript loader factory."""

from __future__ import annotations

from typing import Any, Dict, List

from .base import LoaderContext, LoaderFactory, LoaderOutput
from ..models import LoaderUse, RuleDescriptor, freeze


class ScriptLoaderFactory(LoaderFactory):
    """Transpiles page and library scripts for the configured browsers."""

    def build(self, context: LoaderContext) -> LoaderOutput:
        presets: List[Any] = [
            ["env", {"modules": False, "targets": {"browsers": context.browsers}}],
        ]
        plugins: List[str] = []
        if context.config.framework == "react":
            presets.append("react")
            if context.is_dev and context.config.hot_reload:
                plugins.append("react-hot-loader/babel")

        options: Dict[str, Any] = {
            "cacheDirectory": context.is_dev,
            "presets": presets,
            "plugins": plugins,
        }
        rule = RuleDescriptor(
            test=r"\.jsx?$",
            use=(LoaderUse(loader="babel-loader", options=freeze(options)),),
            exclude=(context.modules_path.as_posix(), "node_modules"),
        )
        return LoaderOutput(rules=(rule,))

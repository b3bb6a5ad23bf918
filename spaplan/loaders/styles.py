"""Style and image loader factory."""

from __future__ import annotations

from typing import Tuple

from .base import LoaderContext, LoaderFactory, LoaderOutput
from ..models import ExtractCssDirective, LoaderUse, RuleDescriptor, freeze


class StyleImageLoaderFactory(LoaderFactory):
    """Produces the stylesheet rule and the inline-or-emit image rule.

    Production builds extract CSS into hashed files, which adds an
    extraction plugin alongside the rules.
    """

    def build(self, context: LoaderContext) -> LoaderOutput:
        config = context.config
        css_chain: Tuple[LoaderUse, ...] = (
            LoaderUse("css-loader", freeze({"importLoaders": 2, "minimize": not context.is_dev})),
            LoaderUse(
                "postcss-loader",
                freeze({"plugins": [["autoprefixer", {"browsers": context.browsers}]]}),
            ),
            LoaderUse("less-loader"),
        )
        plugins = ()
        if context.is_dev:
            style_use = (LoaderUse("style-loader"),) + css_chain
        else:
            style_use = (LoaderUse("extract-css-loader"),) + css_chain
            plugins = (ExtractCssDirective(),)

        style_rule = RuleDescriptor(test=r"\.(css|less)$", use=style_use)
        image_rule = RuleDescriptor(
            test=r"\.(png|jpe?g|gif|webp)$",
            use=(
                LoaderUse(
                    "url-loader",
                    freeze(
                        {
                            "limit": config.base64_limit,
                            "name": "assets/images/[name].[hash:8].[ext]",
                            "publicPath": config.public_path,
                        }
                    ),
                ),
            ),
        )
        return LoaderOutput(rules=(style_rule, image_rule), plugins=plugins)

"""HTML, SVG and generic file loader factories."""

from __future__ import annotations

from .base import LoaderContext, LoaderFactory, LoaderOutput
from ..models import LoaderUse, RuleDescriptor, freeze

ICONS_DIR = "icons"


class MarkupLoaderFactory(LoaderFactory):
    """Lets templates reference images that the bundler should emit."""

    def build(self, context: LoaderContext) -> LoaderOutput:
        rule = RuleDescriptor(
            test=r"\.html?$",
            use=(LoaderUse("html-loader", freeze({"attrs": ["img:src", "link:href"]})),),
        )
        return LoaderOutput(rules=(rule,))


class FileLoaderFactory(LoaderFactory):
    def build(self, context: LoaderContext) -> LoaderOutput:
        rule = RuleDescriptor(
            test=r"\.(woff2?|eot|ttf|otf|mp3|mp4|webm)$",
            use=(
                LoaderUse(
                    "file-loader",
                    freeze(
                        {
                            "name": "assets/files/[name].[hash:8].[ext]",
                            "publicPath": context.config.public_path,
                        }
                    ),
                ),
            ),
        )
        return LoaderOutput(rules=(rule,))


class SvgLoaderFactory(LoaderFactory):
    """Sprites SVGs under ``src/icons`` and emits every other SVG as a file."""

    def build(self, context: LoaderContext) -> LoaderOutput:
        icons = (context.config.source_root / ICONS_DIR).as_posix()
        sprite_rule = RuleDescriptor(
            test=r"\.svg$",
            use=(
                LoaderUse("svg-sprite-loader", freeze({"symbolId": "icon-[name]"})),
                LoaderUse("svgo-loader"),
            ),
            include=(icons,),
        )
        file_rule = RuleDescriptor(
            test=r"\.svg$",
            use=(
                LoaderUse(
                    "file-loader",
                    freeze(
                        {
                            "name": "assets/images/[name].[hash:8].[ext]",
                            "publicPath": context.config.public_path,
                        }
                    ),
                ),
            ),
            exclude=(icons,),
        )
        return LoaderOutput(rules=(sprite_rule, file_rule))

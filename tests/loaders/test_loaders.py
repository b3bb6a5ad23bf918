"""Tests for loader factory discovery and built-in factories."""

from __future__ import annotations

from pathlib import Path

import pytest

from spaplan.config import ProjectConfig
from spaplan.loaders import LoaderContext, build_rules, discover_loaders
from spaplan.loaders.scripts import ScriptLoaderFactory
from spaplan.loaders.styles import StyleImageLoaderFactory
from spaplan.models import ExtractCssDirective


def _context(*, is_dev: bool, framework: str = "jquery", hot_reload: bool = False) -> LoaderContext:
    config = ProjectConfig(
        workspace=Path("/work/site"),
        build_path=Path("/work/site/build"),
        framework=framework,
        hot_reload=hot_reload,
        base64_limit=2048,
        public_path="/static/",
    )
    return LoaderContext(is_dev=is_dev, browsers="last 2 versions", modules_path=Path("/nm"), config=config)


def test_discover_loaders_returns_builtins_in_rule_order() -> None:
    names = [type(factory).__name__ for factory in discover_loaders()]

    assert names[:5] == [
        "ScriptLoaderFactory",
        "StyleImageLoaderFactory",
        "MarkupLoaderFactory",
        "FileLoaderFactory",
        "SvgLoaderFactory",
    ]


def test_discover_loaders_honours_enabled_names() -> None:
    factories = discover_loaders(["scripts", "SVG"])

    assert [type(factory).__name__ for factory in factories] == ["ScriptLoaderFactory", "SvgLoaderFactory"]


def test_discover_loaders_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="sass"):
        discover_loaders(["scripts", "sass"])


def test_build_rules_sequences_factory_output() -> None:
    output = build_rules(discover_loaders(), _context(is_dev=False))

    assert [rule.test for rule in output.rules] == [
        r"\.jsx?$",
        r"\.(css|less)$",
        r"\.(png|jpe?g|gif|webp)$",
        r"\.html?$",
        r"\.(woff2?|eot|ttf|otf|mp3|mp4|webm)$",
        r"\.svg$",
        r"\.svg$",
    ]
    assert output.plugins == (ExtractCssDirective(),)


def test_style_loader_injects_styles_in_development() -> None:
    output = StyleImageLoaderFactory().build(_context(is_dev=True))

    style_rule, image_rule = output.rules
    assert style_rule.use[0].loader == "style-loader"
    assert output.plugins == ()
    assert image_rule.to_dict()["use"][0]["options"]["limit"] == 2048


def test_script_loader_adds_react_hot_plugin_only_in_development() -> None:
    dev = ScriptLoaderFactory().build(_context(is_dev=True, framework="react", hot_reload=True))
    prod = ScriptLoaderFactory().build(_context(is_dev=False, framework="react", hot_reload=True))

    dev_options = dev.rules[0].to_dict()["use"][0]["options"]
    prod_options = prod.rules[0].to_dict()["use"][0]["options"]
    assert dev_options["plugins"] == ["react-hot-loader/babel"]
    assert prod_options["plugins"] == []
    assert "react" in prod_options["presets"]
    assert dev_options["presets"][0][1]["targets"] == {"browsers": "last 2 versions"}

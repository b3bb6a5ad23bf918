"""CLI entrypoints for spaplan commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import PlanError
from .logging import configure_logging
from .models import DEVELOPMENT, MODES
from .pages import discover_pages
from .planner import Planner, default_options


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the workspace root (defaults to current directory).",
    )


def _add_mode_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=MODES,
        default=DEVELOPMENT,
        help="Build mode to plan for.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spaplan",
        description="Plan multi-page bundler builds from a project descriptor.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan",
        help="Print the build graph for a workspace as JSON.",
    )
    _add_verbose_option(plan_parser, suppress_default=True)
    _add_path_argument(plan_parser)
    _add_mode_option(plan_parser)
    plan_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Dev-server port used by hot-reload bootstrap modules.",
    )
    plan_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the graph to this file instead of stdout.",
    )

    pages_parser = subparsers.add_parser(
        "pages",
        help="List the page templates that become entries.",
    )
    _add_verbose_option(pages_parser, suppress_default=True)
    _add_path_argument(pages_parser)

    copy_parser = subparsers.add_parser(
        "copy-externals",
        help="Copy vendored externals into the build output directory.",
    )
    _add_verbose_option(copy_parser, suppress_default=True)
    _add_path_argument(copy_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the planning HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for spaplan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    planner = Planner()

    if args.command == "plan":
        try:
            graph = planner.plan(
                args.mode,
                default_options(port=args.port),
                workspace=Path(args.path).expanduser(),
            )
        except PlanError as exc:
            parser.exit(1, f"spaplan plan failed: {exc}\n")
        rendered = graph.to_json()
        if args.output is None:
            print(rendered)
        else:
            args.output.write_text(rendered + "\n", encoding="utf-8")
            print(f"Build graph written to {_relativize(args.output)} ({graph.fingerprint()[:12]})")
    elif args.command == "pages":
        workspace = Path(args.path).expanduser()
        try:
            pages = discover_pages(workspace / "src" / "app")
        except PlanError as exc:
            parser.exit(1, f"{exc}\n")
        for page in pages:
            print(f"{page.name}\t{page.template}")
    elif args.command == "copy-externals":
        try:
            written = planner.copy_externals(Path(args.path).expanduser())
        except PlanError as exc:
            parser.exit(1, f"spaplan copy-externals failed: {exc}\n")
        for path in written:
            print(_relativize(path))
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

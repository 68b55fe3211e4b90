"""Command-line front door for lazylaunch.

Parses CLI options, resolves the data directory, and dispatches one command
against the launcher core. Results print as tab-separated rows, or as JSON
with ``--json``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import tomli_w

from .config import load_config
from .core import LauncherCore
from .errors import LauncherError
from .persistence import paths
from .search import SearchResult


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _result_kind(result: SearchResult) -> str:
    if result.is_error:
        return "error"
    return "folder" if result.is_folder else "item"


def format_results(results: Sequence[SearchResult], as_json: bool = False) -> str:
    """Render results for stdout."""
    if as_json:
        rows = [
            {"name": r.name, "path": r.path, "is_folder": r.is_folder, "is_error": r.is_error}
            for r in results
        ]
        return json.dumps(rows, ensure_ascii=False, indent=2) + "\n"
    return "".join(f"{_result_kind(r)}\t{r.name}\t{r.path}\n" for r in results)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazylaunch",
        description="Search, browse and launch indexed applications and folders.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--home",
        metavar="DIR",
        default=None,
        help=f"Data directory (default: ${paths.HOME_ENV_VAR} or {paths.DEFAULT_DATA_DIR}).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Rank indexed entries against a query.")
    search.add_argument("query", nargs="+", help="Query text; words are joined with spaces.")
    search.add_argument("--limit", type=_positive_int, default=None, help="Result count for this search (default: appearance.max_results).")
    search.add_argument("--json", action="store_true", help="Print results as JSON.")

    recent = commands.add_parser("recent", help="Show the most launched entries.")
    recent.add_argument("--json", action="store_true", help="Print results as JSON.")

    listing = commands.add_parser("list", help="List a folder the way folder expansion does.")
    listing.add_argument("directory", help="Folder to list.")
    listing.add_argument("--filter", default="", help="Filter text applied with search.folder_mode.")
    listing.add_argument("--json", action="store_true", help="Print results as JSON.")

    launch = commands.add_parser("launch", help="Open a target and record the launch.")
    launch.add_argument("path", help="Target path to open.")
    launch.add_argument("--query", default="", help="Query that led to this launch.")
    launch.add_argument("--dry-run", action="store_true", help="Record history without opening the target.")

    commands.add_parser("rebuild", help="Rescan all sources and rewrite the index cache.")

    config = commands.add_parser("config", help="Print the effective configuration as TOML.")
    config.add_argument("--path", action="store_true", help="Print the config file location instead.")
    return parser


def _run(args: argparse.Namespace, base: Path | None) -> None:
    if args.command == "config":
        config_path = paths.config_path(base)
        if args.path:
            sys.stdout.write(f"{config_path}\n")
            return
        sys.stdout.write(tomli_w.dumps(load_config(config_path).to_dict()))
        return

    core = LauncherCore(data_dir=base)
    if args.command == "search":
        results = core.search(" ".join(args.query), max_results=args.limit)
        sys.stdout.write(format_results(results, args.json))
    elif args.command == "recent":
        sys.stdout.write(format_results(core.get_history_results(), args.json))
    elif args.command == "list":
        sys.stdout.write(format_results(core.list_folder(args.directory, args.filter), args.json))
    elif args.command == "launch":
        core.launch_item(args.path, args.query, dry_run=args.dry_run)
    elif args.command == "rebuild":
        cache = core.rebuild_index()
        sys.stdout.write(f"Indexed {len(cache.entries)} entries\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run one launcher command.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    base = Path(args.home).expanduser() if args.home else None
    try:
        _run(args, base)
    except LauncherError as exc:
        raise SystemExit(f"lazylaunch: {exc}") from exc


if __name__ == "__main__":
    main()

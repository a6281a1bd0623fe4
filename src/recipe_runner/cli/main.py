"""Main CLI entry point: `runner [options] [<recipe> [args...]]`."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from recipe_runner.cli.parse_common import parse_leading_flags, path_resolver
from recipe_runner.config import RECIPE_FILE_NAMES, load_settings
from recipe_runner.errors import EXIT_USAGE, RunnerError
from recipe_runner.helpers import format_recipe_list, resolve_recipe_file
from recipe_runner.invoke import Dispatcher
from recipe_runner.recipes import load

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _print_usage() -> None:
    print("Usage: runner [options] [<recipe> [args...]]", file=sys.stderr)
    print("Options (must precede the recipe name):", file=sys.stderr)
    print("  -f, --file PATH   Recipe file (default: Runfile/Justfile, searched upwards)", file=sys.stderr)
    print("  --config PATH     Settings file (default: ./.runner.yaml if present)", file=sys.stderr)
    print("  -l, --list        List recipes and exit", file=sys.stderr)
    print("  -n, --dry-run     Print command lines without running them", file=sys.stderr)
    print("  -q, --quiet       Do not echo command lines", file=sys.stderr)
    print("  -v, --verbose     Debug logging", file=sys.stderr)
    print("With no recipe name the first recipe in the file runs.", file=sys.stderr)


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


def run(argv: list[str] | None = None, cwd: Path | None = None) -> int:
    """Parse argv (without program name), run the selected recipe, return the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        flags, rest = parse_leading_flags(
            argv,
            ("file", "--file", None, path_resolver),
            ("file", "-f", None, path_resolver),
            ("config", "--config", None, path_resolver),
            switches=[
                ("help", ("-h", "--help")),
                ("list", ("-l", "--list")),
                ("dry_run", ("-n", "--dry-run")),
                ("quiet", ("-q", "--quiet")),
                ("verbose", ("-v", "--verbose")),
            ],
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        _print_usage()
        return EXIT_USAGE
    if flags["help"]:
        _print_usage()
        return 0

    project_root = cwd if cwd is not None else Path.cwd()
    try:
        settings = load_settings(
            project_root,
            config_path=flags["config"],
            cli_overrides={
                "recipe_file": flags["file"],
                "echo": False if flags["quiet"] else None,
                "log_level": "DEBUG" if flags["verbose"] else None,
            },
        )
        _configure_logging(settings["log_level"])
        recipe_file = resolve_recipe_file(project_root, settings["recipe_file"], RECIPE_FILE_NAMES)
        registry = load(recipe_file)
    except RunnerError as e:
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code

    if flags["list"]:
        print(format_recipe_list(registry))
        return 0

    dispatcher = Dispatcher(
        registry,
        shell=settings["shell"],
        echo=settings["echo"],
        dry_run=flags["dry_run"],
    )
    name, args = (rest[0], rest[1:]) if rest else (None, [])
    result = dispatcher.invoke(name, args)
    if result.error is not None:
        print(f"error: {result.error}", file=sys.stderr)
    return result.status


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()

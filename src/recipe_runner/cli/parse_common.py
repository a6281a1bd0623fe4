"""Leading-option parsing for `runner`: options stop at the recipe name."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any


def parse_leading_flags(
    argv: Sequence[str],
    *specs: tuple[str, str, Any, Callable[[str], Any] | None],
    switches: Sequence[tuple[str, Sequence[str]]] = (),
) -> tuple[dict[str, Any], list[str]]:
    """Parse options that precede the first positional token.

    Each flag spec is (key, flag_str, default, converter) for an option taking a value,
    given as `--flag value` or `--flag=value`; converter can be None for strings.
    Each switch is (key, flag_strs) for a boolean option.
    Parsing stops at the first token that is not an option (or after `--`); that
    token and everything after it are returned verbatim as the remaining argv.
    Raises ValueError on an unknown option or a missing value.
    """
    result: dict[str, Any] = {}
    for key, _flag, default, _converter in specs:
        result[key] = default() if callable(default) else default
    for key, _flags in switches:
        result[key] = False

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            i += 1
            break
        if not arg.startswith("-") or arg == "-":
            break
        flag, eq, inline = arg.partition("=")
        matched = False
        for key, flag_str, _default, converter in specs:
            if flag != flag_str:
                continue
            if eq:
                value = inline
                i += 1
            elif i + 1 < len(argv):
                value = argv[i + 1]
                i += 2
            else:
                msg = f"option {flag_str} requires a value"
                raise ValueError(msg)
            result[key] = converter(value) if converter else value
            matched = True
            break
        if not matched:
            for key, flag_strs in switches:
                if arg in flag_strs:
                    result[key] = True
                    matched = True
                    i += 1
                    break
        if not matched:
            msg = f"unknown option {arg}"
            raise ValueError(msg)
    return result, list(argv[i:])


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --file, --config)."""
    return Path(s).expanduser().resolve()

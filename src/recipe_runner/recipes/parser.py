"""Recipe file loader.

Format (one recipe per header, body lines indented below it):

    # Run the binary; this comment becomes the recipe doc
    run *args="":
        cross run -- "$@"

Top-level `set positional-arguments` and `set shell := ["sh", "-cu"]` directives
are supported. Everything is validated here so that binding and rendering a
recipe from a loaded Registry cannot fail on a malformed definition.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from recipe_runner.errors import DuplicateRecipeError, ParseError, RecipeFileNotFoundError
from recipe_runner.recipes.model import Parameter, Recipe, RecipeFileSettings
from recipe_runner.recipes.registry import Registry

log = logging.getLogger(__name__)

_IDENT = r"[A-Za-z_][A-Za-z0-9_-]*"
_NAME_RE = re.compile(rf"(?P<name>{_IDENT})")
_PARAM_RE = re.compile(
    rf"\s+(?P<star>\*)?(?P<name>{_IDENT})(?:=(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'))?"
)
_SET_RE = re.compile(rf"^set\s+(?P<key>{_IDENT})(?:\s*:=\s*(?P<value>.*?))?\s*$")
_STR = r"(?:\"[^\"]*\"|'[^']*')"
_LIST_RE = re.compile(rf"^\[\s*(?:{_STR}\s*(?:,\s*{_STR}\s*)*,?\s*)?\]$")
_LIST_ITEM_RE = re.compile(r"\"([^\"]*)\"|'([^']*)'")


def load(source: str | os.PathLike[str]) -> Registry:
    """Build a Registry from a recipe file or from recipe text.

    A str is always the recipe text itself, never a file name: pass a Path
    (or any os.PathLike) to read a file, which is decoded as UTF-8.
    Raises RecipeFileNotFoundError, ParseError or DuplicateRecipeError.
    """
    if isinstance(source, os.PathLike):
        file = Path(source)
        if not file.is_file():
            msg = f"Recipe file not found: {file}"
            raise RecipeFileNotFoundError(msg)
        path: Path | None = file.resolve()
        try:
            text = file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"not valid UTF-8: {e}", path) from e
    else:
        path = None
        text = source
    recipes, settings = _Parser(text, path).parse()
    log.debug("Loaded %d recipe(s) from %s", len(recipes), path or "<text>")
    return Registry(recipes, settings, path)


def _strip_comment(line: str) -> str:
    """Drop a trailing `# ...` that is not inside a quoted string."""
    quote: str | None = None
    for i, ch in enumerate(line):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "#":
            return line[:i].rstrip()
    return line


class _RecipeBuilder:
    def __init__(self, name: str, parameters: list[Parameter], doc: str | None, line: int):
        self.name = name
        self.parameters = parameters
        self.doc = doc
        self.line = line
        self.body: list[tuple[int, str]] = []


class _Parser:
    def __init__(self, text: str, path: Path | None):
        self.lines = text.splitlines()
        self.path = path
        self.recipes: dict[str, Recipe] = {}
        self.seen_settings: set[str] = set()
        self.positional_arguments = False
        self.shell: tuple[str, ...] | None = None
        self.current: _RecipeBuilder | None = None
        self.pending_doc: str | None = None

    def error(self, message: str, line: int) -> ParseError:
        return ParseError(message, self.path, line)

    def parse(self) -> tuple[dict[str, Recipe], RecipeFileSettings]:
        for lineno, raw in enumerate(self.lines, start=1):
            line = raw.rstrip()
            if not line.strip():
                self.pending_doc = None
                continue
            if line[0] in " \t":
                self._body_line(line, lineno)
                continue
            self._finish_recipe()
            if line.startswith("#"):
                self.pending_doc = line[1:].strip() or None
                continue
            line = _strip_comment(line)
            setting = _SET_RE.match(line)
            if setting is not None:
                self._setting(setting, lineno)
            else:
                self._header(line, lineno)
            self.pending_doc = None
        self._finish_recipe()
        settings = RecipeFileSettings(positional_arguments=self.positional_arguments, shell=self.shell)
        return self.recipes, settings

    # --- Lines ---

    def _body_line(self, line: str, lineno: int) -> None:
        if self.current is None:
            raise self.error("Indented line outside of a recipe", lineno)
        text = line.strip()
        if text.startswith("#"):
            return
        self.current.body.append((lineno, text))

    def _setting(self, m: re.Match[str], lineno: int) -> None:
        key, value = m.group("key"), m.group("value")
        if key in self.seen_settings:
            raise self.error(f"Setting `{key}` set more than once", lineno)
        self.seen_settings.add(key)
        if key == "positional-arguments":
            if value is None or value == "true":
                self.positional_arguments = True
            elif value == "false":
                self.positional_arguments = False
            else:
                raise self.error(f"Expected true or false for `{key}`, got `{value}`", lineno)
        elif key == "shell":
            if value is None or not _LIST_RE.match(value):
                raise self.error('Expected a list of strings for `shell`, e.g. ["sh", "-cu"]', lineno)
            items = tuple(dq or sq for dq, sq in _LIST_ITEM_RE.findall(value))
            if not items or not items[0]:
                raise self.error("`shell` must name a command", lineno)
            self.shell = items
        else:
            raise self.error(f"Unknown setting `{key}`", lineno)

    def _header(self, line: str, lineno: int) -> None:
        m = _NAME_RE.match(line)
        if m is None:
            raise self.error(f"Expected a recipe name, got `{line}`", lineno)
        name = m.group("name")
        pos = m.end()
        parameters: list[Parameter] = []
        while True:
            pm = _PARAM_RE.match(line, pos)
            if pm is None:
                break
            default = pm.group("dq") if pm.group("dq") is not None else pm.group("sq")
            parameters.append(Parameter(pm.group("name"), default, variadic=bool(pm.group("star"))))
            pos = pm.end()
        tail = line[pos:].strip()
        if tail.startswith(":="):
            raise self.error("Variable assignments are not supported", lineno)
        if not tail.startswith(":"):
            raise self.error(f"Expected `:` after recipe `{name}` parameters, got `{tail}`", lineno)
        if tail[1:].strip():
            raise self.error(f"Recipe `{name}` has dependencies; they are not supported", lineno)
        self._validate_parameters(name, parameters, lineno)
        if name in self.recipes:
            raise DuplicateRecipeError(name, self.recipes[name].line, lineno)
        self.current = _RecipeBuilder(name, parameters, self.pending_doc, lineno)

    # --- Validation ---

    def _validate_parameters(self, recipe: str, parameters: list[Parameter], lineno: int) -> None:
        seen: set[str] = set()
        optional_seen = False
        for i, p in enumerate(parameters):
            if p.name in seen:
                raise self.error(f"Recipe `{recipe}` has duplicate parameter `{p.name}`", lineno)
            seen.add(p.name)
            if p.variadic and i != len(parameters) - 1:
                raise self.error(
                    f"Variadic parameter `{p.name}` must be the last parameter of `{recipe}`",
                    lineno,
                )
            if p.required and optional_seen:
                raise self.error(
                    f"Required parameter `{p.name}` of `{recipe}` follows a parameter with a default",
                    lineno,
                )
            if not p.required:
                optional_seen = True

    def _finish_recipe(self) -> None:
        builder = self.current
        if builder is None:
            return
        self.current = None
        recipe = Recipe(
            name=builder.name,
            parameters=tuple(builder.parameters),
            body=tuple(text for _lineno, text in builder.body),
            doc=builder.doc,
            line=builder.line,
        )
        declared = {p.name for p in recipe.parameters}
        for index, name in recipe.placeholders():
            if name not in declared:
                raise self.error(
                    f"Recipe `{recipe.name}` references undeclared parameter `{name}`",
                    builder.body[index][0],
                )
        self.recipes[recipe.name] = recipe

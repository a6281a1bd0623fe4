"""Immutable recipe definitions: Parameter, Recipe, RecipeFileSettings."""

from __future__ import annotations

import re
from dataclasses import dataclass

# {{ name }} with optional inner whitespace; names follow recipe identifier rules.
PLACEHOLDER_RE = re.compile(r"\{\{\s*(?P<name>[A-Za-z_][A-Za-z0-9_-]*)\s*\}\}")


@dataclass(frozen=True)
class Parameter:
    name: str
    default: str | None = None
    variadic: bool = False

    @property
    def required(self) -> bool:
        return self.default is None and not self.variadic

    def __str__(self) -> str:
        prefix = "*" if self.variadic else ""
        if self.default is None:
            return f"{prefix}{self.name}"
        return f'{prefix}{self.name}="{self.default}"'


@dataclass(frozen=True)
class Recipe:
    name: str
    parameters: tuple[Parameter, ...] = ()
    body: tuple[str, ...] = ()
    doc: str | None = None
    line: int = 0

    @property
    def variadic(self) -> Parameter | None:
        """The trailing variadic parameter, if declared."""
        if self.parameters and self.parameters[-1].variadic:
            return self.parameters[-1]
        return None

    @property
    def positional(self) -> tuple[Parameter, ...]:
        """Non-variadic parameters in declaration order."""
        return tuple(p for p in self.parameters if not p.variadic)

    @property
    def min_arguments(self) -> int:
        return sum(1 for p in self.parameters if p.required)

    @property
    def max_arguments(self) -> int | None:
        """None when a variadic parameter makes the capacity unbounded."""
        if self.variadic is not None:
            return None
        return len(self.parameters)

    def placeholders(self) -> list[tuple[int, str]]:
        """(body line index, name) for every placeholder, in order of appearance."""
        return [
            (index, m.group("name"))
            for index, line in enumerate(self.body)
            for m in PLACEHOLDER_RE.finditer(line)
        ]

    def signature(self) -> str:
        return " ".join([self.name, *(str(p) for p in self.parameters)])


@dataclass(frozen=True)
class RecipeFileSettings:
    """`set` directives read from the recipe file."""

    positional_arguments: bool = False
    shell: tuple[str, ...] | None = None

"""Substitute bound parameter values into a recipe body."""

from __future__ import annotations

import re

from recipe_runner.errors import UnresolvedPlaceholderError
from recipe_runner.invoke.binder import BoundValue, ParameterMap
from recipe_runner.recipes.model import PLACEHOLDER_RE, Recipe


def format_value(value: BoundValue) -> str:
    """Variadic tokens are joined by single spaces; an empty capture renders as ''."""
    if isinstance(value, tuple):
        return " ".join(value)
    return value


def render_line(recipe: Recipe, template: str, parameter_map: ParameterMap) -> str:
    def _replace(match: re.Match[str]) -> str:
        name = match.group("name")
        if name not in parameter_map:
            raise UnresolvedPlaceholderError(recipe.name, name)
        return format_value(parameter_map[name])

    return PLACEHOLDER_RE.sub(_replace, template)


def render(recipe: Recipe, parameter_map: ParameterMap) -> tuple[str, ...]:
    """Fully substituted command lines, in body order."""
    return tuple(render_line(recipe, line, parameter_map) for line in recipe.body)

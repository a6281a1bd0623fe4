"""Bind caller tokens to a recipe's formal parameters. Pure; no I/O."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Union

from recipe_runner.errors import ExtraArgumentError, MissingArgumentError
from recipe_runner.recipes.model import Recipe

# str for plain parameters, tuple of tokens for the variadic one.
BoundValue = Union[str, tuple[str, ...]]
ParameterMap = Mapping[str, BoundValue]


def bind(recipe: Recipe, args: Sequence[str]) -> ParameterMap:
    """Resolve recipe parameters against positional tokens, left to right.

    Required parameters must be filled; optional ones fall back to their default;
    a trailing variadic parameter takes every remaining token in order.
    Raises MissingArgumentError or ExtraArgumentError.
    """
    tokens = list(args)
    bound: dict[str, BoundValue] = {}
    i = 0
    for param in recipe.positional:
        if i < len(tokens):
            bound[param.name] = tokens[i]
            i += 1
        elif param.default is not None:
            bound[param.name] = param.default
        else:
            raise MissingArgumentError(recipe.name, param.name, recipe.min_arguments, len(tokens))

    rest = tokens[i:]
    capacity = recipe.max_arguments
    if capacity is not None and rest:
        raise ExtraArgumentError(recipe.name, rest, capacity)
    variadic = recipe.variadic
    if variadic is not None:
        if rest:
            bound[variadic.name] = tuple(rest)
        elif variadic.default:
            bound[variadic.name] = (variadic.default,)
        else:
            bound[variadic.name] = ()
    return MappingProxyType(bound)


def positional_values(recipe: Recipe, parameter_map: ParameterMap) -> tuple[str, ...]:
    """Bound values flattened in declaration order; the shell's $1, $2, ..."""
    out: list[str] = []
    for param in recipe.parameters:
        value = parameter_map[param.name]
        if isinstance(value, tuple):
            out.extend(value)
        else:
            out.append(value)
    return tuple(out)

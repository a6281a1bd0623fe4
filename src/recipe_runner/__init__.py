"""recipe_runner: load named shell recipes, bind arguments, run them fail-fast."""

from recipe_runner.errors import (
    ChildNonZeroExit,
    ChildSignalTermination,
    ConfigError,
    DuplicateRecipeError,
    ExecutionError,
    ExtraArgumentError,
    InvocationError,
    MissingArgumentError,
    ParseError,
    RecipeFileNotFoundError,
    RunnerError,
    UnknownRecipeError,
    UnresolvedPlaceholderError,
)
from recipe_runner.invoke import Dispatcher, bind, execute, render
from recipe_runner.recipes import Parameter, Recipe, Registry, load

__all__ = [
    "ChildNonZeroExit",
    "ChildSignalTermination",
    "ConfigError",
    "Dispatcher",
    "DuplicateRecipeError",
    "ExecutionError",
    "ExtraArgumentError",
    "InvocationError",
    "MissingArgumentError",
    "Parameter",
    "ParseError",
    "Recipe",
    "RecipeFileNotFoundError",
    "Registry",
    "RunnerError",
    "UnknownRecipeError",
    "UnresolvedPlaceholderError",
    "bind",
    "execute",
    "load",
    "render",
]

"""Recipe registry: immutable recipe definitions loaded once from a recipe file."""

from recipe_runner.recipes.model import Parameter, Recipe, RecipeFileSettings
from recipe_runner.recipes.parser import load
from recipe_runner.recipes.registry import Registry

__all__ = [
    "Parameter",
    "Recipe",
    "RecipeFileSettings",
    "Registry",
    "load",
]

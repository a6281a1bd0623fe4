"""Read-only recipe registry built once by the loader."""

from __future__ import annotations

import difflib
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from recipe_runner.errors import UnknownRecipeError
from recipe_runner.recipes.model import Recipe, RecipeFileSettings


class Registry:
    """Recipe name -> Recipe, in declaration order. Never mutated after construction."""

    __slots__ = ("_recipes", "settings", "source")

    def __init__(
        self,
        recipes: Mapping[str, Recipe],
        settings: RecipeFileSettings | None = None,
        source: Path | None = None,
    ):
        self._recipes: Mapping[str, Recipe] = MappingProxyType(dict(recipes))
        self.settings = settings or RecipeFileSettings()
        self.source = source

    def lookup(self, name: str) -> Recipe:
        try:
            return self._recipes[name]
        except KeyError:
            close = difflib.get_close_matches(name, list(self._recipes), n=1)
            raise UnknownRecipeError(name, close[0] if close else None) from None

    def names(self) -> list[str]:
        return list(self._recipes)

    def default_recipe(self) -> Recipe | None:
        """First recipe in the file; what runs when no name is given."""
        for recipe in self._recipes.values():
            return recipe
        return None

    @property
    def working_directory(self) -> Path | None:
        """Recipes run from the directory holding the recipe file."""
        return self.source.parent if self.source is not None else None

    def __contains__(self, name: object) -> bool:
        return name in self._recipes

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self._recipes.values())

    def __len__(self) -> int:
        return len(self._recipes)

    def __repr__(self) -> str:
        return f"Registry({self.names()!r}, source={self.source!r})"

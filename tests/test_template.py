"""Tests for recipe_runner.invoke.template."""

from types import MappingProxyType

import pytest


class TestRender:
    def test_scenario_empty_variadic_renders_empty(self) -> None:
        from recipe_runner.invoke import bind, render
        from recipe_runner.recipes import load

        recipe = load('run *args="":\n    cross run -- {{args}}\n').lookup("run")
        assert render(recipe, bind(recipe, [])) == ("cross run -- ",)

    def test_scenario_variadic_tokens_joined_in_order(self) -> None:
        from recipe_runner.invoke import bind, render
        from recipe_runner.recipes import load

        recipe = load('run *args="":\n    cross run -- {{args}}\n').lookup("run")
        assert render(recipe, bind(recipe, ["build", "--release"])) == (
            "cross run -- build --release",
        )

    def test_every_occurrence_substituted_once(self) -> None:
        from recipe_runner.invoke import bind, render
        from recipe_runner.recipes import load

        recipe = load(
            "tag name v='1':\n    git tag {{name}}-{{ v }}\n    echo {{name}} {{name}}\n"
        ).lookup("tag")
        assert render(recipe, bind(recipe, ["rel"])) == ("git tag rel-1", "echo rel rel")

    def test_values_are_not_rescanned(self) -> None:
        from recipe_runner.invoke import bind, render
        from recipe_runner.recipes import load

        recipe = load("say a b='x':\n    echo {{a}} {{b}}\n").lookup("say")
        assert render(recipe, bind(recipe, ["{{b}}"])) == ("echo {{b}} x",)

    def test_unresolved_placeholder_is_internal_error(self) -> None:
        from recipe_runner.errors import UnresolvedPlaceholderError
        from recipe_runner.invoke import render
        from recipe_runner.recipes import Recipe

        recipe = Recipe(name="broken", body=("echo {{missing}}",))
        with pytest.raises(UnresolvedPlaceholderError) as exc:
            render(recipe, MappingProxyType({}))
        assert exc.value.placeholder == "missing"
        assert "{{missing}}" in str(exc.value)

    def test_lines_without_placeholders_unchanged(self, cross_recipes: str) -> None:
        from recipe_runner.invoke import bind, render
        from recipe_runner.recipes import load

        registry = load(cross_recipes)
        recipe = registry.lookup("run")
        assert render(recipe, bind(recipe, ["a", "b"])) == ('cross run -- "$@"',)

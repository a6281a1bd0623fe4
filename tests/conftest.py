"""Pytest fixtures for recipe_runner tests."""

from collections.abc import Callable
from pathlib import Path

import pytest


CROSS_RECIPES = """\
set positional-arguments

init:
    cargo binstall cross

build:
    cross build

release:
    cross build --release

run *args="":
    cross run -- "$@"
"""


@pytest.fixture
def write_recipes(tmp_path: Path) -> Callable[[str], Path]:
    """Write recipe text to tmp_path/Runfile and return its path."""

    def _write(text: str, name: str = "Runfile") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def cross_recipes() -> str:
    """Recipe file for a cross-compiled project: init, build, release, run."""
    return CROSS_RECIPES

"""Shared helpers for recipe_runner (recipe file discovery, listing)."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from recipe_runner.errors import RecipeFileNotFoundError
from recipe_runner.recipes.registry import Registry

# --- Path ---


def find_recipe_file(start: Path, names: Sequence[str]) -> Path:
    """First of names found in start or any parent directory.

    Raises RecipeFileNotFoundError if none exists up to the filesystem root.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    msg = f"No recipe file found (looked for {', '.join(names)} in {start} and its parents)"
    raise RecipeFileNotFoundError(msg)


def resolve_recipe_file(project_root: Path, recipe_file: str | None, names: Sequence[str]) -> Path:
    """Explicit recipe_file (relative to project_root), else search upwards for names."""
    if recipe_file:
        p = Path(recipe_file).expanduser()
        return p if p.is_absolute() else project_root / p
    return find_recipe_file(project_root, names)


# --- Listing ---


def format_recipe_list(registry: Registry) -> str:
    """`Available recipes:` block with signatures and docs aligned."""
    lines = ["Available recipes:"]
    signatures = [(r.signature(), r.doc) for r in registry]
    width = max((len(sig) for sig, _doc in signatures), default=0)
    for sig, doc in signatures:
        if doc:
            lines.append(f"    {sig.ljust(width)} # {doc}")
        else:
            lines.append(f"    {sig}")
    return "\n".join(lines)

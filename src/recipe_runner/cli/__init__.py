"""Command-line front end for recipe_runner."""

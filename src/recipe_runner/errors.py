"""Error taxonomy for recipe_runner. Every error carries the process exit code the CLI uses."""

from __future__ import annotations

from pathlib import Path

EXIT_USAGE = 2
EXIT_SIGNAL_BASE = 128


class RunnerError(Exception):
    """Base class. Subclasses override exit_code."""

    exit_code = 1


# --- Config (load time) ---


class ConfigError(RunnerError):
    """Raised before any recipe can be looked up."""


class RecipeFileNotFoundError(ConfigError):
    exit_code = 200


class ParseError(ConfigError):
    exit_code = 201

    def __init__(self, message: str, path: Path | None = None, line: int | None = None):
        self.path = path
        self.line = line
        where = ""
        if path is not None:
            where = f"{path}:{line}: " if line is not None else f"{path}: "
        elif line is not None:
            where = f"line {line}: "
        super().__init__(f"{where}{message}")


class DuplicateRecipeError(ConfigError):
    exit_code = 202

    def __init__(self, name: str, first_line: int, second_line: int):
        self.name = name
        self.first_line = first_line
        self.second_line = second_line
        super().__init__(
            f"Recipe `{name}` defined on line {second_line} is already defined on line {first_line}"
        )


class SettingsError(ConfigError):
    exit_code = EXIT_USAGE


# --- Invocation (before anything is spawned) ---


class InvocationError(RunnerError):
    """Raised before any process is spawned."""


class UnknownRecipeError(InvocationError):
    exit_code = 203

    def __init__(self, name: str, suggestion: str | None = None):
        self.name = name
        self.suggestion = suggestion
        msg = f"Recipe file does not contain recipe `{name}`"
        if suggestion:
            msg += f". Did you mean `{suggestion}`?"
        super().__init__(msg)


class MissingArgumentError(InvocationError):
    exit_code = 204

    def __init__(self, recipe: str, parameter: str, expected: int, got: int):
        self.recipe = recipe
        self.parameter = parameter
        super().__init__(
            f"Recipe `{recipe}` got {got} argument(s) but takes at least {expected} "
            f"(missing `{parameter}`)"
        )


class ExtraArgumentError(InvocationError):
    exit_code = 205

    def __init__(self, recipe: str, extra: list[str], capacity: int):
        self.recipe = recipe
        self.extra = extra
        super().__init__(
            f"Recipe `{recipe}` takes at most {capacity} argument(s); "
            f"unexpected: {' '.join(extra)}"
        )


class UnresolvedPlaceholderError(RunnerError):
    """Internal invariant: a placeholder survived a successful bind."""

    exit_code = 206

    def __init__(self, recipe: str, placeholder: str):
        self.recipe = recipe
        self.placeholder = placeholder
        super().__init__(
            f"Internal error: unresolved placeholder `{{{{{placeholder}}}}}` in recipe `{recipe}`"
        )


# --- Execution ---


class ExecutionError(RunnerError):
    """A child process failed. exit_code is the invocation's final status."""

    def __init__(self, recipe: str, line: int, status: int, message: str):
        self.recipe = recipe
        self.line = line
        self.status = status
        self.exit_code = status
        super().__init__(message)


class ChildNonZeroExit(ExecutionError):
    def __init__(self, recipe: str, line: int, status: int):
        super().__init__(
            recipe, line, status, f"Recipe `{recipe}` failed on line {line} with exit code {status}"
        )


class ChildSignalTermination(ExecutionError):
    def __init__(self, recipe: str, line: int, signum: int):
        self.signum = signum
        super().__init__(
            recipe,
            line,
            EXIT_SIGNAL_BASE + signum,
            f"Recipe `{recipe}` was terminated on line {line} by signal {signum}",
        )

"""One invocation: resolve -> bind -> render -> execute, fail fast, report final status."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from recipe_runner.errors import InvocationError, RunnerError
from recipe_runner.invoke.binder import ParameterMap, bind, positional_values
from recipe_runner.invoke.process import DEFAULT_SHELL, execute
from recipe_runner.invoke.template import render
from recipe_runner.recipes.model import Recipe
from recipe_runner.recipes.registry import Registry

log = logging.getLogger(__name__)


class State(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    BINDING = "binding"
    RENDERING = "rendering"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


_ORDER = list(State)


@dataclass(frozen=True)
class InvocationResult:
    status: int
    state: State
    recipe: str | None = None
    lines: tuple[str, ...] = ()
    line: int | None = None
    error: RunnerError | None = None

    @property
    def ok(self) -> bool:
        return self.state is State.COMPLETED


class _Invocation:
    """Forward-only state tracker; only Executing may repeat, with a growing line index."""

    def __init__(self) -> None:
        self.state = State.IDLE
        self.line: int | None = None

    def advance(self, state: State, line: int | None = None) -> None:
        if state is State.EXECUTING and self.state is State.EXECUTING:
            if line is None or self.line is None or line <= self.line:
                msg = f"Invalid transition executing({self.line}) -> executing({line})"
                raise AssertionError(msg)
        elif state is not State.FAILED and _ORDER.index(state) <= _ORDER.index(self.state):
            msg = f"Invalid transition {self.state.value} -> {state.value}"
            raise AssertionError(msg)
        elif self.state in (State.COMPLETED, State.FAILED):
            msg = f"Invocation already finished ({self.state.value})"
            raise AssertionError(msg)
        log.debug(
            "%s -> %s%s",
            self.state.value,
            state.value,
            f"({line})" if line is not None else "",
        )
        self.state = state
        if line is not None:
            self.line = line


class Dispatcher:
    """Runs recipes from an immutable Registry. Holds no per-invocation state."""

    def __init__(
        self,
        registry: Registry,
        *,
        shell: Sequence[str] | None = None,
        echo: bool = True,
        dry_run: bool = False,
        environment: Mapping[str, str] | None = None,
    ):
        self.registry = registry
        # `set shell` in the recipe file wins over the runner setting.
        self.shell = tuple(registry.settings.shell or shell or DEFAULT_SHELL)
        self.echo = echo
        self.dry_run = dry_run
        self.environment = environment

    def resolve(self, name: str | None) -> Recipe:
        if name is None:
            recipe = self.registry.default_recipe()
            if recipe is None:
                msg = "Recipe file contains no recipes"
                raise InvocationError(msg)
            return recipe
        return self.registry.lookup(name)

    def invoke(self, name: str | None, args: Sequence[str] = ()) -> InvocationResult:
        """Run recipe `name` (first recipe when None) with positional args."""
        inv = _Invocation()
        recipe: Recipe | None = None
        lines: tuple[str, ...] = ()
        try:
            inv.advance(State.RESOLVING)
            recipe = self.resolve(name)
            inv.advance(State.BINDING)
            parameter_map = bind(recipe, args)
            inv.advance(State.RENDERING)
            lines = render(recipe, parameter_map)
            self._execute(inv, recipe, parameter_map, lines)
        except RunnerError as e:
            line = inv.line if inv.state is State.EXECUTING else None
            inv.advance(State.FAILED)
            log.debug("Invocation failed: %s", e)
            return InvocationResult(
                status=e.exit_code,
                state=inv.state,
                recipe=recipe.name if recipe is not None else name,
                lines=lines,
                line=line,
                error=e,
            )
        inv.advance(State.COMPLETED)
        return InvocationResult(status=0, state=inv.state, recipe=recipe.name, lines=lines)

    def _execute(
        self,
        inv: _Invocation,
        recipe: Recipe,
        parameter_map: ParameterMap,
        lines: tuple[str, ...],
    ) -> None:
        positional = (
            positional_values(recipe, parameter_map)
            if self.registry.settings.positional_arguments
            else None
        )
        execute(
            lines,
            self.environment,
            recipe=recipe.name,
            shell=self.shell,
            positional=positional,
            cwd=self.registry.working_directory,
            echo=self.echo,
            dry_run=self.dry_run,
            on_line=lambda index, _line: inv.advance(State.EXECUTING, index),
        )

"""Parameter binding, rendering and fail-fast sequential execution of recipes."""

from .binder import BoundValue, ParameterMap, bind, positional_values
from .dispatch import Dispatcher, InvocationResult, State
from .process import DEFAULT_SHELL, build_argv, execute
from .template import render

__all__ = [
    "DEFAULT_SHELL",
    "BoundValue",
    "Dispatcher",
    "InvocationResult",
    "ParameterMap",
    "State",
    "bind",
    "build_argv",
    "execute",
    "positional_values",
    "render",
]

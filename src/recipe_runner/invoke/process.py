"""Run rendered command lines one after another, stopping at the first failure.

Each line runs as its own shell process (default `sh -cu <line>`) that inherits
stdin/stdout/stderr and the caller's environment. The caller blocks on every
child before starting the next one.
"""

from __future__ import annotations

import logging
import signal
import subprocess
import sys
import threading
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import FrameType
from typing import Any

from recipe_runner.errors import ChildNonZeroExit, ChildSignalTermination, ExecutionError

log = logging.getLogger(__name__)

DEFAULT_SHELL: tuple[str, ...] = ("sh", "-cu")

# SIGINT reaches the child through the terminal's process group; the others are relayed.
_HANDLED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGHUP") if hasattr(signal, name)
)
_RELAYED_SIGNALS = tuple(s for s in _HANDLED_SIGNALS if s != signal.SIGINT)


class _SignalRelay:
    """Record termination signals while children run; restore handlers on exit.

    Handlers can only be installed from the main thread; elsewhere this is a no-op
    and signals keep their default behavior.
    """

    def __init__(self) -> None:
        self.received: int | None = None
        self.child: subprocess.Popen[bytes] | None = None
        self._previous: dict[int, Any] = {}

    def __enter__(self) -> _SignalRelay:
        if threading.current_thread() is threading.main_thread():
            for signum in _HANDLED_SIGNALS:
                self._previous[signum] = signal.signal(signum, self._handle)
        return self

    def __exit__(self, *exc_info: object) -> None:
        for signum, handler in self._previous.items():
            # None: the previous handler was not installed from Python.
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()

    def _handle(self, signum: int, _frame: FrameType | None) -> None:
        log.debug("Received signal %d", signum)
        if self.received is None:
            self.received = signum
        child = self.child
        if child is not None and signum in _RELAYED_SIGNALS and child.poll() is None:
            child.send_signal(signum)


def _spawn(
    argv: Sequence[str],
    env: Mapping[str, str] | None,
    cwd: Path | None,
) -> subprocess.Popen[bytes]:
    return subprocess.Popen(
        list(argv),
        env=dict(env) if env is not None else None,
        cwd=cwd,
    )


def build_argv(
    line: str,
    shell: Sequence[str] = DEFAULT_SHELL,
    recipe: str = "",
    positional: Sequence[str] | None = None,
) -> list[str]:
    """Shell argv for one line. With positional arguments, $0 is the recipe name."""
    argv = [*shell, line]
    if positional is not None:
        argv.append(recipe or shell[0])
        argv.extend(positional)
    return argv


def execute(
    command_lines: Sequence[str],
    environment: Mapping[str, str] | None = None,
    *,
    recipe: str = "",
    shell: Sequence[str] = DEFAULT_SHELL,
    positional: Sequence[str] | None = None,
    cwd: Path | None = None,
    echo: bool = True,
    dry_run: bool = False,
    on_line: Callable[[int, str], None] | None = None,
) -> int:
    """Run each line in order. Returns 0 when every line succeeded.

    environment=None inherits the caller's environment unmodified.
    positional (when not None) is passed to the shell as $1, $2, ...
    Raises ChildNonZeroExit on the first non-zero exit and ChildSignalTermination
    when a child is killed by a signal or the dispatcher itself is signalled;
    later lines are never started.
    """
    with _SignalRelay() as relay:
        for index, line in enumerate(command_lines, start=1):
            if relay.received is not None:
                raise ChildSignalTermination(recipe, index, relay.received)
            if on_line is not None:
                on_line(index, line)
            if echo or dry_run:
                print(line, file=sys.stderr, flush=True)
            if dry_run:
                continue
            argv = build_argv(line, shell, recipe, positional)
            log.debug("Spawning line %d of `%s`: %s", index, recipe, argv)
            try:
                child = _spawn(argv, environment, cwd)
            except OSError as e:
                msg = f"Recipe `{recipe}` could not start `{shell[0]}` on line {index}: {e}"
                raise ExecutionError(recipe, index, 127, msg) from e
            relay.child = child
            try:
                status = child.wait()
            finally:
                relay.child = None
            log.debug("Line %d of `%s` exited with %d", index, recipe, status)
            if relay.received is not None:
                raise ChildSignalTermination(recipe, index, relay.received)
            if status < 0:
                raise ChildSignalTermination(recipe, index, -status)
            if status != 0:
                raise ChildNonZeroExit(recipe, index, status)
    return 0

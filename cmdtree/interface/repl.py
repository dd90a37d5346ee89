#!/usr/bin/env python3
# cmdtree/interface/repl.py
from __future__ import annotations

"""
Interactive read-eval-print loop.

States:
    IDLE -> READING -> DISPATCHING -> PRINTING -> READING ... | TERMINATED

One line is processed completely (dispatch, print, record in history)
before the next one is read. Rejections are printed and the loop goes on;
it only ends on end-of-input, an interrupt, or an exit request, and then
runs the exit action exactly once.
"""

import enum
import logging
import sys
from typing import IO, Any, Callable

from cmdtree.commands import Rejected
from cmdtree.db import HistoryStore
from cmdtree.interface.cli import BaseCLI
from cmdtree.interface.handler import Dispatcher
from cmdtree.ui import print_error, print_line

logger = logging.getLogger("cmdtree.repl")


class ReplState(enum.Enum):
    IDLE = "idle"
    READING = "reading"
    DISPATCHING = "dispatching"
    PRINTING = "printing"
    TERMINATED = "terminated"


def _noop() -> None:
    return None


class Repl:
    """
    Drive a Dispatcher from an input frontend.

    Args:
        dispatcher: Resolves and runs each entered line.
        frontend: Source of input lines (prompt_toolkit or a stream).
        prompt: Prompt text shown before each read.
        history: Store the raw lines are appended to; None disables history.
        exit_action: Called once on termination (default: no-op here; the
            program passes sys.exit unless configured otherwise).
        stdout / stderr: Streams for resolved values and rejection reasons.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        frontend: BaseCLI,
        *,
        prompt: str = "> ",
        history: HistoryStore | None = None,
        exit_action: Callable[[], Any] | None = None,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.frontend = frontend
        self.prompt = prompt
        self.history = history
        self.exit_action = exit_action or _noop
        self.state = ReplState.IDLE
        self._exit_requested = False
        self._stdout = stdout
        self._stderr = stderr

    # ---------------- Control ----------------

    @property
    def terminated(self) -> bool:
        return self.state is ReplState.TERMINATED

    def request_exit(self) -> None:
        """Ask the loop to terminate once the current line is finished."""
        self._exit_requested = True

    def close(self) -> None:
        """Enter TERMINATED (once) and run the exit action."""
        if self.state is ReplState.TERMINATED:
            return
        self.state = ReplState.TERMINATED
        logger.debug("loop terminated")
        self.exit_action()

    # ---------------- Loop ----------------

    async def start(self) -> None:
        """Run until terminated. Calling it after termination does nothing."""
        if self.state is ReplState.TERMINATED:
            return
        if self.state is not ReplState.IDLE:
            raise RuntimeError("REPL is already running")

        if self.history is not None:
            self.history.load()

        with self.frontend:
            while not self.terminated:
                await self._step()

    async def _step(self) -> None:
        self.state = ReplState.READING
        try:
            line = await self.frontend.get_line(self.prompt)
        except (EOFError, KeyboardInterrupt):
            self.close()
            return

        if not line.strip():
            return

        self.state = ReplState.DISPATCHING
        outcome = await self.dispatcher.dispatch(line)

        self.state = ReplState.PRINTING
        if isinstance(outcome, Rejected):
            print_error(outcome.message, file=self._stderr or sys.stderr)
        elif outcome.value is not None:
            print_line(str(outcome.value), file=self._stdout or sys.stdout)

        if self.history is not None:
            self.history.append(line)

        if self._exit_requested:
            self.close()

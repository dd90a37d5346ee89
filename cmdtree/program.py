#!/usr/bin/env python3
# cmdtree/program.py
from __future__ import annotations

"""
Program facade: declare commands once, then run argv or an interactive loop.

    app = program(description="demo")
    app.add(command("hello").action(lambda: "hi"))
    raise SystemExit(app.main())
"""

import asyncio
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import IO, Any, Sequence

from cmdtree.commands import (
    Command,
    Outcome,
    Rejected,
    command,
    validate_tree,
)
from cmdtree.db import HistoryStore, ProgramOptions, load_options
from cmdtree.interface import (
    ArgparseAdapter,
    BaseCLI,
    Dispatcher,
    Repl,
    make_cli,
)
from cmdtree.interface.handler import RunListener
from cmdtree.ui import init_logger, print_error, print_line

logger = logging.getLogger("cmdtree")

EVENTS = ("run",)


def _process_argv() -> list[str]:
    return sys.argv[1:]


def _default_prog() -> str:
    name = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else ""
    return name if name and not any(ch.isspace() for ch in name) else "cmdtree"


class Program:
    """
    A command tree plus the policies around running it.

    Args:
        options: Resolved ProgramOptions (see cmdtree.db.config.load_options).
        prog: Program name used in usage lines; defaults to argv[0].
        stdout / stderr: Output streams (default: the sys streams at call time).
    """

    def __init__(
        self,
        options: ProgramOptions | None = None,
        *,
        prog: str | None = None,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ) -> None:
        self.options = options if options is not None else load_options()
        self.prog = prog or _default_prog()
        self.root = Command(name=self.prog, description=self.options.description or "")
        self._listeners: dict[str, list[RunListener]] = {event: [] for event in EVENTS}
        self._repl_instance: Repl | None = None
        self._stdout = stdout
        self._stderr = stderr

    # ---------------- Definition ----------------

    def describe(self, description: str) -> "Program":
        """Set the program description."""
        self.options.description = description
        self.root.description = description
        return self

    def prompt(self, prompt: str) -> "Program":
        """Set a custom REPL prompt."""
        self.options.prompt = prompt
        return self

    def add(self, node: Command) -> "Program":
        """Register a top-level command; its subtree is frozen from now on."""
        validate_tree(node)
        self.root.add_child(node)
        node.freeze()
        return self

    def default(self, node: Command) -> "Program":
        """Register a top-level command and mark it as the default."""
        node.mark_default()
        return self.add(node)

    # ---------------- Events ----------------

    def on(self, event: str, listener: RunListener) -> "Program":
        if event not in self._listeners:
            raise ValueError(f"Unknown event: {event!r} (expected one of {EVENTS})")
        self._listeners[event].append(listener)
        return self

    def off(self, event: str, listener: RunListener) -> "Program":
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)
        return self

    # ---------------- Running ----------------

    def _version(self) -> str | None:
        version = self.options.version
        if version is None or version is False:
            return None
        if version is True:
            for dist in (self.prog, "cmdtree"):
                try:
                    return metadata.version(dist)
                except metadata.PackageNotFoundError:
                    continue
            return "unknown"
        return str(version)

    def dispatcher(self) -> Dispatcher:
        """Dispatcher over the current tree and options."""
        adapter = ArgparseAdapter(prog=self.prog, help=self.options.help, version=self._version())
        return Dispatcher(
            self.root,
            adapter,
            listeners=self._listeners["run"],
            output=self._stdout,
        )

    async def run(self, command_line: str | Sequence[str] | None = None) -> Outcome:
        """Dispatch one command line (default: the process arguments)."""
        cmd = command_line if command_line is not None else _process_argv()
        return await self.dispatcher().dispatch(cmd)

    def _exit_action(self):
        policy = self.options.exit
        if callable(policy) and not isinstance(policy, bool):
            return policy
        if policy:
            return sys.exit
        return None

    def _request_exit(self) -> None:
        if self._repl_instance is not None:
            self._repl_instance.request_exit()

    def _install_exit_command(self) -> None:
        if self.options.exit is False:
            return
        if "exit" in self.root.children:
            logger.debug("'exit' already defined by the program; not installing the built-in one")
            return
        self.add(command("exit", "Exit the application").action(self._request_exit))

    def configure_logging(self) -> logging.Logger:
        return init_logger(
            "cmdtree",
            level=self.options.log_level or "WARNING",
            logfile=str(self.options.log_file) if self.options.log_file else None,
        )

    async def repl(self, frontend: BaseCLI | None = None) -> Repl:
        """Run the interactive loop until it terminates and return it."""
        history = HistoryStore(self.options.history_file, self.options.history_size)
        self._install_exit_command()
        if frontend is None:
            frontend = make_cli(self.root, history, help=self.options.help)

        self._repl_instance = Repl(
            self.dispatcher(),
            frontend,
            prompt=self.options.prompt,
            history=history,
            exit_action=self._exit_action(),
            stdout=self._stdout,
            stderr=self._stderr,
        )
        await self._repl_instance.start()
        return self._repl_instance

    async def run_or_repl(self, argv: Sequence[str] | None = None) -> Outcome | None:
        """With arguments run them once, otherwise start the loop (returns None)."""
        tokens = list(argv) if argv is not None else _process_argv()
        if tokens:
            return await self.run(tokens)
        await self.repl()
        return None

    def is_repl(self) -> bool:
        """True once an interactive loop has been started."""
        return self._repl_instance is not None

    def main(self, argv: Sequence[str] | None = None, *, failure_status: int = 1) -> int:
        """
        Synchronous entry point returning a process exit status.

        Resolved values are printed; a rejection prints only its reason
        (no traceback) to stderr and yields `failure_status`.
        """
        self.configure_logging()
        outcome = asyncio.run(self.run_or_repl(argv))
        if outcome is None:
            return 0
        if isinstance(outcome, Rejected):
            print_error(outcome.message, file=self._stderr or sys.stderr)
            return failure_status
        if outcome.value is not None:
            print_line(str(outcome.value), file=self._stdout or sys.stdout)
        return 0


def program(**options: Any) -> Program:
    """
    Create a new program.

    Keyword options are ProgramOptions fields (description, prompt, help,
    version, history_file, history_size, exit, log_level, log_file); they
    override config files and CMDTREE_* environment variables. `prog`,
    `stdout` and `stderr` are passed to Program.
    """
    kwargs = {key: options.pop(key) for key in ("prog", "stdout", "stderr") if key in options}
    return Program(load_options(**options), **kwargs)

#!/usr/bin/env python3
# cmdtree/interface/handler.py
from __future__ import annotations

"""
Command dispatch.

Every command line, whether it comes from argv or the interactive loop,
goes through Dispatcher.dispatch and comes back as Resolved(value) or
Rejected(reason). Handlers may return a value or an awaitable; both are
reduced to the same outcome at a single await point.
"""

import inspect
import logging
import sys
from typing import IO, Any, Callable, Sequence

from cmdtree.commands import (
    Command,
    Outcome,
    Rejected,
    Resolved,
    ValidationError,
)
from cmdtree.interface.parser import (
    ArgparseAdapter,
    ParsedError,
    ParsedOutput,
    tokenize,
)
from cmdtree.ui import print_line

logger = logging.getLogger("cmdtree.dispatch")

NO_HANDLER_MESSAGE = "no handler for command"

RunListener = Callable[[Any], None]


class Dispatcher:
    """
    Resolve command lines against a published tree and run their handlers.

    Args:
        root: Root of the command tree (read-only from here on).
        adapter: Argument grammar adapter; defaults to ArgparseAdapter().
        listeners: Callables notified with the raw command before each dispatch.
        output: Stream receiving help/version text.
    """

    def __init__(
        self,
        root: Command,
        adapter: ArgparseAdapter | None = None,
        *,
        listeners: list[RunListener] | None = None,
        output: IO[str] | None = None,
    ) -> None:
        self.root = root
        self.adapter = adapter or ArgparseAdapter()
        self.listeners = listeners if listeners is not None else []
        self._output = output

    def _emit_run(self, command_line: str | Sequence[str]) -> None:
        for listener in list(self.listeners):
            try:
                listener(command_line)
            except Exception:
                logger.exception("run listener %r failed", listener)

    async def dispatch(self, command_line: str | Sequence[str]) -> Outcome:
        """Run one command line and return its outcome."""
        self._emit_run(command_line)

        if isinstance(command_line, str):
            try:
                tokens = tokenize(command_line)
            except ValueError as exc:
                return Rejected(ValidationError(str(exc)))
        else:
            tokens = list(command_line)

        parsed = self.adapter.parse(self.root, tokens)

        if isinstance(parsed, ParsedError):
            logger.debug("validation failed for %r: %s", tokens, parsed.message)
            return Rejected(ValidationError(parsed.message))

        if isinstance(parsed, ParsedOutput):
            print_line(parsed.text, file=self._output or sys.stdout)
            return Resolved(None)

        node = parsed.node
        if node.handler is None:
            return Rejected(ValidationError(NO_HANDLER_MESSAGE))

        logger.debug("running '%s' with %r", node.path, parsed.args)
        try:
            result = node.invoke(**parsed.args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.debug("handler '%s' failed: %s", node.path, exc)
            return Rejected(exc)
        return Resolved(result)

#!/usr/bin/env python3
# cmdtree/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (completion + history recall) when stdin is a terminal
    2) plain stream reading (pipes, files, tests)

Both raise EOFError when the input is exhausted and let KeyboardInterrupt
propagate, so the loop can decide how to terminate.
"""

import asyncio
import sys
from typing import IO, Callable

from cmdtree.commands import Command
from cmdtree.db import HistoryStore
from cmdtree.interface.completion import _split_current_token, suggest


class BaseCLI:
    """
    Base interface for CLI frontends.

    Subclasses should implement:
        - setup()
        - get_line()
        - teardown()

    This base also provides context manager support to guarantee teardown.
    """

    def setup(self) -> None:  # pragma: no cover - interface
        ...

    async def get_line(self, prompt: str) -> str:  # pragma: no cover - interface
        raise EOFError

    def teardown(self) -> None:  # pragma: no cover - interface
        ...

    # Context manager helpers
    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Line editor with history recall and live completion."""

    def __init__(
        self,
        root: Command,
        history: HistoryStore | None = None,
        *,
        help: bool = True,
        session_factory: Callable[..., object] | None = None,
    ) -> None:
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import InMemoryHistory

        class _Completer(Completer):
            def get_completions(self, document, complete_event):
                text_before_cursor = document.text_before_cursor
                # compute the current token prefix using shlex-splitting
                _, current_prefix = _split_current_token(text_before_cursor)
                replace_len = len(current_prefix)
                for word in suggest(root, text_before_cursor, help=help):
                    # replace exactly the current token
                    yield Completion(word, start_position=-replace_len)

        self._history = history.as_prompt_history() if history is not None else InMemoryHistory()
        factory = session_factory or PromptSession
        self._session = factory(
            history=self._history,
            completer=_Completer(),
            complete_while_typing=False,
        )

    async def get_line(self, prompt: str) -> str:
        return await self._session.prompt_async(prompt)  # type: ignore[attr-defined]

    def teardown(self) -> None:
        # persistence is handled by the loop's HistoryStore
        pass


# ===== Fallback: plain stream =====
class StreamCLI(BaseCLI):
    """Reads lines from a text stream; the prompt is written to `output`."""

    def __init__(self, stream: IO[str] | None = None, output: IO[str] | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._output = output if output is not None else sys.stdout

    async def get_line(self, prompt: str) -> str:
        if prompt:
            self._output.write(prompt)
            self._output.flush()
        line = await asyncio.to_thread(self._stream.readline)
        if line == "":
            raise EOFError
        return line.rstrip("\r\n")


def make_cli(root: Command, history: HistoryStore | None = None, *, help: bool = True) -> BaseCLI:
    """
    Factory to select the best available CLI frontend at runtime.
    """
    if sys.stdin.isatty() and sys.stdout.isatty():
        return PromptToolkitCLI(root, history, help=help)
    return StreamCLI()

#!/usr/bin/env python3
# cmdtree/interface/__init__.py
from __future__ import annotations

"""
Package for command dispatch and the interactive console.

Provides:
- Tokenizer and the argparse-backed argument grammar adapter.
- Token-aware completion helpers.
- The Dispatcher bridging sync/async handlers into one outcome.
- CLI frontends (prompt_toolkit / plain stream).
- The interactive loop (Repl).
"""


# Parser FIRST (everything else depends on it)
from .parser import (
    ArgparseAdapter,
    ParsedError,
    ParsedOk,
    ParsedOutput,
    ParseResult,
    tokenize,
)

# Completion
from .completion import suggest

# Dispatcher
from .handler import NO_HANDLER_MESSAGE, Dispatcher

# CLI frontends (after completion is available)
from .cli import BaseCLI, PromptToolkitCLI, StreamCLI, make_cli

# Loop
from .repl import Repl, ReplState

__all__ = [
    # parser
    "ArgparseAdapter",
    "ParsedError",
    "ParsedOk",
    "ParsedOutput",
    "ParseResult",
    "tokenize",
    # completion
    "suggest",
    # handler
    "NO_HANDLER_MESSAGE",
    "Dispatcher",
    # cli
    "BaseCLI",
    "PromptToolkitCLI",
    "StreamCLI",
    "make_cli",
    # repl
    "Repl",
    "ReplState",
]

#!/usr/bin/env python3
# cmdtree/__init__.py
from __future__ import annotations
"""
cmdtree: declare a tree of commands, then run argv once or loop interactively.

Public API:
- program / Program: the facade owning the tree, options and entry points.
- command / argument / option: builders for the tree.
- Resolved / Rejected: the outcome of every dispatch.
- DefinitionError / ValidationError: tree and input failures.
"""

__version__ = "0.1.0"

from cmdtree.commands import (
    Argument,
    Command,
    DefinitionError,
    Outcome,
    Rejected,
    Resolved,
    ValidationError,
    argument,
    command,
    option,
)
from cmdtree.db import HistoryStore, ProgramOptions, load_options
from cmdtree.interface import Dispatcher, Repl, ReplState
from cmdtree.program import Program, program

__all__ = [
    "__version__",
    "Argument",
    "Command",
    "DefinitionError",
    "Outcome",
    "Rejected",
    "Resolved",
    "ValidationError",
    "argument",
    "command",
    "option",
    "HistoryStore",
    "ProgramOptions",
    "load_options",
    "Dispatcher",
    "Repl",
    "ReplState",
    "Program",
    "program",
]

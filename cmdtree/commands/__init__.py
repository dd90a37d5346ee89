#!/usr/bin/env python3
# cmdtree/commands/__init__.py
from __future__ import annotations

"""
Package for command tree declaration.

Provides:
- Data structures and protocols (`Command`, `Argument`, `CommandCallback`).
- The dispatch outcome (`Resolved`, `Rejected`, `Outcome`).
- Error types (`DefinitionError`, `ValidationError`).
- Factories (`command`, `argument`, `option`) and `validate_tree`.

This package re-exports public APIs from:
- command_types.py
- commands.py
"""


# Re-export from submodules
from .command_types import (
    Argument,
    Command,
    CommandCallback,
    DefinitionError,
    Outcome,
    Rejected,
    Resolved,
    ValidationError,
)
from .commands import argument, command, option, validate_tree

__all__ = [
    "Argument",
    "Command",
    "CommandCallback",
    "DefinitionError",
    "Outcome",
    "Rejected",
    "Resolved",
    "ValidationError",
    "argument",
    "command",
    "option",
    "validate_tree",
]

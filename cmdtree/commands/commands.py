#!/usr/bin/env python3
# cmdtree/commands/commands.py
from __future__ import annotations

"""
Command factories and tree validation.

This module provides:
- command: factory creating a Command node (optionally with its handler).
- argument / option: factories for Argument declarations.
- validate_tree: registration-time check of a whole subtree.
"""

import argparse
from typing import Any, Optional

from cmdtree.commands.command_types import (
    Argument,
    Command,
    CommandCallback,
    DefinitionError,
)


def command(
    name: str,
    description: str | None = None,
    *,
    handler: Optional[CommandCallback] = None,
) -> Command:
    """
    Create a new command node.

    Example:
        command("greet", "Say hello").argument("name").action(lambda name: f"hi {name}")
    """
    node = Command(name=name, description=(description or "").strip())
    if handler is not None:
        node.set_handler(handler)
    return node


def argument(name: str, description: str = "", **options: Any) -> Argument:
    """Build a positional Argument declaration."""
    return Argument(name, description, positional=True, **options)


def option(name: str, description: str = "", **options: Any) -> Argument:
    """Build an --option Argument declaration."""
    return Argument(name, description, positional=False, **options)


def validate_tree(root: Command) -> None:
    """
    Re-check the invariants of a subtree before it is published.

    Builder methods already refuse conflicts; this catches fields that were
    assigned directly on the dataclass.
    """
    for node in root.walk():
        defaults = [c.name for c in node.children.values() if c.is_default]
        if len(defaults) > 1:
            raise DefinitionError(
                f"Command '{node.name}' has more than one default child: {', '.join(defaults)}.")
        for key, child in node.children.items():
            if key != child.name:
                raise DefinitionError(
                    f"Command '{child.name}' is registered under a different name '{key}'.")
            if child.parent is not node:
                raise DefinitionError(
                    f"Command '{child.name}' is attached to more than one parent.")
        seen: set[str] = set()
        for spec in node.arguments:
            if spec.dest in seen:
                raise DefinitionError(
                    f"Argument '{spec.name}' declared twice on command '{node.name}'.")
            seen.add(spec.dest)
        if node.handler is not None and not callable(node.handler):
            raise DefinitionError(
                f"Handler for command '{node.name}' must be callable.")
        _check_parser(node)


def _check_parser(node: Command) -> None:
    """Build the node's parser once so argparse refusals surface now, not at dispatch."""
    # imported here: the parser module depends on this package
    from cmdtree.interface.parser import ArgparseAdapter

    try:
        ArgparseAdapter(version="").build_parser(node)
    except (argparse.ArgumentError, ValueError, TypeError) as exc:
        raise DefinitionError(
            f"Command '{node.path or node.name}' has an invalid argument declaration: {exc}") from exc

#!/usr/bin/env python3
# cmdtree/interface/completion.py
from __future__ import annotations

"""
Command line completion utilities for the interactive loop.

This module offers token-aware suggestions for:
- Command tokens: child names of the node reached so far.
- Option tokens ('-' prefix): the declared flags of that node.
- Option values: declared choices of the option just typed.
"""

import shlex

from cmdtree.commands import Command
from cmdtree.interface.parser import HELP_FLAGS


def _split_current_token(raw_input: str) -> tuple[list[str], str]:
    """
    Return (parts, current_prefix).

    Behavior:
      - Use shlex.split for shell-like parsing (POSIX).
      - If trailing whitespace exists, append an empty token to signal a new one.
      - On malformed quotes, fall back to whitespace splitting.
    """
    if not raw_input:
        return [], ""

    try:
        parts = shlex.split(raw_input, posix=True)
        if raw_input[-1].isspace():
            parts.append("")
    except ValueError:
        parts = raw_input.split()
        if raw_input[-1].isspace():
            parts.append("")
    current_prefix = parts[-1] if parts else ""
    return parts, current_prefix


def _option_names(node: Command, *, help: bool) -> list[str]:
    names = [flag for spec in node.arguments for flag in spec.flags()]
    if help:
        names.extend(HELP_FLAGS)
    return names


def suggest(root: Command, text_before_cursor: str, *, help: bool = True) -> list[str]:
    """
    Produce suggestions based on the current buffer content.

    Strategy:
      1) Walk completed tokens through child names (no default fallback:
         suggestions follow what was typed).
      2) Current token starting with '-': suggest the node's option flags.
      3) Previous token an option with choices: suggest those choices.
      4) Otherwise suggest child names of the node reached.
    """
    raw_buffer = text_before_cursor.lstrip()
    parts, current_prefix = _split_current_token(raw_buffer)
    completed = parts[:-1] if parts else []

    node = root
    for token in completed:
        child = node.children.get(token)
        if child is None:
            break
        node = child

    if current_prefix.startswith("-"):
        return sorted(w for w in _option_names(node, help=help) if w.startswith(current_prefix))

    if completed:
        previous = completed[-1]
        for spec in node.arguments:
            if previous in spec.flags() and spec.choices and not spec.is_flag:
                values = [str(choice) for choice in spec.choices]
                return [v for v in values if v.startswith(current_prefix)]

    return sorted(name for name in node.children if name.startswith(current_prefix))

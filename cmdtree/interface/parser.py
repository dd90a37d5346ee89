#!/usr/bin/env python3
# cmdtree/interface/parser.py
from __future__ import annotations

"""
Argument parsing for the command tree.

Responsibilities:
- Tokenize a command line into shell-like tokens.
- Resolve tokens against the tree (child names, default children).
- Parse the remaining tokens with argparse and hand back a tagged result:
  ParsedOk(node, args) / ParsedError(message) / ParsedOutput(text).

argparse never exits the process or prints here: failures are raised back
into this module and help/version text is captured.
"""

import argparse
import difflib
import shlex
from dataclasses import dataclass, field
from typing import Any, Sequence, Union

from cmdtree.commands import Argument, Command

HELP_FLAGS = ("-h", "--help")
VERSION_FLAG = "--version"

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def tokenize(command_line: str) -> list[str]:
    """Split a raw command line into tokens using POSIX rules."""
    return shlex.split(command_line, posix=True)


# ---------------------------------------------------------------------------
# Tagged results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedOk:
    node: Command
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParsedError:
    message: str


@dataclass(frozen=True, slots=True)
class ParsedOutput:
    """Help or version text requested instead of a command run."""
    text: str


ParseResult = Union[ParsedOk, ParsedError, ParsedOutput]


# ---------------------------------------------------------------------------
# argparse plumbing
# ---------------------------------------------------------------------------


class _ParseFailure(Exception):
    pass


class _ParseExit(Exception):
    pass


class _CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting and captures its output."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.captured: list[str] = []

    def error(self, message: str):  # type: ignore[override]
        raise _ParseFailure(message)

    def exit(self, status: int = 0, message: str | None = None):  # type: ignore[override]
        if message:
            self.captured.append(message)
        raise _ParseExit()

    def _print_message(self, message: str, file: Any = None) -> None:
        if message:
            self.captured.append(message)


def _to_bool(text_value: str) -> bool:
    lowered = text_value.strip().lower()
    if lowered in _BOOL_TRUE:
        return True
    if lowered in _BOOL_FALSE:
        return False
    raise ValueError(text_value)


_to_bool.__name__ = "bool"  # argparse names the converter in its messages


def _argparse_kwargs(spec: Argument) -> dict[str, Any]:
    """Translate an Argument declaration into add_argument keywords."""
    kwargs: dict[str, Any] = {"help": spec.description or None}

    if spec.is_flag:
        kwargs["action"] = "store_true"
        kwargs["dest"] = spec.dest
        if spec.default is not None:
            kwargs["default"] = spec.default
        return kwargs

    converter = _to_bool if spec.type is bool else spec.type
    if converter is not str:
        kwargs["type"] = converter
    if spec.choices is not None:
        kwargs["choices"] = list(spec.choices)

    if spec.variadic:
        kwargs["nargs"] = "+" if spec.is_required else "*"
        kwargs["default"] = [] if spec.default is None else spec.default
    else:
        kwargs["default"] = spec.default

    if spec.positional:
        kwargs["metavar"] = spec.name
        if not spec.is_required and not spec.variadic:
            kwargs["nargs"] = "?"
    else:
        kwargs["dest"] = spec.dest
        kwargs["required"] = spec.is_required
        kwargs["metavar"] = spec.name.upper()
    return kwargs


def _commands_epilog(node: Command) -> str | None:
    if not node.children:
        return None
    width = max(len(name) for name in node.children)
    lines = ["Commands:"]
    for child in node.children.values():
        marker = " [default]" if child.is_default else ""
        lines.append(f"  {child.name.ljust(width)}  {child.description}{marker}".rstrip())
    return "\n".join(lines)


def _suggest_similar_names(name: str, node: Command) -> str:
    """Return a short suggestion string for misspelled commands."""
    matches = difflib.get_close_matches(name, list(node.children), n=3, cutoff=0.6)
    return f" Did you mean: {', '.join(matches)}?" if matches else ""


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class ArgparseAdapter:
    """
    Resolve a token list against a command tree.

    Args:
        prog: Program name shown in usage lines.
        help: Add -h/--help to every command.
        version: Version string for a root-level --version, or None.
    """

    def __init__(self, *, prog: str = "", help: bool = True, version: str | None = None) -> None:
        self.prog = prog
        self.help = help
        self.version = version

    def _is_builtin_flag(self, token: str, node: Command) -> bool:
        if self.help and token in HELP_FLAGS:
            return True
        return self.version is not None and node.parent is None and token == VERSION_FLAG

    def resolve(self, root: Command, tokens: Sequence[str]) -> tuple[Command, list[str]]:
        """Walk child names (and default children) and return (node, remaining tokens)."""
        node = root
        index = 0
        while node.children:
            token = tokens[index] if index < len(tokens) else None
            if token is not None and token in node.children:
                node = node.children[token]
                index += 1
                continue
            default = node.default_child
            if default is not None and not (token is not None and self._is_builtin_flag(token, node)):
                node = default
                continue
            break
        return node, list(tokens[index:])

    def build_parser(self, node: Command) -> _CommandParser:
        prog = " ".join(part for part in (self.prog, node.path) if part) or None
        parser = _CommandParser(
            prog=prog,
            description=node.description or None,
            epilog=_commands_epilog(node),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            add_help=self.help,
            allow_abbrev=False,
        )
        if self.version is not None and node.parent is None:
            parser.add_argument(VERSION_FLAG, action="version", version=self.version)
        for spec in node.arguments:
            kwargs = _argparse_kwargs(spec)
            if spec.positional:
                parser.add_argument(spec.dest, **kwargs)
            else:
                parser.add_argument(*spec.flags(), **kwargs)
        return parser

    def parse(self, root: Command, tokens: Sequence[str]) -> ParseResult:
        if not tokens and root.handler is None and root.default_child is None:
            return ParsedError("Not enough non-option arguments: got 0, need at least 1")

        node, remaining = self.resolve(root, tokens)

        # Bare word left over at a namespace: nothing can consume it.
        if node.children and remaining and not remaining[0].startswith("-"):
            takes_positionals = node.handler is not None and any(
                a.positional for a in node.arguments)
            if not takes_positionals:
                name = remaining[0]
                return ParsedError(
                    f"Unknown command: {name}.{_suggest_similar_names(name, node)}")

        parser = self.build_parser(node)
        try:
            namespace = parser.parse_args(remaining)
        except _ParseExit:
            return ParsedOutput("".join(parser.captured).rstrip("\n"))
        except _ParseFailure as exc:
            return ParsedError(f"{parser.prog}: {exc}" if node.parent is not None else str(exc))
        except argparse.ArgumentError as exc:
            return ParsedError(str(exc))
        return ParsedOk(node, vars(namespace))

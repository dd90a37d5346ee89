#!/usr/bin/env python3
# cmdtree/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- CommandCallback: the callable protocol for any command handler.
- Argument: a declared positional argument or option, consumed by the parser.
- Command: a named node of the command tree with arguments, handler and children.
- Resolved / Rejected: the two-variant outcome every dispatch reduces to.
- DefinitionError / ValidationError: tree-construction and input failures.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterator, Protocol, Sequence, Union


class DefinitionError(ValueError):
    """Malformed command tree (duplicate names/defaults, late mutation)."""


class ValidationError(Exception):
    """Command line did not resolve to a command or failed argument checks."""


class CommandCallback(Protocol):
    """Protocol for any command handler; may return a value or an awaitable."""

    def __call__(self, **kwargs: Any) -> Any | Awaitable[Any]:  # pragma: no cover - signature only
        ...


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Resolved:
    """Successful dispatch carrying the handler's return value."""
    value: Any = None

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Rejected:
    """
    Failed dispatch.

    `reason` is a ValidationError for input problems (never raised, so no
    traceback) or the exception raised by the handler itself.
    """
    reason: BaseException

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        # bare `raise RuntimeError()` has no text; show the class instead
        return str(self.reason) or type(self.reason).__name__

    @property
    def is_validation(self) -> bool:
        return isinstance(self.reason, ValidationError)

    def unwrap(self) -> Any:
        raise self.reason

    def __str__(self) -> str:
        return self.message


Outcome = Union[Resolved, Rejected]


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


def _check_name(name: str, what: str) -> str:
    if not isinstance(name, str) or not name or any(ch.isspace() for ch in name):
        raise DefinitionError(f"Invalid {what} name: {name!r}")
    return name


# Spellings owned by the parser itself (help on every node, version at the root)
RESERVED_FLAGS = frozenset({"-h", "--help", "--version"})


def _check_flags(node: "Command", spec: "Argument") -> None:
    """Refuse option spellings that are reserved or already taken on `node`."""
    taken = {flag: other.name for other in node.arguments for flag in other.flags()}
    for flag in spec.flags():
        if flag in RESERVED_FLAGS:
            raise DefinitionError(
                f"Option '{spec.name}' on command '{node.name}' uses reserved flag '{flag}'.")
        if flag in taken:
            raise DefinitionError(
                f"Option '{spec.name}' on command '{node.name}' reuses flag '{flag}' "
                f"of option '{taken[flag]}'.")
    if len(set(spec.flags())) != len(spec.flags()):
        raise DefinitionError(
            f"Option '{spec.name}' on command '{node.name}' repeats a flag.")


@dataclass(frozen=True, slots=True)
class Argument:
    """
    A declared argument of a command.

    Attributes:
        name: Argument name; dashes become underscores for the handler keyword.
        description: Help text.
        positional: True for positional arguments, False for --options.
        required: None means "positional without default" / "option: no".
        type: Converter applied to the raw token; bool declares a flag option.
        choices: Allowed values, if restricted.
        default: Value used when the argument is absent.
        variadic: Collect the remaining tokens into a list.
        aliases: Extra option spellings, e.g. ('-n',).
    """
    name: str
    description: str = ""
    positional: bool = True
    required: bool | None = None
    type: Callable[[str], Any] = str
    choices: Sequence[Any] | None = None
    default: Any = None
    variadic: bool = False
    aliases: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_name(self.name, "argument")
        if self.positional and self.aliases:
            raise DefinitionError(
                f"Positional argument '{self.name}' cannot have aliases.")
        for alias in self.aliases:
            if (not isinstance(alias, str) or len(alias) < 2 or not alias.startswith("-")
                    or any(ch.isspace() for ch in alias)):
                raise DefinitionError(
                    f"Invalid alias {alias!r} for option '{self.name}': must start with '-'.")

    @property
    def dest(self) -> str:
        """Keyword name passed to the handler."""
        return self.name.replace("-", "_")

    @property
    def is_required(self) -> bool:
        if self.required is not None:
            return self.required
        return self.positional and self.default is None

    @property
    def is_flag(self) -> bool:
        return not self.positional and self.type is bool

    def flags(self) -> list[str]:
        """Option spellings (empty for positionals)."""
        if self.positional:
            return []
        return [f"--{self.name}", *self.aliases]


# ---------------------------------------------------------------------------
# Command node
# ---------------------------------------------------------------------------


@dataclass(eq=False, slots=True)
class Command:
    """
    A node of the command tree.

    Important fields:
        name: Token matching this node, unique among siblings.
        description: Short, user-facing description.
        arguments: Ordered argument declarations (read by the parser only).
        children: Child commands by name, in registration order.
        is_default: Resolved when the parent gets no matching child token.
        handler: Callable invoked with the parsed arguments as keywords;
                 None marks a namespace-only node.
        parent: Owning node once attached.

    Builder methods return the node for chaining and raise DefinitionError
    as soon as a conflict appears. Once frozen (published to a program)
    the node refuses further changes.
    """

    name: str
    description: str = ""
    arguments: list[Argument] = field(default_factory=list)
    children: dict[str, "Command"] = field(default_factory=dict)
    is_default: bool = False
    handler: CommandCallback | None = None
    parent: "Command | None" = field(default=None, repr=False)
    _frozen: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        _check_name(self.name, "command")

    # ---------------- Builder ----------------

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise DefinitionError(
                f"Command '{self.path or self.name}' is already registered and cannot be changed.")

    def describe(self, text: str) -> "Command":
        """Set the description."""
        self._ensure_mutable()
        self.description = (text or "").strip()
        return self

    def add_argument(self, spec: Argument) -> "Command":
        """Append an argument declaration."""
        self._ensure_mutable()
        if any(a.dest == spec.dest for a in self.arguments):
            raise DefinitionError(
                f"Argument '{spec.name}' declared twice on command '{self.name}'.")
        if spec.positional and self.arguments:
            last = [a for a in self.arguments if a.positional]
            if last and last[-1].variadic:
                raise DefinitionError(
                    f"Positional '{spec.name}' follows variadic '{last[-1].name}' on command '{self.name}'.")
        _check_flags(self, spec)
        self.arguments.append(spec)
        return self

    def argument(self, name: str, description: str = "", **options: Any) -> "Command":
        """Declare a positional argument."""
        return self.add_argument(Argument(name, description, positional=True, **options))

    def option(self, name: str, description: str = "", **options: Any) -> "Command":
        """Declare an --option (use type=bool for a flag)."""
        return self.add_argument(Argument(name, description, positional=False, **options))

    def add_child(self, node: "Command") -> "Command":
        """Attach a child command."""
        self._ensure_mutable()
        if node is self or node.parent is not None:
            raise DefinitionError(
                f"Command '{node.name}' is already attached to a parent.")
        if node.name in self.children:
            raise DefinitionError(
                f"Command '{node.name}' already registered under '{self.name}'.")
        if node.is_default and self.default_child is not None:
            raise DefinitionError(
                f"Command '{self.name}' already has a default child "
                f"'{self.default_child.name}'; cannot also mark '{node.name}'.")
        node.parent = self
        self.children[node.name] = node
        return self

    def mark_default(self) -> "Command":
        """Mark this node as its parent's default child."""
        self._ensure_mutable()
        if self.parent is not None:
            current = self.parent.default_child
            if current is not None and current is not self:
                raise DefinitionError(
                    f"Command '{self.parent.name}' already has a default child "
                    f"'{current.name}'; cannot also mark '{self.name}'.")
        self.is_default = True
        return self

    def set_handler(self, fn: CommandCallback) -> "Command":
        """Set the handler invoked with the parsed arguments."""
        self._ensure_mutable()
        if not callable(fn):
            raise DefinitionError(
                f"Handler for command '{self.name}' must be callable.")
        self.handler = fn
        return self

    # Short spellings for chaining
    add = add_child
    default = mark_default
    action = set_handler

    def freeze(self) -> None:
        """Publish this subtree: no further builder calls are accepted."""
        self._frozen = True
        for child in self.children.values():
            child.freeze()

    # ---------------- Introspection ----------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def default_child(self) -> "Command | None":
        for child in self.children.values():
            if child.is_default:
                return child
        return None

    @property
    def path(self) -> str:
        """Space separated names from the root's first child down to this node."""
        names: list[str] = []
        node: Command | None = self
        while node is not None and node.parent is not None:
            names.append(node.name)
            node = node.parent
        return " ".join(reversed(names))

    def walk(self) -> Iterator["Command"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children.values():
            yield from child.walk()

    def invoke(self, **kwargs: Any) -> Any:
        """Execute the handler with parsed arguments."""
        if self.handler is None:
            raise ValidationError("no handler for command")
        return self.handler(**kwargs)

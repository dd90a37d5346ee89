#!/usr/bin/env python3
# cmdtree/ui/utils/ansi.py
from __future__ import annotations

import os
import re
from typing import IO, Optional

# ---- Core SGR maps ----------------------------------------------------------

# Only the styles the runner actually renders (levels, prompts, rejections).
ANSI = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",

    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",

    "bright_black": "\x1b[90m",
    "bright_red": "\x1b[91m",
}

ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_color_enabled_cache: Optional[bool] = None  # cached across calls


# ---- Utilities --------------------------------------------------------------

def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_REGEX.sub("", text)


def color_enabled(stream: IO[str] | None = None) -> bool:
    """
    Decide whether ANSI escapes should be written.

    Honors NO_COLOR / FORCE_COLOR; otherwise requires a TTY stream.
    The environment part of the answer is cached.
    """
    global _color_enabled_cache
    if _color_enabled_cache is None:
        if os.environ.get("NO_COLOR"):
            _color_enabled_cache = False
        elif os.environ.get("FORCE_COLOR"):
            _color_enabled_cache = True
        elif os.name == "nt":
            # Windows Terminal / ConEmu / ANSICON understand VT sequences
            _color_enabled_cache = bool(
                os.environ.get("WT_SESSION")
                or os.environ.get("ANSICON")
                or os.environ.get("ConEmuANSI") == "ON"
            )
        else:
            _color_enabled_cache = True

    if not _color_enabled_cache:
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty()) if isatty else False
    except ValueError:
        # closed stream
        return False


def reset_color_cache() -> None:
    """Forget the cached environment decision (used after env changes)."""
    global _color_enabled_cache
    _color_enabled_cache = None


# ---- High-level helpers -----------------------------------------------------

def colorize(text: str, *styles: str) -> str:
    """
    Wrap text with one or more SGR styles/keys from ANSI (e.g., 'red', 'bold').
    Always auto-resets at the end.
    """
    seq = "".join(ANSI[s] for s in styles if s in ANSI)
    return f"{seq}{text}{ANSI['reset']}" if seq else text

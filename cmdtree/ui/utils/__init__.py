#!/usr/bin/env python3
# cmdtree/ui/utils/__init__.py
from __future__ import annotations
from .ansi import (
    ANSI,
    strip_ansi,
    color_enabled,
    reset_color_cache,
    colorize,
)
from .console import PRINT_MUTEX, print_line, print_error

__all__ = [
    "ANSI",
    "strip_ansi",
    "color_enabled",
    "reset_color_cache",
    "colorize",
    "PRINT_MUTEX",
    "print_line",
    "print_error",
]

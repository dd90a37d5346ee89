#!/usr/bin/env python3
# cmdtree/ui/__init__.py
from __future__ import annotations
# Re-export convenient top-level API
from .utils import (
    ANSI,
    strip_ansi,
    color_enabled,
    reset_color_cache,
    colorize,
    PRINT_MUTEX,
    print_line,
    print_error,
)
from .static import (
    init_logger,
    ColorizingStreamHandler,
    PlainFormatter,
)

__all__ = [
    "ANSI",
    "strip_ansi",
    "color_enabled",
    "reset_color_cache",
    "colorize",
    "PRINT_MUTEX",
    "print_line",
    "print_error",
    "init_logger",
    "ColorizingStreamHandler",
    "PlainFormatter",
]

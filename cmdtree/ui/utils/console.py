#!/usr/bin/env python3
# cmdtree/ui/utils/console.py
from __future__ import annotations

import sys
import threading
from typing import IO

from .ansi import color_enabled, colorize

# Single shared print mutex for all console output (results, errors, logging).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file: IO[str] | None = None, flush: bool = False) -> None:
    """Thread-safe single-line print."""
    file = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        file.write(f"{text}\n")
        if flush:
            file.flush()


def print_error(text: str, *, file: IO[str] | None = None) -> None:
    """Print a failure message, red when the target stream is a color terminal."""
    file = file if file is not None else sys.stderr
    if color_enabled(file):
        text = colorize(text, "red")
    print_line(text, file=file, flush=True)

#!/usr/bin/env python3
# cmdtree/db/__init__.py
from __future__ import annotations

"""
Persistence and settings: history file store and program options.
"""

from .history import DEFAULT_HISTORY_SIZE, HistoryStore, PromptHistory
from .config import (
    DEFAULT_PROMPT,
    DEFAULTS,
    ProgramOptions,
    load_options,
)

__all__ = [
    "DEFAULT_HISTORY_SIZE",
    "HistoryStore",
    "PromptHistory",
    "DEFAULT_PROMPT",
    "DEFAULTS",
    "ProgramOptions",
    "load_options",
]

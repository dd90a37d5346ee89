#!/usr/bin/env python3
# cmdtree/db/history.py
from __future__ import annotations

"""
Persistent, bounded command history.

The sink is a UTF-8 text file with one command line per line, oldest first.
Appends are written through immediately; when the retention bound trims the
oldest entries the file is rewritten. Any OSError while reading or writing
is logged and remembered in `last_error`, never raised: a broken history
file must not stop the interactive loop.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from prompt_toolkit.history import History

logger = logging.getLogger("cmdtree.history")

DEFAULT_HISTORY_SIZE = 500


class HistoryStore:
    """
    Ordered record of raw command lines.

    Args:
        path: History file, or None for a session-only (in-memory) history.
        size: Maximum number of retained entries; <= 0 keeps nothing.
    """

    def __init__(self, path: str | Path | None = None, size: int = DEFAULT_HISTORY_SIZE) -> None:
        self.path = Path(path).expanduser() if path is not None else None
        self.size = size
        self.entries: list[str] = []
        self.last_error: OSError | None = None

    # ---------------- Persistence ----------------

    def _report(self, action: str, exc: OSError) -> None:
        self.last_error = exc
        logger.warning("Could not %s history file %s: %s", action, self.path, exc)

    def load(self) -> list[str]:
        """Read the sink into memory; empty when absent or unreadable."""
        if self.path is None:
            return list(self.entries)
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self.entries = []
            return []
        except OSError as exc:
            self._report("read", exc)
            self.entries = []
            return []

        lines = [line for line in text.splitlines() if line.strip()]
        self.entries = self._bounded(lines)
        return list(self.entries)

    def append(self, line: str) -> None:
        """Record one raw line, trimming the oldest entries past the bound."""
        line = line.replace("\r", " ").replace("\n", " ")
        if self.size <= 0:
            return
        self.entries.append(line)
        trimmed = len(self.entries) > self.size
        self.entries = self._bounded(self.entries)

        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if trimmed:
                self._rewrite()
            else:
                separator = "\n" if self._missing_final_newline() else ""
                with self.path.open("a", encoding="utf-8", newline="\n") as f:
                    f.write(separator + line + "\n")
        except OSError as exc:
            self._report("write", exc)

    def clear(self) -> None:
        """Forget all entries and truncate the sink."""
        self.entries = []
        if self.path is None:
            return
        try:
            if self.path.exists():
                self.path.write_text("", encoding="utf-8")
        except OSError as exc:
            self._report("clear", exc)

    def _rewrite(self) -> None:
        assert self.path is not None
        payload = "".join(f"{entry}\n" for entry in self.entries)
        self.path.write_text(payload, encoding="utf-8", newline="\n")

    def _missing_final_newline(self) -> bool:
        """True when the sink has content whose last line is unterminated."""
        assert self.path is not None
        try:
            with self.path.open("rb") as f:
                f.seek(0, os.SEEK_END)
                if f.tell() == 0:
                    return False
                f.seek(-1, os.SEEK_END)
                return f.read(1) != b"\n"
        except FileNotFoundError:
            return False

    def _bounded(self, lines: list[str]) -> list[str]:
        if self.size <= 0:
            return []
        return lines[-self.size:]

    # ---------------- Views ----------------

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def as_prompt_history(self) -> "PromptHistory":
        """prompt_toolkit History backed by this store (for up-arrow recall)."""
        return PromptHistory(self)


class PromptHistory(History):
    """
    Read-only prompt_toolkit view of a HistoryStore.

    prompt_toolkit keeps the lines accepted during the session in memory;
    persisting them is the interactive loop's job (it appends after each
    dispatch), so store_string does nothing.
    """

    def __init__(self, store: HistoryStore) -> None:
        self._store = store
        super().__init__()

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects the most recent entry first
        return list(reversed(self._store.entries))

    def store_string(self, string: str) -> None:
        pass

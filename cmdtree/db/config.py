#!/usr/bin/env python3
# cmdtree/db/config.py
from __future__ import annotations

"""
Program options loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) Files in CWD: cmdtree.json, cmdtree.toml (flat keys or a [cmdtree] table)
  3) Environment variables (CMDTREE_*)
  4) Keyword overrides passed by the host program

Validation:
  - PROMPT: str
  - HISTORY_FILE: None (disabled) or normalized path
  - HISTORY_SIZE: int >= 0
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE: None or normalized path
  - HELP: bool
"""

import json
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Union

from cmdtree.db.history import DEFAULT_HISTORY_SIZE

ENV_PREFIX = "CMDTREE_"
DEFAULT_PROMPT = "> "
DEFAULT_HISTORY_FILE = ".cmdtree_history"

# ---------- defaults ----------


def _default_history_file() -> str:
    return str(Path.home() / DEFAULT_HISTORY_FILE)


DEFAULTS: dict[str, Any] = {
    "DESCRIPTION": None,
    "PROMPT": DEFAULT_PROMPT,
    "HELP": True,
    "VERSION": None,
    "HISTORY_FILE": None,
    "HISTORY_SIZE": DEFAULT_HISTORY_SIZE,
    "EXIT": True,
    "LOG_LEVEL": None,
    "LOG_FILE": None,
}

# Keys that only make sense programmatically (callables, host metadata)
_OVERRIDE_ONLY = {"DESCRIPTION", "VERSION", "EXIT"}


ExitPolicy = Union[bool, Callable[[], Any]]


# ---------- data model ----------

@dataclass(slots=True)
class ProgramOptions:
    """
    Resolved program options.

    history_file None disables persistence; exit is True (default
    sys.exit action), False (no exit command) or a custom callable.
    """
    description: str | None = None
    prompt: str = DEFAULT_PROMPT
    help: bool = True
    version: str | bool | None = None
    history_file: Path | None = None
    history_size: int = DEFAULT_HISTORY_SIZE
    exit: ExitPolicy = True
    log_level: str | None = None
    log_file: Path | None = None


# ---------- file loaders (stdlib) ----------

def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return {}


def _section(data: Mapping[str, Any]) -> dict[str, Any]:
    """Accept both flat files and files with a [cmdtree] table."""
    nested = data.get("cmdtree")
    if isinstance(nested, Mapping):
        return dict(nested)
    return dict(data)


def _find_config_files(base: Path | None = None) -> list[Path]:
    cwd = base or Path.cwd()
    return [
        cwd / "cmdtree.json",
        cwd / "cmdtree.toml",
    ]


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"Expected boolean, got: {val!r}")


def _as_int(val: Any) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    try:
        return int(str(val).strip())
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Expected integer, got: {val!r}") from exc


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none", "null"} else str(val)


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_path(val: Any) -> Path:
    s = str(val)
    # expand both ~ and env vars
    s = os.path.expandvars(os.path.expanduser(s))
    return Path(s).resolve()


def _as_opt_path(val: Any) -> Path | None:
    v = _as_opt_str(val)
    return None if v is None else _as_path(v)


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper().replace("-", "_"): v for k, v in d.items()}


# ---------- merge & load ----------

def _merge_sources(base: Path | None = None, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)
    # resolved per call so a changed HOME is honoured
    merged["HISTORY_FILE"] = _default_history_file()

    for file in _find_config_files(base):
        if file.suffix == ".json":
            data = _load_json_file(file)
        else:
            data = _load_toml_file(file)
        file_values = _normalize_keys(_section(data))
        merged.update({k: v for k, v in file_values.items()
                       if k in DEFAULTS and k not in _OVERRIDE_ONLY})

    env = os.environ if environ is None else environ
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):]
        if name in DEFAULTS and name not in _OVERRIDE_ONLY:
            merged[name] = value
    return merged


def _validate_and_build(config: dict[str, Any]) -> ProgramOptions:
    prompt = config.get("PROMPT", DEFAULTS["PROMPT"])
    if prompt is None:
        prompt = ""
    history_size = _as_int(config.get("HISTORY_SIZE", DEFAULTS["HISTORY_SIZE"]))
    if history_size < 0:
        raise ValueError("HISTORY_SIZE must be >= 0")

    exit_policy = config.get("EXIT", DEFAULTS["EXIT"])
    if exit_policy is None:
        exit_policy = True
    if not isinstance(exit_policy, bool) and not callable(exit_policy):
        raise ValueError(f"EXIT must be a bool or a callable, got {exit_policy!r}")

    version = config.get("VERSION")
    if version is not None and not isinstance(version, (str, bool)):
        version = str(version)

    return ProgramOptions(
        description=_as_opt_str(config.get("DESCRIPTION")),
        prompt=str(prompt),
        help=_as_bool(config.get("HELP", DEFAULTS["HELP"])),
        version=version,
        history_file=_as_opt_path(config.get("HISTORY_FILE")),
        history_size=history_size,
        exit=exit_policy,
        log_level=_as_log_level(config.get("LOG_LEVEL")),
        log_file=_as_opt_path(config.get("LOG_FILE")),
    )


def load_options(
    *,
    base: Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ProgramOptions:
    """
    Merge all sources into validated ProgramOptions.

    Overrides use field names (prompt=..., history_file=None, exit=False);
    an explicit None for history_file disables persistence.
    """
    merged = _merge_sources(base, environ)
    for key, value in overrides.items():
        name = key.upper()
        if name not in DEFAULTS:
            raise TypeError(f"Unknown program option: {key}")
        merged[name] = value
    return _validate_and_build(merged)

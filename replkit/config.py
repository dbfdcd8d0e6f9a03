#!/usr/bin/env python3
# replkit/config.py
from __future__ import annotations

"""
REPL settings loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) replkit.toml in the working directory (flat or nested [repl] table)
  3) REPLKIT_* environment variables

Validation:
  - PROMPT / DESCRIPTION: str
  - TEXT_WIDTH: int >= 20
  - ENABLE_HINTS / ENABLE_COMPLETION / PREDICT_COMMANDS: bool
  - HISTORY_FILE_PATH / LOG_FILE_PATH: None or normalized path
  - LOG_LEVEL: one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
"""

import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

ENV_PREFIX = "REPLKIT_"
CONFIG_FILE_NAME = "replkit.toml"

# ---------- defaults ----------

DEFAULTS: dict[str, Any] = {
    "PROMPT": "> ",
    "DESCRIPTION": "",
    "TEXT_WIDTH": 80,
    "ENABLE_HINTS": True,
    "ENABLE_COMPLETION": True,
    "PREDICT_COMMANDS": False,
    "HISTORY_FILE_PATH": None,
    "LOG_LEVEL": "WARNING",
    "LOG_FILE_PATH": None,
}


# ---------- data model ----------

@dataclass(frozen=True)
class ReplSettings:
    prompt: str = DEFAULTS["PROMPT"]
    description: str = DEFAULTS["DESCRIPTION"]
    text_width: int = DEFAULTS["TEXT_WIDTH"]
    enable_hints: bool = DEFAULTS["ENABLE_HINTS"]
    enable_completion: bool = DEFAULTS["ENABLE_COMPLETION"]
    predict_commands: bool = DEFAULTS["PREDICT_COMMANDS"]
    history_file_path: Path | None = None
    log_level: str = DEFAULTS["LOG_LEVEL"]
    log_file_path: Path | None = None

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)

    def with_overrides(self, **changes: Any) -> "ReplSettings":
        return replace(self, **changes)


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(key: str, val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"{key} must be a boolean, got: {val!r}")


def _as_int(key: str, val: Any) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    try:
        return int(str(val).strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got: {val!r}") from exc


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str:
    lv = _as_opt_str(val) or DEFAULTS["LOG_LEVEL"]
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_opt_path(val: Any) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    # expand both ~ and env vars
    return Path(os.path.expandvars(os.path.expanduser(v))).resolve()


# ---------- file loaders ----------

def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested tables to UPPER_SNAKE keys.
    A top-level [repl] table is unwrapped: {'repl': {'prompt': '$ '}} -> {'PROMPT': '$ '}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            if not prefix and str(k).lower() == "repl" and isinstance(v, Mapping):
                flat.update(_flatten_mapping(v))
                continue
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[key.upper()] = v
    return flat


# ---------- merge & load ----------

def _merge_sources(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)
    merged.update(_flatten_mapping(_load_toml_file(
        config_file or (Path.cwd() / CONFIG_FILE_NAME))))

    env = os.environ if environ is None else environ
    merged.update({k[len(ENV_PREFIX):]: v for k, v in env.items()
                   if k.startswith(ENV_PREFIX) and len(k) > len(ENV_PREFIX)})
    return merged


def _validate_and_build(config: Mapping[str, Any]) -> ReplSettings:
    text_width = _as_int("TEXT_WIDTH", config.get("TEXT_WIDTH", DEFAULTS["TEXT_WIDTH"]))
    if text_width < 20:
        raise ValueError("TEXT_WIDTH must be >= 20")

    extra = {k: v for k, v in config.items() if k not in DEFAULTS}
    return ReplSettings(
        prompt=str(config.get("PROMPT", DEFAULTS["PROMPT"])),
        description=str(config.get("DESCRIPTION") or ""),
        text_width=text_width,
        enable_hints=_as_bool("ENABLE_HINTS", config.get(
            "ENABLE_HINTS", DEFAULTS["ENABLE_HINTS"])),
        enable_completion=_as_bool("ENABLE_COMPLETION", config.get(
            "ENABLE_COMPLETION", DEFAULTS["ENABLE_COMPLETION"])),
        predict_commands=_as_bool("PREDICT_COMMANDS", config.get(
            "PREDICT_COMMANDS", DEFAULTS["PREDICT_COMMANDS"])),
        history_file_path=_as_opt_path(config.get("HISTORY_FILE_PATH")),
        log_level=_as_log_level(config.get("LOG_LEVEL")),
        log_file_path=_as_opt_path(config.get("LOG_FILE_PATH")),
        extra=extra,
    )


# ---------- public API ----------

def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ReplSettings:
    """
    Load, merge, normalize, and validate REPL settings.
    No filesystem side-effects.
    """
    return _validate_and_build(_merge_sources(config_file, environ))

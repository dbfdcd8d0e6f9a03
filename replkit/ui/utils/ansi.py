#!/usr/bin/env python3
# replkit/ui/utils/ansi.py
from __future__ import annotations

import ctypes
import os
import re
from typing import Optional, TextIO

# ---- Core SGR map ------------------------------------------------------------

ANSI = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "underline": "\x1b[4m",

    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",

    "bright_black": "\x1b[90m",
    "bright_red": "\x1b[91m",
    "bright_cyan": "\x1b[96m",
}

ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_vt_enabled_cache: Optional[bool] = None


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_REGEX.sub("", text)


def enable_windows_vt() -> bool:
    """
    Enable ANSI (VT) processing on Windows consoles when possible.
    Returns True if ANSI escapes should work on the current process.
    On non-Windows systems, always returns True.
    """
    global _vt_enabled_cache
    if _vt_enabled_cache is not None:
        return _vt_enabled_cache

    if os.name != "nt" or os.environ.get("WT_SESSION") or os.environ.get("ANSICON"):
        _vt_enabled_cache = True
        return True

    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
        STD_ERROR_HANDLE = -12
        handle = kernel32.GetStdHandle(STD_ERROR_HANDLE)
        mode = ctypes.c_uint()
        if handle in (0, -1) or not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
            _vt_enabled_cache = False
        else:
            _vt_enabled_cache = bool(kernel32.SetConsoleMode(
                handle, mode.value | ENABLE_VIRTUAL_TERMINAL_PROCESSING))
    except (AttributeError, OSError):
        _vt_enabled_cache = False

    return _vt_enabled_cache


def supports_color(stream: TextIO) -> bool:
    """True if `stream` is an interactive terminal that renders ANSI and NO_COLOR is unset."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and enable_windows_vt()


def colorize(text: str, *styles: str) -> str:
    """
    Wrap text with one or more SGR styles/keys from ANSI (e.g., 'red', 'bold').
    Always auto-resets at the end.
    """
    seq = "".join(ANSI[s] for s in styles if s in ANSI)
    return f"{seq}{text}{ANSI['reset']}" if seq else text

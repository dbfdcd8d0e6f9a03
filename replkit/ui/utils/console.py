#!/usr/bin/env python3
# replkit/ui/utils/console.py
from __future__ import annotations

import sys
import threading
from typing import Optional, TextIO

from .ansi import strip_ansi, supports_color

# Single shared print mutex for all UI output (REPL messages and logging).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file: Optional[TextIO] = None, flush: bool = False) -> None:
    """Thread-safe single-line print; ANSI is stripped when `file` is not a color terminal."""
    target = sys.stdout if file is None else file
    if not supports_color(target):
        text = strip_ansi(text)
    with PRINT_MUTEX:
        target.write(f"{text}\n")
        if flush:
            target.flush()

#!/usr/bin/env python3
# replkit/__init__.py
from __future__ import annotations
"""
replkit: ad-hoc interactive command shells.

Register typed commands on a CommandRegistry and hand it to Repl:

    registry = CommandRegistry()

    @registry.command(ArgSpec("name"), ArgSpec("age", ArgType.INTEGER))
    def greet(name, age):
        return f"Hello {name}, you are {age}"

    Repl(registry).run()

Subpackages expose their full APIs; the names below are the common entry points.
"""

from replkit.commands import (
    QUIT,
    ArgSpec,
    ArgType,
    Command,
    CommandRegistry,
    CommandResult,
    CriticalError,
)
from replkit.config import ReplSettings, load_settings
from replkit.interface import Repl, complete, dispatch, execute_line, hint, tokenize

__version__ = "0.1.0"

__all__ = [
    "QUIT",
    "ArgSpec",
    "ArgType",
    "Command",
    "CommandRegistry",
    "CommandResult",
    "CriticalError",
    "ReplSettings",
    "load_settings",
    "Repl",
    "complete",
    "dispatch",
    "execute_line",
    "hint",
    "tokenize",
]

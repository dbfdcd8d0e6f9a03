#!/usr/bin/env python3
# replkit/interface/__init__.py
from __future__ import annotations

"""
Package for interactive console interface and command dispatch.

Provides:
- Tokenizer, value converter and argument binding.
- Command dispatcher and help formatting.
- Token-aware completion and hint helpers.
- CLI frontends with history and completion (prompt_toolkit / readline / plain).
- The REPL loop tying them together.
"""


# Parser FIRST (everything else depends on it)
from .parser import (
    BOOL_FALSE,
    BOOL_LITERALS,
    BOOL_TRUE,
    bind_args,
    build_usage,
    convert,
    format_value,
    quote_token,
    split_words,
    tokenize,
)

# Command dispatcher / help
from .handler import HELP_TEXT, dispatch, execute_line, format_command_help, format_help

# Completion / hints
from .completion import complete, current_token, hint

# CLI frontends
from .cli import BaseCLI, PromptToolkitCLI, ReadlineCLI, make_cli

# Loop
from .repl import RESERVED, LoopStatus, Repl

__all__ = [
    # parser
    "tokenize",
    "split_words",
    "quote_token",
    "convert",
    "format_value",
    "bind_args",
    "build_usage",
    "BOOL_TRUE",
    "BOOL_FALSE",
    "BOOL_LITERALS",
    # handler
    "dispatch",
    "execute_line",
    "format_command_help",
    "format_help",
    "HELP_TEXT",
    # completion
    "complete",
    "current_token",
    "hint",
    # cli
    "BaseCLI",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
    # repl
    "Repl",
    "LoopStatus",
    "RESERVED",
]

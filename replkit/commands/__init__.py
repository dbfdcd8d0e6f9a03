#!/usr/bin/env python3
# replkit/commands/__init__.py
from __future__ import annotations

"""
Package for command management and registration.

Provides:
- Argument schema and data structures (`ArgType`, `ArgSpec`, `Command`, `TypedArg`).
- Outcome variants returned by every dispatch.
- The per-session registry (`CommandRegistry`).
- The error taxonomy.

This package re-exports public APIs from:
- command_types.py
- commands.py
- errors.py
"""


from .command_types import (
    QUIT,
    ArgSpec,
    ArgType,
    ArityMismatch,
    Command,
    CommandHandler,
    CommandNotFound,
    CommandResult,
    CompletionProvider,
    ConversionError,
    HandlerError,
    HandlerRequestedQuit,
    Outcome,
    ParseFailure,
    Success,
    Token,
    TypedArg,
)
from .errors import (
    ConversionFailed,
    CriticalError,
    DuplicateCommand,
    InvalidCommandName,
    InvalidSignature,
    ReplError,
    ReservedCommandName,
    UnknownCommand,
    UnterminatedQuote,
)
from .commands import CommandRegistry, validate_name, validate_signature

__all__ = [
    # schema / data
    "ArgType",
    "ArgSpec",
    "Command",
    "CommandHandler",
    "CommandResult",
    "CompletionProvider",
    "Token",
    "TypedArg",
    "QUIT",
    # outcomes
    "Outcome",
    "Success",
    "CommandNotFound",
    "ArityMismatch",
    "ConversionError",
    "HandlerError",
    "HandlerRequestedQuit",
    "ParseFailure",
    # errors
    "ReplError",
    "DuplicateCommand",
    "InvalidSignature",
    "InvalidCommandName",
    "ReservedCommandName",
    "UnterminatedQuote",
    "ConversionFailed",
    "UnknownCommand",
    "CriticalError",
    # registry
    "CommandRegistry",
    "validate_name",
    "validate_signature",
]

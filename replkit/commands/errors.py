#!/usr/bin/env python3
# replkit/commands/errors.py
from __future__ import annotations

"""
Exception taxonomy for command registration and line parsing.

Registration errors are fatal to setup and propagate to the application.
Parsing and conversion errors are raised internally and turned into
Outcome values by the dispatcher; they never escape a dispatch call.
"""

from typing import Any


class ReplError(Exception):
    """Base class for all replkit errors."""


# ---------------- Registration ----------------

class DuplicateCommand(ReplError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"more than one command with name '{name}' added")
        self.name = name


class InvalidSignature(ReplError, ValueError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"invalid signature for '{name}': {reason}")
        self.name = name
        self.reason = reason


class InvalidCommandName(ReplError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"name '{name}' cannot be parsed as a single token, thus would be impossible to call")
        self.name = name


class ReservedCommandName(ReplError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' is a reserved command name")
        self.name = name


# ---------------- Runtime ----------------

class UnterminatedQuote(ReplError, ValueError):
    """A quoted token was still open at end of line."""

    def __init__(self, quote: str, position: int) -> None:
        super().__init__(f"unterminated {quote} quote starting at column {position + 1}")
        self.quote = quote
        self.position = position


class ConversionFailed(ReplError, ValueError):
    """A raw token could not be converted to the declared argument type."""

    def __init__(self, raw: str, expected: Any, reason: str = "") -> None:
        label = getattr(expected, "value", expected)
        message = f"failed to parse argument value '{raw}' as {label}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.raw = raw
        self.expected = expected
        self.reason = reason


class UnknownCommand(ReplError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No such command: {name}")
        self.name = name


class CriticalError(ReplError):
    """
    Raised by a handler to signal an error the REPL must not swallow.

    The dispatcher reports it as a critical HandlerError outcome and the
    REPL loop re-raises it out of `Repl.run()`.
    """

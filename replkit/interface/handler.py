#!/usr/bin/env python3
# replkit/interface/handler.py
from __future__ import annotations

"""
Command dispatch and help formatting.

Every dispatch attempt yields exactly one Outcome; handler exceptions,
arity problems and conversion failures are reported as values, never
raised. Help rendering works from the registry listing and signatures.
"""

import difflib
import logging
import textwrap
from typing import Iterable, Optional, Sequence

from replkit.commands import (
    QUIT,
    ArityMismatch,
    CommandNotFound,
    CommandRegistry,
    CommandResult,
    ConversionError,
    CriticalError,
    HandlerError,
    HandlerRequestedQuit,
    Outcome,
    ParseFailure,
    Success,
    Token,
    UnknownCommand,
    UnterminatedQuote,
)
from replkit.interface.parser import bind_args, build_usage, tokenize
from replkit.ui import format_table

logger = logging.getLogger(__name__)

# Short hint used in unknown command errors
HELP_TEXT = "Use 'help' to see available commands."

# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


def suggest_similar_names(registry: CommandRegistry, name: str) -> tuple[str, ...]:
    """Return commands the user may have meant: prefix matches and close spellings."""
    universe = registry.names()
    matches = {candidate for candidate in universe if name and candidate.startswith(name)}
    matches.update(difflib.get_close_matches(name, universe, n=3, cutoff=0.6))
    return tuple(sorted(matches))


def _token_text(tokens: Sequence[Token | str]) -> list[str]:
    return [token.text if isinstance(token, Token) else token for token in tokens]

# ---------------------------------------------------------------------------
# Core execution
# ---------------------------------------------------------------------------


def dispatch(registry: CommandRegistry, tokens: Sequence[Token | str]) -> Outcome:
    """
    Resolve, validate and run one tokenized command line.

    The first token names the command (exact match). The remaining tokens
    are bound to the signature and converted in order before the handler
    sees them.
    """
    words = _token_text(tokens)
    if not words:
        return Success()

    command_name, *arg_tokens = words
    command_obj = registry.lookup(command_name)
    if command_obj is None:
        logger.debug("unknown command %r", command_name)
        return CommandNotFound(command_name, suggest_similar_names(registry, command_name))

    bound = bind_args(command_obj, arg_tokens)
    if isinstance(bound, (ArityMismatch, ConversionError)):
        logger.debug("rejected %r: %s", command_name, bound.message)
        return bound
    typed_args, values = bound

    try:
        result = command_obj.invoke(*values)
    except CriticalError as exc:
        logger.debug("critical error from %r: %s", command_name, exc)
        return HandlerError(command_name, str(exc) or type(exc).__name__,
                            critical=True, error=exc)
    except Exception as exc:
        logger.debug("handler %r raised %s", command_name, type(exc).__name__)
        return HandlerError(command_name, _describe_exception(exc), error=exc)

    if result is QUIT:
        return HandlerRequestedQuit(command_name)
    if isinstance(result, CommandResult) and not result.ok:
        return HandlerError(command_name, str(result))
    return Success(result, tuple(typed_args))


def _describe_exception(exc: Exception) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def execute_line(registry: CommandRegistry, input_line: str) -> Outcome:
    """Tokenize and dispatch a single input line."""
    try:
        tokens = tokenize(input_line)
    except UnterminatedQuote as exc:
        return ParseFailure(str(exc), exc.position)
    return dispatch(registry, tokens)

# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------


def format_command_help(registry: CommandRegistry, name: str, *, width: int = 80) -> str:
    """Render help for one command. Raises UnknownCommand if it is not registered."""
    command_obj = registry.lookup(name)
    if command_obj is None:
        raise UnknownCommand(name)

    lines = [f"Usage:       {build_usage(command_obj)}"]
    description = command_obj.description or "(none)"
    lines.extend(textwrap.wrap(
        description,
        width=width,
        initial_indent="Description: ",
        subsequent_indent=" " * 13,
    ) or ["Description:"])

    if command_obj.signature:
        lines.append("Arguments:")
        for spec in command_obj.signature:
            flags = []
            if spec.optional:
                flags.append("optional")
                if spec.default is not None:
                    flags.append(f"default={spec.default!r}")
            if spec.variadic:
                flags.append("repeatable")
            if spec.choices:
                flags.append(f"one of {', '.join(spec.choices)}")
            suffix = f" ({'; '.join(flags)})" if flags else ""
            lines.append(f"  {spec.name:<12} {spec.type.value}{suffix}")

    if command_obj.example:
        lines.append(f"Example:     {command_obj.example}")
    return "\n".join(lines)


def format_help(
    registry: CommandRegistry,
    description: str = "",
    *,
    builtins: Iterable[str] = (),
    width: Optional[int] = None,
) -> str:
    """
    Render every registered command with its usage and one-line summary.

    Names listed in `builtins` are grouped under 'Other commands'. With
    `width`, long summaries wrap to keep the tables within it.
    """
    reserved = set(builtins)
    user_rows = []
    other_rows = []
    for command_obj in registry.list():
        row = [build_usage(command_obj), command_obj.summary]
        (other_rows if command_obj.name in reserved else user_rows).append(row)

    sections = []
    if description:
        sections.append(description.strip())
    if user_rows:
        sections.append("Available commands:\n" + format_table(
            user_rows, headers=["Command", "Description"], width=width))
    else:
        sections.append("No commands registered.")
    if other_rows:
        sections.append("Other commands:\n" + format_table(other_rows, border=False, width=width))
    return "\n\n".join(sections)

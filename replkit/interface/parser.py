#!/usr/bin/env python3
# replkit/interface/parser.py
from __future__ import annotations

"""
Argument parsing helpers for commands.

Responsibilities:
- Tokenize a command line into shell-like tokens with source spans.
- Convert raw tokens to typed values for a declared ArgType.
- Bind argument tokens positionally to a command signature.
- Render compact Usage strings from a signature.
"""

import re
from typing import Any, Callable, Optional, Sequence

from replkit.commands import (
    ArgSpec,
    ArgType,
    ArityMismatch,
    Command,
    ConversionError,
    ConversionFailed,
    Token,
    TypedArg,
    UnterminatedQuote,
)

QUOTES = ("'", '"')
ESCAPE = "\\"

# Boolean literals, matched case-insensitively. Completion offers the same set.
BOOL_TRUE: tuple[str, ...] = ("true", "yes", "on")
BOOL_FALSE: tuple[str, ...] = ("false", "no", "off")
BOOL_LITERALS: tuple[str, ...] = tuple(sorted(BOOL_TRUE + BOOL_FALSE))

_INT_RE = re.compile(r"[+-]?[0-9]+")


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


def _escapable(ch: str) -> bool:
    return ch.isspace() or ch in QUOTES or ch == ESCAPE


def tokenize(command_line: str, *, strict: bool = True) -> list[Token]:
    """
    Split a raw command line into tokens.

    Whitespace separates tokens unless quoted or escaped. Quote characters
    are stripped; adjacent quoted and bare parts form one token. With
    `strict=False` an unterminated quote is closed at end of line instead
    of raising UnterminatedQuote.
    """
    tokens: list[Token] = []
    buffer: list[str] = []
    start: Optional[int] = None
    quote: Optional[str] = None
    quote_start = 0
    i = 0
    length = len(command_line)

    while i < length:
        ch = command_line[i]

        if quote is not None:
            if ch == ESCAPE and i + 1 < length and command_line[i + 1] in (quote, ESCAPE):
                buffer.append(command_line[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            else:
                buffer.append(ch)
            i += 1
            continue

        if ch.isspace():
            if start is not None:
                tokens.append(Token("".join(buffer), start, i))
                buffer, start = [], None
            i += 1
            continue

        if start is None:
            start = i
        if ch in QUOTES:
            quote, quote_start = ch, i
        elif ch == ESCAPE and i + 1 < length and _escapable(command_line[i + 1]):
            buffer.append(command_line[i + 1])
            i += 1
        else:
            buffer.append(ch)
        i += 1

    if quote is not None and strict:
        raise UnterminatedQuote(quote, quote_start)
    if start is not None:
        tokens.append(Token("".join(buffer), start, length))
    return tokens


def split_words(command_line: str, *, strict: bool = True) -> list[str]:
    """Like tokenize, but return plain strings."""
    return [token.text for token in tokenize(command_line, strict=strict)]


def quote_token(text: str) -> str:
    """Quote `text` so that tokenize reads it back as one identical token."""
    if text and not any(_escapable(ch) for ch in text):
        return text
    escaped = text.replace(ESCAPE, ESCAPE * 2).replace('"', ESCAPE + '"')
    return f'"{escaped}"'


# ---------------------------------------------------------------------------
# Value conversion
# ---------------------------------------------------------------------------


def _to_text(raw: str) -> str:
    return raw


def _to_integer(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ConversionFailed(raw, ArgType.INTEGER, "expected a base-10 integer")
    return int(raw)


def _to_float(raw: str) -> float:
    # float() tolerates surrounding whitespace and digit separators; the shell does not.
    if not raw or raw != raw.strip() or "_" in raw:
        raise ConversionFailed(raw, ArgType.FLOAT, "expected a number")
    try:
        return float(raw)
    except ValueError:
        raise ConversionFailed(raw, ArgType.FLOAT, "expected a number") from None


def _to_boolean(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in BOOL_TRUE:
        return True
    if lowered in BOOL_FALSE:
        return False
    raise ConversionFailed(
        raw, ArgType.BOOLEAN, f"expected one of {', '.join(BOOL_LITERALS)}")


CONVERTERS: dict[ArgType, Callable[[str], Any]] = {
    ArgType.TEXT: _to_text,
    ArgType.INTEGER: _to_integer,
    ArgType.FLOAT: _to_float,
    ArgType.BOOLEAN: _to_boolean,
}


def convert(raw: str, arg_type: ArgType) -> TypedArg:
    """
    Convert a raw token to a TypedArg of the given type.

    Supported conversions:
        - text -> original text, never fails
        - integer -> optional sign and ASCII digits only
        - float -> Python float syntax without digit separators
        - boolean -> true/yes/on, false/no/off (case-insensitive)

    Raises ConversionFailed for malformed input.
    """
    return TypedArg(arg_type, CONVERTERS[arg_type](raw), raw)


def format_value(value: Any, arg_type: ArgType) -> str:
    """Render a value as text that `convert` turns back into an equal value."""
    if arg_type is ArgType.BOOLEAN:
        return "true" if value else "false"
    if arg_type is ArgType.FLOAT:
        return repr(float(value))
    if arg_type is ArgType.INTEGER:
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------


def match_arity(command_obj: Command, arg_count: int) -> Optional[ArityMismatch]:
    """Return an ArityMismatch if `arg_count` tokens cannot fill the signature."""
    minimum, maximum = command_obj.arity()
    if arg_count < minimum or (maximum is not None and arg_count > maximum):
        return ArityMismatch(
            command=command_obj.name,
            expected_min=minimum,
            expected_max=maximum,
            got=arg_count,
            usage=build_usage(command_obj),
        )
    return None


def bind_args(
    command_obj: Command,
    tokens: Sequence[str],
) -> tuple[list[TypedArg], list[Any]] | ArityMismatch | ConversionError:
    """
    Bind argument tokens positionally to the signature of `command_obj`.

    Returns (typed_args, handler_values) on success. Omitted optional
    arguments contribute their default to handler_values only. The first
    conversion failure stops binding; later tokens are not converted.
    """
    mismatch = match_arity(command_obj, len(tokens))
    if mismatch is not None:
        return mismatch

    typed_args: list[TypedArg] = []
    values: list[Any] = []
    for index, spec in enumerate(command_obj.signature):
        if spec.variadic:
            consumed = list(enumerate(tokens[index:], start=index))
        elif index < len(tokens):
            consumed = [(index, tokens[index])]
        else:
            values.append(spec.default)
            continue

        for position, raw in consumed:
            try:
                typed = convert(raw, spec.type)
            except ConversionFailed as exc:
                return ConversionError(
                    command=command_obj.name,
                    index=position,
                    raw=raw,
                    expected=spec.type,
                    reason=exc.reason,
                    usage=build_usage(command_obj),
                )
            typed_args.append(typed)
            values.append(typed.value)

    return typed_args, values


def render_signature(signature: Sequence[ArgSpec]) -> str:
    return " ".join(spec.render() for spec in signature)


def build_usage(command_obj: Command) -> str:
    """
    Render a compact usage string based on the command signature.

    Examples:
        'scan <host:text> [port:integer] [flags:text...]'
    """
    rendered = render_signature(command_obj.signature)
    return f"{command_obj.name} {rendered}" if rendered else command_obj.name

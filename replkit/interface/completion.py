#!/usr/bin/env python3
# replkit/interface/completion.py
from __future__ import annotations

"""
Command line completion and hint utilities.

This module offers token-aware suggestions for:
- First token: all registered command names.
- Subsequent tokens: boolean literals, static choices, or values from the
  command's per-position completion providers.

Both `complete` and `hint` are pure functions of the registry and the
input; the line editor may call them on every keystroke.
"""

from typing import Iterable, Optional

from replkit.commands import ArgSpec, ArgType, Command, CommandRegistry, Token
from replkit.interface.parser import BOOL_LITERALS, render_signature, tokenize


def _split_current_token(text_before_cursor: str) -> list[Token]:
    """
    Return the tokens of the buffer with the one under the cursor last.

    Behavior:
      - Tokenize leniently; an open quote runs to end of line.
      - If trailing whitespace follows the last token, append an empty
        token at the cursor to signal a new one.
    """
    tokens = tokenize(text_before_cursor, strict=False)
    end = len(text_before_cursor)
    if not tokens or tokens[-1].end < end:
        tokens.append(Token("", end, end))
    return tokens


def current_token(line: str, cursor: Optional[int] = None) -> tuple[int, str]:
    """Return (start offset, unquoted prefix) of the token being typed."""
    text_before_cursor = line if cursor is None else line[:cursor]
    token = _split_current_token(text_before_cursor)[-1]
    return token.start, token.text


def _provider_candidates(command_obj: Command, index: int, prefix: str, argv: list[str]) -> Iterable[str]:
    provider = command_obj.completers.get(
        f"pos{index}") or command_obj.completers.get("pos*")
    if not provider:
        return ()
    return provider(text=prefix, argv=argv, index=index)


def _argument_candidates(command_obj: Command, spec: ArgSpec, index: int, prefix: str, argv: list[str]) -> list[str]:
    if spec.type is ArgType.BOOLEAN:
        universe: Iterable[str] = BOOL_LITERALS
    else:
        universe = [*spec.choices, *_provider_candidates(command_obj, index, prefix, argv)]
    return sorted({str(word) for word in universe if str(word).startswith(prefix)})


def complete(registry: CommandRegistry, line: str, cursor: Optional[int] = None) -> list[str]:
    """
    Produce completion candidates for the token under the cursor.

    Strategy:
      1) If entering the first token, suggest command names with that prefix.
      2) For a known command, look up the ArgSpec for the current position
         and suggest boolean literals, static choices or provider values.
      3) Anything else yields no candidates; the partial token stays as typed.
    """
    text_before_cursor = line if cursor is None else line[:cursor]
    parts = _split_current_token(text_before_cursor)
    current_prefix = parts[-1].text

    if len(parts) == 1:
        return [name for name in registry.names() if name.startswith(current_prefix)]

    command_obj = registry.lookup(parts[0].text)
    if command_obj is None:
        return []

    argument_tokens = [token.text for token in parts[1:]]
    position_index = len(argument_tokens) - 1
    spec = command_obj.spec_at(position_index)
    if spec is None:
        return []
    return _argument_candidates(command_obj, spec, position_index, current_prefix, argument_tokens)


def hint(registry: CommandRegistry, line: str) -> str:
    """
    Describe what the user still has to type.

    - no complete command token yet: all command names
    - unknown command: empty
    - known command: the ArgSpecs not yet filled, e.g. '<name:text> <age:integer>'
    """
    tokens = tokenize(line, strict=False)
    command_complete = len(tokens) > 1 or (len(tokens) == 1 and tokens[0].end < len(line))
    if not command_complete:
        return " ".join(registry.names())

    command_obj = registry.lookup(tokens[0].text)
    if command_obj is None:
        return ""

    filled = len(tokens) - 1
    signature = command_obj.signature
    variadic = command_obj.variadic
    if variadic is not None and filled >= len(signature) - 1:
        return render_signature([variadic])
    if filled >= len(signature):
        return ""
    return render_signature(signature[filled:])

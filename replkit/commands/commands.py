#!/usr/bin/env python3
# replkit/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: in-memory registry of commands for one REPL session.
- CommandRegistry.command: decorator to register functions as commands.
- validate_signature: registration-time checks on argument schemas.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Sequence

from replkit.commands.command_types import ArgSpec, Command, CommandHandler, CompletionProvider
from replkit.commands.errors import (
    DuplicateCommand,
    InvalidCommandName,
    InvalidSignature,
    ReservedCommandName,
)

logger = logging.getLogger(__name__)

# Characters the tokenizer treats specially; a name containing one could never be typed back.
_SPECIAL_CHARS = frozenset("'\"\\")


def validate_name(name: str) -> None:
    """Reject names that would not survive tokenizing as a single token."""
    if not name or any(ch.isspace() or ch in _SPECIAL_CHARS for ch in name):
        raise InvalidCommandName(name)


def validate_signature(name: str, signature: Sequence[ArgSpec]) -> None:
    """
    Enforce the positional arity model.

    - at most one variadic spec, and only in last position
    - no required spec after an optional one
    - unique argument names
    """
    seen_names: set[str] = set()
    seen_optional = False
    for position, spec in enumerate(signature):
        if not isinstance(spec, ArgSpec):
            raise InvalidSignature(name, f"argument {position} is not an ArgSpec")
        if spec.name in seen_names:
            raise InvalidSignature(name, f"argument name '{spec.name}' used twice")
        seen_names.add(spec.name)

        if spec.variadic and position != len(signature) - 1:
            raise InvalidSignature(
                name, f"variadic argument '{spec.name}' must be the last argument")
        if spec.required and seen_optional:
            raise InvalidSignature(
                name, f"required argument '{spec.name}' follows an optional argument")
        seen_optional = seen_optional or spec.optional


class CommandRegistry:
    """Holds all command definitions and provides lookup utilities."""

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._commands_by_name: Dict[str, Command] = {}
        self._reserved: set[str] = set(reserved)

    # ---------------- Registration ----------------

    def add(self, command_obj: Command) -> Command:
        """Register a pre-built command, ensuring a valid name and signature."""
        validate_name(command_obj.name)
        if command_obj.name in self._reserved:
            raise ReservedCommandName(command_obj.name)
        if command_obj.name in self._commands_by_name:
            raise DuplicateCommand(command_obj.name)
        validate_signature(command_obj.name, command_obj.signature)

        self._commands_by_name[command_obj.name] = command_obj
        logger.debug("registered command %r (%d args)",
                     command_obj.name, len(command_obj.signature))
        return command_obj

    def register(
        self,
        name: str,
        signature: Sequence[ArgSpec],
        description: str,
        handler: CommandHandler,
        *,
        example: str = "",
        completers: Mapping[str, CompletionProvider] | None = None,
    ) -> Command:
        """Build and register a command. Returns the stored Command."""
        return self.add(Command(
            name=name,
            signature=tuple(signature),
            description=description.strip(),
            handler=handler,
            example=example,
            completers=completers or {},
        ))

    def install_builtin(self, command_obj: Command) -> Command:
        """
        Register a command under a reserved name.

        Fails with ReservedCommandName if an application command already
        took the name; later registrations of it fail the same way.
        """
        if command_obj.name in self._commands_by_name:
            raise ReservedCommandName(command_obj.name)
        self._reserved.discard(command_obj.name)
        self.add(command_obj)
        self._reserved.add(command_obj.name)
        return command_obj

    def command(
        self,
        *args: ArgSpec,
        name: str | None = None,
        description: str | None = None,
        example: str | None = None,
        completers: Mapping[str, CompletionProvider] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """
        Decorator to register a function as a command.

        - Function name is transformed from snake_case to kebab-case for `name` if not provided.
        - The docstring is used as description when none is given.
        """

        def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(
                (name or func.__name__).replace("_", "-"),
                args,
                (description or (func.__doc__ or "")),
                func,
                example=example or "",
                completers=completers,
            )
            return func

        return wrapper

    # ---------------- Lookup ----------------

    def lookup(self, name: str) -> Optional[Command]:
        """Return the command with exactly this name, or None."""
        return self._commands_by_name.get(name)

    def list(self) -> Iterator[Command]:
        """Yield commands ordered by name. Each call starts a fresh pass."""
        for name in sorted(self._commands_by_name):
            yield self._commands_by_name[name]

    def names(self) -> list[str]:
        """Return all command names, sorted, for completion."""
        return sorted(self._commands_by_name)

    def is_reserved(self, name: str) -> bool:
        return name in self._reserved

    def __contains__(self, name: object) -> bool:
        return name in self._commands_by_name

    def __len__(self) -> int:
        return len(self._commands_by_name)

    def __iter__(self) -> Iterator[Command]:
        return self.list()

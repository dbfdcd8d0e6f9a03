#!/usr/bin/env python3
# replkit/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- ArgType / ArgSpec: the declared argument schema of a command.
- Token / TypedArg: per-line values produced while parsing input.
- Command: a registered command with metadata and a handler.
- CommandResult: an optional normalized return value for handlers.
- Outcome variants: the single result of every dispatch attempt.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Union


class ArgType(enum.Enum):
    """Closed set of scalar argument kinds."""

    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ArgSpec:
    """
    One positional argument of a command signature.

    Attributes:
        name: Display name used in usage strings and hints.
        type: Scalar kind each consumed token is converted to.
        optional: Whether the argument may be omitted.
        variadic: Consumes all remaining tokens; must be the last spec.
        default: Value passed to the handler when an optional argument is omitted.
        choices: Static completion candidates for this position.
    """

    name: str
    type: ArgType = ArgType.TEXT
    optional: bool = False
    variadic: bool = False
    default: Any = None
    choices: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists for convenience; keep the spec hashable.
        object.__setattr__(self, "choices", tuple(self.choices))

    @property
    def required(self) -> bool:
        return not self.optional

    def render(self) -> str:
        """Render as '<name:type>', '[name:type]' or with a trailing '...'."""
        body = f"{self.name}:{self.type.value}"
        if self.variadic:
            body += "..."
        return f"[{body}]" if self.optional else f"<{body}>"


@dataclass(frozen=True, slots=True)
class Token:
    """A run of input text with its half-open span in the raw line."""

    text: str
    start: int
    end: int

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class TypedArg:
    """A token converted to a concrete value, tagged with its ArgType."""

    type: ArgType
    value: Any
    raw: str = field(default="", compare=False)


class CommandHandler(Protocol):
    """Protocol for any command handler."""

    def __call__(self, *args: Any) -> Any:  # pragma: no cover - signature only
        ...


CompletionProvider = Callable[..., Iterable[str]]


@dataclass(slots=True)
class CommandResult:
    """
    Normalized result container a handler may return.

    Attributes:
        ok: False turns the dispatch into a HandlerError.
        message: Human-readable summary or primary output.
        data: Optional machine-readable payload.
    """
    ok: bool = True
    message: str = ""
    data: Any = None

    def __str__(self) -> str:
        return self.message if self.message else ("ok" if self.ok else "error")


class _QuitSentinel:
    __slots__ = ()

    def __repr__(self) -> str:
        return "QUIT"


# Returned by a handler to end the REPL session.
QUIT = _QuitSentinel()


@dataclass(frozen=True, slots=True)
class Command:
    """
    A registered command. Immutable once built.

    Important fields:
        name: Unique command name, typed as the first token.
        signature: Ordered positional argument specs.
        description: User-facing description; its first line is the summary.
        handler: Called with converted values as positional arguments.
        example: One-line example usage string (optional).
        completers: Completion providers keyed 'posN' or 'pos*'. Each is
            called as provider(text=..., argv=..., index=...).
    """

    name: str
    signature: tuple[ArgSpec, ...]
    description: str
    handler: CommandHandler
    example: str = ""
    completers: Mapping[str, CompletionProvider] = field(
        default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "signature", tuple(self.signature))
        object.__setattr__(self, "completers", dict(self.completers))

    @property
    def summary(self) -> str:
        lines = self.description.strip().splitlines()
        return lines[0].strip() if lines else ""

    @property
    def variadic(self) -> Optional[ArgSpec]:
        if self.signature and self.signature[-1].variadic:
            return self.signature[-1]
        return None

    def arity(self) -> tuple[int, Optional[int]]:
        """Return (minimum, maximum) token counts; maximum is None if unbounded."""
        minimum = sum(1 for spec in self.signature if spec.required)
        maximum = None if self.variadic is not None else len(self.signature)
        return minimum, maximum

    def spec_at(self, index: int) -> Optional[ArgSpec]:
        """ArgSpec that consumes argument token `index`, or None past the end."""
        if index < len(self.signature) and not self.signature[index].variadic:
            return self.signature[index]
        return self.variadic if index >= len(self.signature) - 1 else None

    def invoke(self, *args: Any) -> Any:
        """Execute the underlying handler with provided arguments."""
        return self.handler(*args)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Success:
    value: Any = None
    args: tuple[TypedArg, ...] = ()

    ok = True


@dataclass(frozen=True, slots=True)
class CommandNotFound:
    name: str
    suggestions: tuple[str, ...] = ()

    ok = False


@dataclass(frozen=True, slots=True)
class ArityMismatch:
    command: str
    expected_min: int
    expected_max: Optional[int]
    got: int
    usage: str = ""

    ok = False

    @property
    def expected(self) -> str:
        if self.expected_max is None:
            return f"at least {self.expected_min}"
        if self.expected_max == self.expected_min:
            return str(self.expected_min)
        return f"{self.expected_min} to {self.expected_max}"

    @property
    def message(self) -> str:
        return f"wrong number of arguments: got {self.got}, expected {self.expected}"


@dataclass(frozen=True, slots=True)
class ConversionError:
    command: str
    index: int
    raw: str
    expected: ArgType
    reason: str = ""
    usage: str = ""

    ok = False

    @property
    def message(self) -> str:
        text = f"failed to parse argument {self.index + 1} value '{self.raw}' as {self.expected.value}"
        return f"{text}: {self.reason}" if self.reason else text


@dataclass(frozen=True, slots=True)
class HandlerError:
    command: str
    message: str
    critical: bool = False
    error: Optional[BaseException] = field(default=None, compare=False)

    ok = False


@dataclass(frozen=True, slots=True)
class HandlerRequestedQuit:
    command: str

    ok = True


@dataclass(frozen=True, slots=True)
class ParseFailure:
    message: str
    position: int

    ok = False


Outcome = Union[
    Success,
    CommandNotFound,
    ArityMismatch,
    ConversionError,
    HandlerError,
    HandlerRequestedQuit,
    ParseFailure,
]

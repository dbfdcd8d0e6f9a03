#!/usr/bin/env python3
# replkit/interface/repl.py
from __future__ import annotations

"""
Read-eval-print loop.

The loop reads one line through a CLI frontend, dispatches it against the
registry and renders the Outcome. It continues on every outcome except a
handler-requested quit; critical handler errors propagate out of `run()`.
"""

import enum
import logging
import sys
from typing import Optional, TextIO

from replkit.commands import (
    QUIT,
    ArgSpec,
    ArgType,
    ArityMismatch,
    Command,
    CommandNotFound,
    CommandRegistry,
    CommandResult,
    ConversionError,
    HandlerError,
    HandlerRequestedQuit,
    Outcome,
    ParseFailure,
    Success,
    Token,
    UnknownCommand,
    UnterminatedQuote,
)
from replkit.config import ReplSettings
from replkit.interface.cli import BaseCLI, make_cli
from replkit.interface.completion import complete, hint
from replkit.interface.handler import HELP_TEXT, dispatch, format_command_help, format_help
from replkit.interface.parser import tokenize
from replkit.ui import colorize, print_line

logger = logging.getLogger(__name__)

# Reserved command names. These commands are always added to the REPL.
RESERVED: tuple[tuple[str, str], ...] = (
    ("help", "Show this help message, or details of one command"),
    ("quit", "Quit repl"),
)


class LoopStatus(enum.Enum):
    """State of the REPL after one iteration."""

    CONTINUE = "continue"
    BREAK = "break"


class Repl:
    """
    Interactive shell over a CommandRegistry.

    Use `run()` to loop until quit/EOF, or `next()` to keep control between
    iterations. `execute()` runs a single line without any terminal I/O.
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        *,
        settings: Optional[ReplSettings] = None,
        cli: Optional[BaseCLI] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.registry = registry if registry is not None else CommandRegistry()
        self.settings = settings or ReplSettings()
        self.out = out if out is not None else sys.stderr
        self._cli = cli
        self._install_builtins()

    # ---------------- Built-ins ----------------

    def _install_builtins(self) -> None:
        # A registry shared between several Repls keeps the first set of built-ins.
        if all(self.registry.is_reserved(name) and name in self.registry for name, _ in RESERVED):
            return
        descriptions = dict(RESERVED)
        self.registry.install_builtin(Command(
            name="help",
            signature=(ArgSpec("command", ArgType.TEXT, optional=True),),
            description=descriptions["help"],
            handler=self._help,
            completers={"pos0": lambda text, argv, index: self.registry.names()},
        ))
        self.registry.install_builtin(Command(
            name="quit",
            signature=(),
            description=descriptions["quit"],
            handler=lambda: QUIT,
        ))

    def _help(self, name: Optional[str] = None) -> str | CommandResult:
        if name is None:
            return self.help()
        try:
            return format_command_help(self.registry, name, width=self.settings.text_width)
        except UnknownCommand as exc:
            return CommandResult(ok=False, message=str(exc))

    def help(self) -> str:
        """Return the formatted help message for all commands."""
        return format_help(
            self.registry,
            self.settings.description,
            builtins=[name for name, _ in RESERVED],
            width=self.settings.text_width,
        )

    # ---------------- Evaluation ----------------

    @property
    def cli(self) -> BaseCLI:
        if self._cli is None:
            self._cli = make_cli(
                self.settings.prompt,
                complete_fn=self.complete if self.settings.enable_completion else None,
                hint_fn=self.hint if self.settings.enable_hints else None,
                history_path=self.settings.history_file_path,
            )
        return self._cli

    def complete(self, line: str, cursor: Optional[int] = None) -> list[str]:
        return complete(self.registry, line, cursor)

    def hint(self, line: str) -> str:
        return hint(self.registry, line)

    def _predict(self, tokens: list[Token]) -> list[Token]:
        """Expand an unambiguous command-name prefix to the full name."""
        head = tokens[0]
        if head.text in self.registry:
            return tokens
        candidates = [name for name in self.registry.names() if name.startswith(head.text)]
        if len(candidates) != 1:
            return tokens
        logger.debug("predicted command %r from %r", candidates[0], head.text)
        return [Token(candidates[0], head.start, head.end), *tokens[1:]]

    def execute(self, line: str) -> Outcome:
        """Tokenize and dispatch one line; never raises for user input errors."""
        try:
            tokens = tokenize(line)
        except UnterminatedQuote as exc:
            return ParseFailure(str(exc), exc.position)
        if tokens and self.settings.predict_commands:
            tokens = self._predict(tokens)
        return dispatch(self.registry, tokens)

    def render(self, outcome: Outcome) -> None:
        """Print an outcome to the REPL output stream."""
        if isinstance(outcome, Success):
            if outcome.value is not None:
                print_line(str(outcome.value), file=self.out)
        elif isinstance(outcome, CommandNotFound):
            lines = [colorize(f"Command not found: {outcome.name}", "red")]
            if outcome.suggestions:
                lines.append("Candidates:\n  " + "\n  ".join(outcome.suggestions))
            lines.append(HELP_TEXT)
            print_line("\n".join(lines), file=self.out)
        elif isinstance(outcome, (ArityMismatch, ConversionError)):
            print_line(colorize(f"Error: {outcome.message}", "red"), file=self.out)
            print_line(f"Usage: {outcome.usage}", file=self.out)
        elif isinstance(outcome, (HandlerError, ParseFailure)):
            print_line(colorize(f"Error: {outcome.message}", "red"), file=self.out)

    def handle_line(self, line: str) -> LoopStatus:
        """Execute and render one line, returning whether the loop should go on."""
        outcome = self.execute(line)
        if isinstance(outcome, HandlerError) and outcome.critical:
            raise outcome.error  # type: ignore[misc]
        self.render(outcome)
        if isinstance(outcome, HandlerRequestedQuit):
            return LoopStatus.BREAK
        return LoopStatus.CONTINUE

    # ---------------- Loop ----------------

    def next(self) -> LoopStatus:
        """Run a single REPL iteration and return whether this is the last one."""
        try:
            line = self.cli.get_line()
        except EOFError:
            return LoopStatus.BREAK
        except KeyboardInterrupt:
            print_line("CTRL-C", file=self.out)
            return LoopStatus.BREAK
        if not line.strip():
            return LoopStatus.CONTINUE
        try:
            return self.handle_line(line)
        except KeyboardInterrupt:
            print_line("CTRL-C", file=self.out)
            return LoopStatus.BREAK

    def run(self) -> None:
        """Run the evaluation loop until LoopStatus.BREAK."""
        with self.cli:
            while self.next() is LoopStatus.CONTINUE:
                pass

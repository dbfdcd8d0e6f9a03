#!/usr/bin/env python3
# replkit/__main__.py
from __future__ import annotations

"""Demo shell: `python -m replkit`."""

import sys

from replkit.commands import QUIT, ArgSpec, ArgType, CommandRegistry, CommandResult
from replkit.config import load_settings
from replkit.interface import Repl
from replkit.ui import init_logger


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    colors = ("red", "green", "blue")

    @registry.command(
        ArgSpec("name"),
        ArgSpec("age", ArgType.INTEGER, optional=True),
        example='greet "Jane Doe" 30',
    )
    def greet(name: str, age: int | None) -> str:
        """Say hello to someone."""
        return f"Hello {name}!" if age is None else f"Hello {name}, {age} years young!"

    @registry.command(ArgSpec("x", ArgType.FLOAT), ArgSpec("rest", ArgType.FLOAT, variadic=True))
    def add(x: float, *rest: float) -> float:
        """Add numbers together."""
        return x + sum(rest)

    @registry.command(ArgSpec("x", ArgType.INTEGER), ArgSpec("y", ArgType.INTEGER))
    def count(x: int, y: int) -> str:
        """Count from X to Y."""
        return " ".join(str(i) for i in range(x, y + 1))

    @registry.command(ArgSpec("color", choices=colors), ArgSpec("bold", ArgType.BOOLEAN, optional=True, default=False))
    def paint(color: str, bold: bool) -> CommandResult:
        """Pick a color from the palette."""
        if color not in colors:
            return CommandResult(ok=False, message=f"unknown color '{color}'")
        return CommandResult(message=f"painting {'bold ' if bold else ''}{color}")

    @registry.command(name="exit")
    def exit_() -> object:
        """Leave the demo shell."""
        return QUIT

    return registry


def main() -> int:
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    init_logger("replkit", level=settings.log_level,
                logfile=str(settings.log_file_path) if settings.log_file_path else None)
    if not settings.description:
        settings = settings.with_overrides(description="replkit demo shell")
    Repl(build_registry(), settings=settings).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Shared fixtures for the replkit test suite."""

import io

import pytest

from replkit.commands import ArgSpec, ArgType, CommandRegistry


class Recorder:
    """Handler double that remembers every call."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args):
        self.calls.append(args)
        return self.result


@pytest.fixture
def recorder():
    return Recorder(result="done")


@pytest.fixture
def registry(recorder):
    """Registry with a mix of signatures used across tests."""
    reg = CommandRegistry()
    reg.register(
        "greet",
        [ArgSpec("name", ArgType.TEXT), ArgSpec("age", ArgType.INTEGER)],
        "Greet someone by name.\nSecond line is not part of the summary.",
        recorder,
    )
    reg.register(
        "sum",
        [ArgSpec("first", ArgType.FLOAT), ArgSpec("rest", ArgType.FLOAT, variadic=True)],
        "Add numbers",
        lambda first, *rest: first + sum(rest),
    )
    reg.register(
        "toggle",
        [ArgSpec("flag", ArgType.BOOLEAN), ArgSpec("label", optional=True, default="x")],
        "Toggle a flag",
        lambda flag, label: (flag, label),
    )
    return reg


@pytest.fixture
def out():
    return io.StringIO()

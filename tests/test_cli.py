"""
Tests for the line-editor frontends and their completion adapters.
"""

import logging
import sys

import pytest
from prompt_toolkit.document import Document

from replkit.commands import ArgSpec, CommandRegistry
from replkit.interface.cli import BaseCLI, PromptToolkitCLI, ReadlineCLI, make_cli
from replkit.interface.completion import complete


class FakeReadline:
    """Stand-in for the readline module: a buffer, a cursor and call records."""

    def __init__(self, buffer="", begidx=None, fail_history=False):
        self.buffer = buffer
        self.begidx = len(buffer) if begidx is None else begidx
        self.fail_history = fail_history
        self.completer = None
        self.delims = None
        self.bindings = []
        self.history_reads = []
        self.history_writes = []

    def set_buffer(self, buffer):
        self.buffer = buffer
        # readline splits on the configured delimiters only
        self.begidx = max(buffer.rfind(ch) for ch in self.delims) + 1

    def get_line_buffer(self):
        return self.buffer

    def get_begidx(self):
        return self.begidx

    def get_endidx(self):
        return len(self.buffer)

    def set_completer_delims(self, delims):
        self.delims = delims

    def set_completer(self, completer):
        self.completer = completer

    def parse_and_bind(self, binding):
        self.bindings.append(binding)

    def read_history_file(self, path):
        if self.fail_history:
            raise OSError("unreadable")
        self.history_reads.append(path)

    def write_history_file(self, path):
        if self.fail_history:
            raise OSError("unwritable")
        self.history_writes.append(path)


@pytest.fixture
def complete_fn():
    reg = CommandRegistry()
    reg.register("paint", [ArgSpec("color", choices=["red", "green", "dark green", "dark red"])],
                 "Paint", lambda color: color)
    reg.register("pause", [], "Pause", lambda: None)
    return lambda line, cursor: complete(reg, line, cursor)


@pytest.fixture
def fake_readline(monkeypatch):
    module = FakeReadline()
    monkeypatch.setitem(sys.modules, "readline", module)
    return module


def _all_matches(completer, fragment):
    matches = []
    state = 0
    while (word := completer(fragment, state)) is not None:
        matches.append(word)
        state += 1
    return matches


class TestReadlineCLI:

    @pytest.fixture
    def cli(self, fake_readline, complete_fn):
        cli = ReadlineCLI("> ", complete_fn=complete_fn)
        cli.setup()
        return cli

    def test_setup_installs_completer(self, cli, fake_readline):
        assert fake_readline.completer is not None
        assert fake_readline.delims == " \t\n"
        assert fake_readline.bindings == ["tab: complete"]

    def test_command_names(self, cli, fake_readline):
        fake_readline.set_buffer("pa")
        assert _all_matches(fake_readline.completer, "pa") == ["paint", "pause"]

    def test_plain_argument(self, cli, fake_readline):
        fake_readline.set_buffer("paint gr")
        assert _all_matches(fake_readline.completer, "gr") == ["green"]

    def test_opening_quote_is_replaced(self, cli, fake_readline):
        fake_readline.set_buffer('paint "gr')
        assert _all_matches(fake_readline.completer, '"gr') == ["green"]

    def test_quoted_token_spanning_a_space(self, cli, fake_readline):
        fake_readline.set_buffer('paint "dark g')
        assert _all_matches(fake_readline.completer, "g") == ['green"']

    def test_candidate_with_space_is_quoted(self, cli, fake_readline):
        fake_readline.set_buffer("paint da")
        assert _all_matches(fake_readline.completer, "da") == ['"dark green"', '"dark red"']

    def test_no_completer_without_complete_fn(self, fake_readline):
        ReadlineCLI("> ").setup()
        assert fake_readline.completer is None

    def test_history_round_trip(self, fake_readline, tmp_path):
        history = tmp_path / "nested" / "history"
        with ReadlineCLI("> ", history_path=history):
            assert history.exists()
        assert fake_readline.history_reads == [str(history)]
        assert fake_readline.history_writes == [str(history)]

    def test_history_errors_are_logged(self, fake_readline, tmp_path, caplog):
        fake_readline.fail_history = True
        with caplog.at_level(logging.WARNING, logger="replkit.interface.cli"):
            with ReadlineCLI("> ", history_path=tmp_path / "history"):
                pass
        assert "could not read history file" in caplog.text
        assert "could not write history file" in caplog.text


class TestPromptToolkitCLI:

    def _completions(self, cli, text):
        return [(c.text, c.start_position) for c in cli._completer.get_completions(Document(text), None)]

    def test_replaces_current_token(self, complete_fn):
        cli = PromptToolkitCLI("> ", complete_fn=complete_fn)
        assert self._completions(cli, "paint gr") == [("green", -2)]

    def test_replaces_opening_quote(self, complete_fn):
        cli = PromptToolkitCLI("> ", complete_fn=complete_fn)
        assert self._completions(cli, 'paint "dark g') == [('"dark green"', -7)]

    def test_new_token_after_space(self, complete_fn):
        cli = PromptToolkitCLI("> ", complete_fn=complete_fn)
        texts = [text for text, start in self._completions(cli, "paint ")]
        assert texts == ['"dark green"', '"dark red"', "green", "red"]

    def test_no_completer_without_complete_fn(self):
        assert PromptToolkitCLI("> ")._completer is None

    def test_toolbar_shows_hint_for_buffer(self, monkeypatch):
        class _App:
            class current_buffer:
                text = "paint "

        monkeypatch.setattr("prompt_toolkit.application.get_app", lambda: _App())
        cli = PromptToolkitCLI("> ", hint_fn=lambda line: f"hint for {line!r}")
        assert cli._toolbar() == "hint for 'paint '"

    def test_history_file_created_on_setup(self, tmp_path):
        history = tmp_path / "nested" / "history"
        PromptToolkitCLI("> ", history_path=history).setup()
        assert history.exists()


class TestMakeCLI:

    def test_prefers_prompt_toolkit(self):
        assert isinstance(make_cli("> "), PromptToolkitCLI)

    def test_falls_back_to_readline(self, monkeypatch, fake_readline):
        monkeypatch.setitem(sys.modules, "prompt_toolkit", None)
        assert isinstance(make_cli("> "), ReadlineCLI)

    def test_falls_back_to_plain_input(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "prompt_toolkit", None)
        monkeypatch.setitem(sys.modules, "readline", None)
        cli = make_cli("$ ")
        assert type(cli) is BaseCLI
        assert cli.prompt == "$ "

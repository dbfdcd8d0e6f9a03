#!/usr/bin/env python3
# replkit/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends (the line-editor collaborator).

Selection order:
    1) prompt_toolkit (completion menu, hint toolbar, history)
    2) readline / pyreadline3 (basic completion + history)
    3) plain input (last resort)

Each frontend only reads one line at a time; completion and hints are
supplied as plain callables so the dispatch engine stays backend-agnostic.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from replkit.interface.completion import current_token
from replkit.interface.parser import quote_token

logger = logging.getLogger(__name__)

# (text before cursor, cursor) -> candidates
CompleteFn = Callable[[str, int], Iterable[str]]
# whole buffer -> advisory text
HintFn = Callable[[str], str]


class BaseCLI:
    """
    Base interface for CLI frontends; also the plain `input()` fallback.

    Subclasses may override:
        - setup()
        - get_line()
        - teardown()

    get_line() raises EOFError at end of input and KeyboardInterrupt on Ctrl-C.
    This base also provides context manager support to guarantee teardown.
    """

    def __init__(self, prompt: str = "> ") -> None:
        self.prompt = prompt

    def setup(self) -> None:
        ...

    def get_line(self) -> str:
        return input(self.prompt)

    def teardown(self) -> None:
        ...

    # Context manager helpers
    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Rich line editor with history, live completion and a hint toolbar."""

    def __init__(
        self,
        prompt: str = "> ",
        *,
        complete_fn: Optional[CompleteFn] = None,
        hint_fn: Optional[HintFn] = None,
        history_path: Optional[Path] = None,
    ) -> None:
        super().__init__(prompt)
        from prompt_toolkit import prompt as pt_prompt
        from prompt_toolkit.application import get_app
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import FileHistory, InMemoryHistory

        self._prompt = pt_prompt
        self._history_path = history_path
        self._history = FileHistory(str(history_path)) if history_path else InMemoryHistory()
        self._completer = None
        self._toolbar = None

        if complete_fn is not None:
            class _Completer(Completer):
                def get_completions(self, document, complete_event):
                    text_before_cursor = document.text_before_cursor
                    # replace exactly the current token, including any opening quote
                    start, _ = current_token(text_before_cursor)
                    replace_len = len(text_before_cursor) - start
                    for word in complete_fn(text_before_cursor, len(text_before_cursor)):
                        yield Completion(quote_token(word), start_position=-replace_len, display=word)

            self._completer = _Completer()

        if hint_fn is not None:
            def _toolbar() -> str:
                return hint_fn(get_app().current_buffer.text)

            self._toolbar = _toolbar

    def setup(self) -> None:
        if self._history_path is not None:
            self._history_path.parent.mkdir(parents=True, exist_ok=True)
            self._history_path.touch(exist_ok=True)

    def get_line(self) -> str:
        return self._prompt(
            self.prompt,
            history=self._history,
            completer=self._completer,
            complete_while_typing=False,
            bottom_toolbar=self._toolbar,
        )


# ===== Fallback: readline / pyreadline3 =====
class ReadlineCLI(BaseCLI):
    """Fallback editor with basic completion and history."""

    def __init__(
        self,
        prompt: str = "> ",
        *,
        complete_fn: Optional[CompleteFn] = None,
        history_path: Optional[Path] = None,
    ) -> None:
        super().__init__(prompt)
        import readline  # type: ignore[attr-defined]

        self.readline = readline
        self._complete_fn = complete_fn
        self._history_path = history_path

    def setup(self) -> None:
        if self._history_path is not None:
            self._history_path.parent.mkdir(parents=True, exist_ok=True)
            self._history_path.touch(exist_ok=True)
            try:
                self.readline.read_history_file(str(self._history_path))
            except OSError as exc:
                logger.warning("could not read history file %s: %s", self._history_path, exc)

        if self._complete_fn is None:
            return
        complete_fn = self._complete_fn
        self.readline.set_completer_delims(" \t\n")

        def _complete(text_fragment: str, state_index: int) -> Optional[str]:
            # readline replaces only [begidx:endidx]; the token may start earlier
            # (opening quote, escaped or quoted spaces), so trim that lead-in off.
            buffer_text = self.readline.get_line_buffer()[:self.readline.get_endidx()]
            start, _ = current_token(buffer_text)
            offset = max(self.readline.get_begidx() - start, 0)
            lead_in = buffer_text[start:start + offset]
            matches = [quote_token(word) for word in complete_fn(buffer_text, len(buffer_text))]
            matches = [word[offset:] for word in matches if word.startswith(lead_in)]
            return matches[state_index] if state_index < len(matches) else None

        self.readline.set_completer(_complete)
        self.readline.parse_and_bind("tab: complete")

    def get_line(self) -> str:
        return input(self.prompt)

    def teardown(self) -> None:
        if self._history_path is None:
            return
        try:
            self.readline.write_history_file(str(self._history_path))
        except OSError as exc:
            logger.warning("could not write history file %s: %s", self._history_path, exc)


def make_cli(
    prompt: str = "> ",
    *,
    complete_fn: Optional[CompleteFn] = None,
    hint_fn: Optional[HintFn] = None,
    history_path: Optional[Path] = None,
) -> BaseCLI:
    """
    Factory to select the best available CLI frontend at runtime.
    """
    try:
        import prompt_toolkit  # noqa: F401
        return PromptToolkitCLI(prompt, complete_fn=complete_fn, hint_fn=hint_fn,
                                history_path=history_path)
    except ImportError:
        logger.debug("prompt_toolkit unavailable, trying readline")
    try:
        import readline  # noqa: F401
        return ReadlineCLI(prompt, complete_fn=complete_fn, history_path=history_path)
    except ImportError:
        logger.debug("readline unavailable, using plain input")
    # Last resort: plain input with no completion or history
    return BaseCLI(prompt)

#!/usr/bin/env python3
# tabline/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (completion menu with tooltips + history)
    2) readline / pyreadline3 (basic completion + history)
    3) plain input (last resort)
"""

from pathlib import Path
from typing import Any, Mapping, Optional

from tabline.interface.completion import DEFAULT_MAX_RESULTS, complete, suggest
from tabline.interface.provider import DEFAULT_TIMEOUT

# History location in the user home directory
HISTORY_FILE_PATH = Path.home() / ".tabline_history"


class BaseCLI:
    """
    Base interface for CLI frontends.

    Subclasses should implement:
        - setup()
        - get_line()
        - teardown()

    This base also provides context manager support to guarantee teardown.
    """

    prompt_text = "PS> "

    def setup(self) -> None:  # pragma: no cover - interface
        ...

    def get_line(self) -> str:
        return input(self.prompt_text)

    def teardown(self) -> None:  # pragma: no cover - interface
        ...

    # Context manager helpers
    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.teardown()
        except OSError:
            pass


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Rich line editor with history and a completion menu."""

    def __init__(
        self,
        prompt_text: str = "PS> ",
        *,
        enable_completion: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        max_results: int = DEFAULT_MAX_RESULTS,
        variables: Mapping[str, Any] | None = None,
    ) -> None:
        from prompt_toolkit import prompt
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import FileHistory
        from prompt_toolkit.key_binding import KeyBindings

        self._prompt = prompt
        self._history = FileHistory(str(HISTORY_FILE_PATH))
        self.prompt_text = prompt_text
        self._enable_completion = enable_completion

        class _Completer(Completer):
            def get_completions(self, document, complete_event):
                text = document.text
                cursor = document.cursor_position
                result = complete(text, cursor, timeout=timeout,
                                  max_results=max_results, variables=variables)
                # prompt_toolkit replaces text before the cursor only
                start_position = min(0, result.replacement_start - cursor)
                for candidate in result.candidates:
                    yield Completion(
                        candidate.insertion_text,
                        start_position=start_position,
                        display=candidate.display_text,
                        display_meta=candidate.tooltip,
                    )

        self._completer = _Completer() if enable_completion else None

        # Tab opens the menu; typing keeps it live.
        kb = KeyBindings()

        @kb.add("backspace")
        def _(event):
            b = event.app.current_buffer
            if b.read_only():
                return
            if b.selection_state:
                b.delete_selection()
            else:
                b.delete_before_cursor(1)
            # show fresh suggestions after deletion
            if self._enable_completion:
                b.start_completion(select_first=False)

        self._key_bindings = kb

    def setup(self) -> None:
        HISTORY_FILE_PATH.touch(exist_ok=True)

    def get_line(self) -> str:
        return self._prompt(
            self.prompt_text,
            history=self._history,
            completer=self._completer,
            complete_while_typing=False,
            key_bindings=self._key_bindings,
        )

    def teardown(self) -> None:
        # prompt_toolkit flushes history automatically
        pass


# ===== Fallback: readline / pyreadline3 =====
class ReadlineCLI(BaseCLI):
    """Fallback editor with basic completion and history."""

    def __init__(self, prompt_text: str = "PS> ", *, enable_completion: bool = True, **options: Any) -> None:
        import readline  # type: ignore[attr-defined]

        self.readline = readline
        self.prompt_text = prompt_text
        self._enable_completion = enable_completion
        self._options = options

    def setup(self) -> None:
        HISTORY_FILE_PATH.touch(exist_ok=True)
        try:
            self.readline.read_history_file(  # type: ignore
                str(HISTORY_FILE_PATH))
        except OSError:
            pass

        if not self._enable_completion:
            return

        # Whole whitespace-separated words; '-Grid.Row' and '-Name:value' stay intact
        self.readline.set_completer_delims(" \t\n")  # type: ignore

        def _complete(text_fragment: str, state_index: int) -> Optional[str]:
            buffer_text = self.readline.get_line_buffer()[:self.readline.get_endidx()]  # type: ignore
            matches = suggest(buffer_text, **self._options)
            return matches[state_index] if state_index < len(matches) else None

        self.readline.set_completer(_complete)  # type: ignore
        self.readline.parse_and_bind("tab: complete")  # type: ignore

    def teardown(self) -> None:
        try:
            self.readline.write_history_file(  # type: ignore
                str(HISTORY_FILE_PATH))
        except OSError:
            pass


def make_cli(prompt_text: str = "PS> ", **options: Any) -> BaseCLI:
    """
    Factory to select the best available CLI frontend at runtime.

    `options` are passed to the frontend: enable_completion, timeout,
    max_results, variables.
    """
    # Try prompt_toolkit first
    try:
        import prompt_toolkit  # noqa: F401
        return PromptToolkitCLI(prompt_text, **options)
    except ImportError:
        # Try readline/pyreadline3
        try:
            import readline  # noqa: F401
            return ReadlineCLI(prompt_text, **options)
        except ImportError:
            # Last resort: plain input with no completion or history
            cli = BaseCLI()
            cli.prompt_text = prompt_text
            return cli

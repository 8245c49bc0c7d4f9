"""Single-line editor driven by raw key events."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .terminal import Display

ENTER = "\r"
BACKSPACE = ("\x7f", "\b")
ARROW_UP = "\x1b[A"
ARROW_DOWN = "\x1b[B"
ARROW_RIGHT = "\x1b[C"
ARROW_LEFT = "\x1b[D"
HOME = ("\x1b[H", "\x1b[1~", "\x01")
END = ("\x1b[F", "\x1b[4~", "\x05")
INTERRUPT = "\x03"
CLEAR = "\x0c"

_ERASE_LINE = "\r\x1b[2K"


def _left(count: int) -> str:
    return f"\x1b[{count}D" if count > 0 else ""


def _right(count: int) -> str:
    return f"\x1b[{count}C" if count > 0 else ""


@dataclass(slots=True)
class EditorState:
    buffer: str = ""
    cursor: int = 0
    history: list[str] = field(default_factory=list)
    # None means "not browsing history"
    history_index: int | None = None

    def reset_line(self) -> None:
        self.buffer = ""
        self.cursor = 0
        self.history_index = None


class LineEditor:
    """Maintains one editable line plus history and mirrors it on a display.

    Feed raw keys to :meth:`handle`; it returns the submitted line when the
    user presses enter on a non-blank buffer and ``None`` otherwise. The
    caller is expected to render the command's result and then call
    :meth:`show_prompt` before feeding more keys.
    """

    def __init__(
        self,
        display: "Display",
        *,
        prompt: Callable[[], str] | str = "$ ",
        history: list[str] | None = None,
    ) -> None:
        self.display = display
        self._prompt = prompt
        self.state = EditorState(history=list(history or []))

    @property
    def buffer(self) -> str:
        return self.state.buffer

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def history(self) -> list[str]:
        return self.state.history

    def prompt(self) -> str:
        return self._prompt() if callable(self._prompt) else self._prompt

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def show_prompt(self) -> None:
        self.display.write(self.prompt())

    def redraw(self) -> None:
        """Repaint the prompt and buffer, leaving the terminal cursor in place."""
        state = self.state
        self.display.write(
            _ERASE_LINE + self.prompt() + state.buffer + _left(len(state.buffer) - state.cursor)
        )

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------
    def handle(self, key: str) -> str | None:
        if key in (ENTER, "\n"):
            return self._submit()
        if key in BACKSPACE:
            self._backspace()
        elif key == ARROW_LEFT:
            self._move_to(self.state.cursor - 1)
        elif key == ARROW_RIGHT:
            self._move_to(self.state.cursor + 1)
        elif key in HOME:
            self._move_to(0)
        elif key in END:
            self._move_to(len(self.state.buffer))
        elif key == ARROW_UP:
            self._history_back()
        elif key == ARROW_DOWN:
            self._history_forward()
        elif key == INTERRUPT:
            self._interrupt()
        elif key == CLEAR:
            self.display.clear()
            self.redraw()
        elif key and not key.startswith("\x1b") and key.isprintable():
            self.insert(key)
        return None

    def insert(self, text: str) -> None:
        state = self.state
        tail = state.buffer[state.cursor :]
        state.buffer = state.buffer[: state.cursor] + text + tail
        state.cursor += len(text)
        # only the inserted text and the old tail need repainting
        self.display.write(text + tail + _left(len(tail)))

    def _backspace(self) -> None:
        state = self.state
        if state.cursor == 0:
            return
        tail = state.buffer[state.cursor :]
        state.buffer = state.buffer[: state.cursor - 1] + tail
        state.cursor -= 1
        self.display.write("\b" + tail + " " + _left(len(tail) + 1))

    def _move_to(self, position: int) -> None:
        state = self.state
        position = max(0, min(position, len(state.buffer)))
        delta = position - state.cursor
        if delta == 0:
            return
        state.cursor = position
        self.display.write(_right(delta) if delta > 0 else _left(-delta))

    def _replace_line(self, text: str) -> None:
        self.state.buffer = text
        self.state.cursor = len(text)
        self.redraw()

    def _history_back(self) -> None:
        state = self.state
        if not state.history:
            return
        if state.history_index is None:
            state.history_index = len(state.history) - 1
        elif state.history_index > 0:
            state.history_index -= 1
        else:
            return
        self._replace_line(state.history[state.history_index])

    def _history_forward(self) -> None:
        state = self.state
        if state.history_index is None:
            return
        if state.history_index < len(state.history) - 1:
            state.history_index += 1
            self._replace_line(state.history[state.history_index])
        else:
            state.history_index = None
            self._replace_line("")

    def _interrupt(self) -> None:
        self.display.write("^C")
        self.display.write_line()
        self.state.reset_line()
        self.show_prompt()

    def _submit(self) -> str | None:
        state = self.state
        raw = state.buffer
        self.display.write_line()
        state.reset_line()
        line = raw.strip()
        if not line:
            self.show_prompt()
            return None
        state.history.append(raw)
        return line


__all__ = ["EditorState", "LineEditor"]
